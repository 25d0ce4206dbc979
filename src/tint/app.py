# -*- coding: utf-8 -*-
"""
src/tint/app.py

Core application controller for Tint.

This module contains `TintApp`, which wires the color store, the global
hotkey, the system tray icon and the history panel together, and owns the
application's shutdown sequence.
"""

import logging
from typing import Callable, Optional

from PyQt6.QtCore import QObject, pyqtSignal
from PyQt6.QtGui import QAction, QIcon
from PyQt6.QtWidgets import QApplication, QMenu, QSystemTrayIcon

from .config import APP_NAME, Config
from .core.color_store import ColorStore, History
from .core.persistence import HistoryPersistence, SlotStorage
from .core.swatch import ColorSample
from .gui.history_panel import HistoryPanel, swatch_icon
from .gui.sampler_overlay import SamplerOverlay
from .utils.clipboard_manager import copy_to_clipboard
from .utils.hotkey_manager import HotkeyManager

logger = logging.getLogger(__name__)


class TintApp(QObject):
    """
    The main application controller. Manages the tray UI, the hotkey and
    the color pick workflow.
    """
    # Carries callables from other threads (the pynput listener) onto the
    # GUI thread, which owns the store and all widgets.
    dispatch_requested = pyqtSignal(object)
    # Store notifications, re-emitted on the GUI thread.
    history_changed = pyqtSignal(object)

    def __init__(self, app: QApplication, config: Optional[Config] = None,
                 hotkey_manager: Optional[HotkeyManager] = None):
        super().__init__()
        self.app = app
        self.config = config or Config()
        self.overlay: Optional[SamplerOverlay] = None
        self._shut_down = False

        self.dispatch_requested.connect(self._run_dispatched)

        persistence = HistoryPersistence(SlotStorage(self.config.app_dir), key=self.config.storage_key)
        self.store = ColorStore(
            persistence,
            clipboard=copy_to_clipboard,
            retention=self.config.retention,
            max_history=self.config.max_history,
            cleanup_interval=self.config.cleanup_interval,
        )
        self.store.initialize()

        self.hotkey_manager = hotkey_manager or HotkeyManager(
            self.config.hotkey, dispatcher=self.dispatch_requested.emit
        )

        self.panel = HistoryPanel(self.store)
        self.panel.pick_requested.connect(self.start_pick)

        self.setup_tray_icon()
        self.history_changed.connect(self._update_tray_icon)
        self.store.subscribe(self.history_changed.emit)
        self._update_tray_icon(self.store.history)

        if not self.hotkey_manager.register(self.start_pick):
            self.tray_icon.showMessage(
                f"{APP_NAME}",
                f"Could not register the global hotkey {self.config.hotkey}. "
                "Use the tray menu to pick colors.",
                QSystemTrayIcon.MessageIcon.Warning
            )

        self.app.aboutToQuit.connect(self.shutdown)

    def _run_dispatched(self, callback: Callable[[], None]):
        callback()

    def setup_tray_icon(self):
        """Creates and configures the system tray icon and its menu."""
        self.tray_icon = QSystemTrayIcon()
        self.tray_icon.setToolTip(f"{APP_NAME} - Press {self.config.hotkey} to pick a color")

        menu = QMenu()

        pick_action = QAction(f"Pick Color ({self.config.hotkey})", self.app)
        pick_action.triggered.connect(self.start_pick)
        menu.addAction(pick_action)

        show_action = QAction("Show History", self.app)
        show_action.triggered.connect(self.show_panel)
        menu.addAction(show_action)

        clear_action = QAction("Clear History", self.app)
        clear_action.triggered.connect(self.store.clear)
        menu.addAction(clear_action)

        menu.addSeparator()

        quit_action = QAction("Quit", self.app)
        quit_action.triggered.connect(self.quit_app)
        menu.addAction(quit_action)

        self.tray_menu = menu
        self.tray_icon.setContextMenu(menu)
        self.tray_icon.activated.connect(self._on_tray_activated)
        self.tray_icon.show()

    def _update_tray_icon(self, history: History):
        """Shows the most recent color as the tray icon."""
        if history:
            self.tray_icon.setIcon(swatch_icon(*history[0].rgb, size=32))
        else:
            self.tray_icon.setIcon(QIcon.fromTheme("applications-graphics"))

    def _on_tray_activated(self, reason):
        if reason == QSystemTrayIcon.ActivationReason.Trigger:
            self.show_panel()

    def show_panel(self):
        self.panel.show()
        self.panel.raise_()
        self.panel.activateWindow()

    def start_pick(self):
        """Shows the sampling overlay, unless a pick is already in progress."""
        if self.overlay is not None:
            logger.debug("Pick already in progress.")
            return
        self.overlay = SamplerOverlay()
        self.overlay.color_sampled.connect(self.on_color_sampled)
        self.overlay.show()

    def on_color_sampled(self, sample: Optional[ColorSample]):
        """Adds the sampled color to the history; a cancelled pick changes nothing."""
        self.overlay = None
        swatch = self.store.capture_from(lambda: sample)
        if swatch is not None:
            self.tray_icon.showMessage(
                f"{APP_NAME}", f"{swatch.hex} copied to clipboard.",
                QSystemTrayIcon.MessageIcon.Information, 2000
            )

    def shutdown(self):
        """Releases the hotkey and stops background work. Safe to call twice."""
        if self._shut_down:
            return
        self._shut_down = True
        logger.info(f"Shutting down {APP_NAME}...")
        self.hotkey_manager.unregister()
        self.store.shutdown()
        self.panel.detach()
        self.tray_icon.hide()

    def quit_app(self):
        """Shuts down and quits the application."""
        self.shutdown()
        self.app.quit()
