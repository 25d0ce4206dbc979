# -*- coding: utf-8 -*-
"""
src/tint/gui/history_panel.py

Defines the HistoryPanel widget listing recently picked colors.

The panel is purely reactive: it renders whatever history snapshot the
ColorStore publishes and forwards button clicks back to the store or the
application. Clicking a row copies that color's hex code again.
"""

import logging

from PyQt6.QtCore import Qt, QTimer, pyqtSignal
from PyQt6.QtGui import QColor, QFont, QIcon, QPixmap
from PyQt6.QtWidgets import (QLabel, QListWidget, QListWidgetItem, QPushButton,
                             QVBoxLayout, QWidget)

from ..core.color_store import ColorStore, History

logger = logging.getLogger(__name__)

PANEL_WIDTH = 200
PANEL_MAX_HEIGHT = 500
COPIED_FEEDBACK_MS = 2000


def swatch_icon(red: int, green: int, blue: int, size: int = 16) -> QIcon:
    """Builds a solid square icon in the given color."""
    pixmap = QPixmap(size, size)
    pixmap.fill(QColor(red, green, blue))
    return QIcon(pixmap)


class HistoryPanel(QWidget):
    """
    A small tool window with the pick/clear actions and the color history.
    """
    pick_requested = pyqtSignal()
    # Store notifications may arrive on the reaper thread; this signal
    # moves them onto the GUI thread.
    history_changed = pyqtSignal(object)

    def __init__(self, store: ColorStore, parent: QWidget = None):
        super().__init__(parent)
        self.store = store
        self._copied_id = None

        self._setup_window_properties()
        self._setup_ui()

        self._copied_timer = QTimer(self)
        self._copied_timer.setSingleShot(True)
        self._copied_timer.timeout.connect(self._reset_copied)

        self.history_changed.connect(self.render_history)
        self._unsubscribe = store.subscribe(self.history_changed.emit)
        self.render_history(store.history)

    def _setup_window_properties(self):
        self.setWindowTitle("Tint")
        self.setWindowFlags(Qt.WindowType.Tool | Qt.WindowType.WindowStaysOnTopHint)
        self.setFixedWidth(PANEL_WIDTH)
        self.setMaximumHeight(PANEL_MAX_HEIGHT)

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(8)

        header = QLabel("Tint")
        header_font = QFont()
        header_font.setBold(True)
        header.setFont(header_font)
        layout.addWidget(header)

        self.pick_button = QPushButton("Pick Color")
        self.pick_button.clicked.connect(self.pick_requested)
        layout.addWidget(self.pick_button)

        self.list_widget = QListWidget()
        self.list_widget.setFont(QFont("monospace"))
        self.list_widget.itemClicked.connect(self._on_item_clicked)
        layout.addWidget(self.list_widget)

        self.clear_button = QPushButton("Clear History")
        self.clear_button.clicked.connect(self.store.clear)
        layout.addWidget(self.clear_button)

    def render_history(self, history: History):
        """Rebuilds the list from a history snapshot (newest first)."""
        self.list_widget.clear()
        for swatch in history:
            label = swatch.hex
            if swatch.id == self._copied_id:
                label += "   Copied"
            item = QListWidgetItem(swatch_icon(*swatch.rgb), label)
            item.setData(Qt.ItemDataRole.UserRole, swatch.id)
            item.setToolTip(f"rgb({swatch.rgb.red}, {swatch.rgb.green}, {swatch.rgb.blue})")
            self.list_widget.addItem(item)
        has_items = bool(history)
        self.list_widget.setVisible(has_items)
        self.clear_button.setEnabled(has_items)
        self.adjustSize()

    def _on_item_clicked(self, item: QListWidgetItem):
        swatch_id = item.data(Qt.ItemDataRole.UserRole)
        if self.store.copy(swatch_id):
            self._copied_id = swatch_id
            self._copied_timer.start(COPIED_FEEDBACK_MS)
            self.render_history(self.store.history)

    def _reset_copied(self):
        self._copied_id = None
        self.render_history(self.store.history)

    def closeEvent(self, event):
        # Hide rather than destroy; the tray icon can bring the panel back.
        event.ignore()
        self.hide()

    def detach(self):
        """Stops listening to the store."""
        self._unsubscribe()
