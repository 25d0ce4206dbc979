# -*- coding: utf-8 -*-
"""
src/tint/utils/hotkey_manager.py

Lifecycle management for the global "pick color" hotkey, using 'pynput'.

The HotkeyManager is a two-state machine (unregistered/registered) around a
`pynput.keyboard.GlobalHotKeys` listener. The listener runs in its own thread,
so activations are handed to a dispatcher that moves them onto whichever
thread owns the application state (the Qt GUI thread in the app).
"""

import atexit
import enum
import logging
import platform
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

if platform.system() == "Darwin":
    DEFAULT_HOTKEY = "<cmd>+<shift>+c"
else:
    DEFAULT_HOTKEY = "<ctrl>+<shift>+c"


class HotkeyState(enum.Enum):
    UNREGISTERED = "unregistered"
    REGISTERED = "registered"


def _call_directly(callback: Callable[[], None]):
    callback()


class HotkeyManager:
    """
    Owns the registration of one system-wide hotkey.

    Attributes:
        hotkey_str (str): The pynput hotkey string (e.g., '<ctrl>+<shift>+c').
        dispatcher (Callable[[Callable[[], None]], None]): Runs the stored
            callback on the right thread. Defaults to calling it directly.
        state (HotkeyState): Current registration state.
    """

    def __init__(
        self,
        hotkey_str: str = DEFAULT_HOTKEY,
        dispatcher: Optional[Callable[[Callable[[], None]], None]] = None,
        listener_factory: Optional[Callable[..., Any]] = None,
    ):
        self.hotkey_str = hotkey_str
        self.dispatcher = dispatcher or _call_directly
        self._listener_factory = listener_factory
        self._listener = None
        self._callback: Optional[Callable[[], None]] = None
        self.state = HotkeyState.UNREGISTERED

    @property
    def is_registered(self) -> bool:
        return self.state is HotkeyState.REGISTERED

    def _make_listener(self, hotkeys):
        if self._listener_factory is not None:
            return self._listener_factory(hotkeys)
        # pynput picks its backend at import time and fails on a machine
        # without an input session, so only import it when registering.
        from pynput import keyboard
        return keyboard.GlobalHotKeys(hotkeys)

    def _on_activate(self):
        """Called by pynput on its listener thread."""
        callback = self._callback
        if callback is None:
            return
        logger.debug(f"Hotkey '{self.hotkey_str}' activated.")
        try:
            self.dispatcher(callback)
        except Exception as e:
            logger.error(f"Error dispatching hotkey callback: {e}", exc_info=True)

    def register(self, callback: Callable[[], None]) -> bool:
        """
        Binds the hotkey and starts listening for it.

        Args:
            callback (Callable[[], None]): Run (through the dispatcher) on activation.

        Returns:
            bool: True if the hotkey is now registered. False if it was already
            registered or the binding failed; the app stays usable through its
            tray menu either way.
        """
        if self.is_registered:
            logger.warning(f"Hotkey '{self.hotkey_str}' is already registered; ignoring.")
            return False

        listener = None
        try:
            listener = self._make_listener({self.hotkey_str: self._on_activate})
            listener.start()
            listener.wait()
        except Exception as e:
            # pynput raises ValueError for bad strings and backend errors
            # when input monitoring is unavailable or not permitted.
            logger.warning(f"Failed to register global hotkey '{self.hotkey_str}': {e}")
            if listener is not None:
                listener.stop()
            return False

        if not listener.is_alive():
            logger.warning(
                f"Global hotkey listener for '{self.hotkey_str}' stopped immediately. "
                "The hotkey may be unavailable or input monitoring may not be permitted."
            )
            return False

        self._listener = listener
        self._callback = callback
        self.state = HotkeyState.REGISTERED
        atexit.register(self.unregister)
        logger.info(f"Global hotkey '{self.hotkey_str}' registered.")
        return True

    def unregister(self):
        """Releases the hotkey. Does nothing if it is not registered."""
        if not self.is_registered:
            logger.debug("Hotkey not registered; nothing to unregister.")
            return
        listener, self._listener = self._listener, None
        self._callback = None
        self.state = HotkeyState.UNREGISTERED
        atexit.unregister(self.unregister)
        if listener is not None:
            listener.stop()
        logger.info(f"Global hotkey '{self.hotkey_str}' unregistered.")
