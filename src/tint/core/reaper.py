# -*- coding: utf-8 -*-
"""
src/tint/core/reaper.py

A recurring background timer that enforces the history retention window.
"""

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 900.0


class PeriodicReaper:
    """
    Calls a callback every `interval` seconds on a daemon thread.

    Attributes:
        interval (float): Seconds between ticks.
        callback (Callable[[], object]): Invoked on every tick.
    """

    def __init__(self, interval: float, callback: Callable[[], object]):
        if interval <= 0:
            raise ValueError(f"Reaper interval must be positive, got {interval}")
        self.interval = interval
        self.callback = callback
        self._stop_event = threading.Event()
        # Held for the duration of each tick; cancel() takes it so no tick
        # can start once cancel() has returned.
        self._tick_lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop_event.is_set()

    def start(self):
        """Starts the timer thread. Does nothing if already running."""
        if self._thread is not None:
            logger.warning("Reaper already started.")
            return
        self._thread = threading.Thread(target=self._run, name="tint-reaper", daemon=True)
        self._thread.start()
        logger.info(f"Reaper started, running every {self.interval:g} seconds.")

    def _run(self):
        while not self._stop_event.wait(self.interval):
            with self._tick_lock:
                if self._stop_event.is_set():
                    break
                try:
                    self.callback()
                except Exception as e:
                    logger.error(f"Reaper tick failed: {e}", exc_info=True)

    def cancel(self):
        """
        Stops the timer. Safe to call more than once.

        When called from another thread this blocks until a running tick
        finishes and the thread has exited.
        """
        if self._thread is None:
            return
        self._stop_event.set()
        if threading.current_thread() is self._thread:
            return
        with self._tick_lock:
            pass
        self._thread.join()
        logger.info("Reaper stopped.")
