# -*- coding: utf-8 -*-
"""
src/tint/core/color_store.py

The color history store.

`ColorStore` owns the newest-first history of captured swatches. It is the
only thing that mutates the history: every mutation goes through one lock, so
the reaper thread, hotkey activations and direct UI calls are serialized.
Each mutation persists the result and notifies subscribers with an immutable
snapshot of the new history.
"""

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Tuple

from .errors import StoreNotInitializedError
from .persistence import HistoryPersistence
from .reaper import DEFAULT_INTERVAL_SECONDS, PeriodicReaper
from .swatch import ColorSample, Swatch, utc_now

logger = logging.getLogger(__name__)

DEFAULT_RETENTION = timedelta(hours=8)
DEFAULT_MAX_HISTORY = 200

History = Tuple[Swatch, ...]
Observer = Callable[[History], None]


class ColorStore:
    """
    Keeps the captured color history, with age- and count-based eviction.

    Attributes:
        persistence (HistoryPersistence): Durable storage for the history.
        clipboard (Callable[[str], bool]): Writes text to the system clipboard.
        retention (timedelta): Maximum age a swatch may reach.
        max_history (int): Maximum number of swatches kept.
        cleanup_interval (float): Seconds between reaper passes.
    """

    def __init__(
        self,
        persistence: HistoryPersistence,
        clipboard: Callable[[str], bool],
        retention: timedelta = DEFAULT_RETENTION,
        max_history: int = DEFAULT_MAX_HISTORY,
        cleanup_interval: float = DEFAULT_INTERVAL_SECONDS,
        clock: Callable[[], datetime] = utc_now,
        reaper_factory: Callable[[float, Callable[[], object]], PeriodicReaper] = PeriodicReaper,
    ):
        if max_history < 1:
            raise ValueError(f"max_history must be at least 1, got {max_history}")
        if retention <= timedelta(0):
            raise ValueError(f"retention must be positive, got {retention}")
        self.persistence = persistence
        self.clipboard = clipboard
        self.retention = retention
        self.max_history = max_history
        self.cleanup_interval = cleanup_interval
        self._clock = clock
        self._reaper_factory = reaper_factory
        self._reaper: Optional[PeriodicReaper] = None

        self._lock = threading.RLock()
        self._history: History = ()
        self._observers: List[Observer] = []
        self._initialized = False

    # --- Published state ---

    @property
    def history(self) -> History:
        """The current history, newest first."""
        return self._history

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """
        Registers an observer called with every new history snapshot.

        Returns:
            Callable[[], None]: Removes the observer again.
        """
        with self._lock:
            self._observers.append(observer)

        def unsubscribe():
            with self._lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return unsubscribe

    def _publish(self, history: History):
        self._history = history
        for observer in list(self._observers):
            try:
                observer(history)
            except Exception as e:
                logger.error(f"History observer {observer!r} failed: {e}", exc_info=True)

    # --- Lifecycle ---

    def initialize(self):
        """Loads the saved history, drops expired entries and starts the reaper."""
        with self._lock:
            if self._initialized:
                logger.warning("ColorStore.initialize() called twice; ignoring.")
                return
            loaded = tuple(self.persistence.load())
            kept = self._without_expired(loaded)
            if len(kept) != len(loaded):
                logger.info(f"Dropped {len(loaded) - len(kept)} expired swatches on load.")
                self.persistence.save(kept)
            self._publish(kept)
            self._reaper = self._reaper_factory(self.cleanup_interval, self.evict_expired)
            self._reaper.start()
            self._initialized = True
            logger.info(f"ColorStore initialized with {len(kept)} swatches.")

    def shutdown(self):
        """Stops the reaper. The history is already persisted after every mutation."""
        with self._lock:
            reaper, self._reaper = self._reaper, None
        # Cancel outside the lock: a tick in progress may be waiting for it.
        if reaper is not None:
            reaper.cancel()
            logger.info("ColorStore shut down.")

    def _require_initialized(self):
        if not self._initialized:
            raise StoreNotInitializedError("ColorStore.initialize() must be called first")

    # --- Mutations ---

    def _without_expired(self, history: History) -> History:
        cutoff = self._clock() - self.retention
        return tuple(swatch for swatch in history if swatch.timestamp >= cutoff)

    def capture(self, sample: ColorSample) -> Swatch:
        """
        Adds a sampled color as the newest swatch and copies its hex.

        The new swatch is inserted first, then expired entries and the
        overflow beyond `max_history` are dropped, and only then is the
        result persisted and the clipboard written.

        Returns:
            Swatch: The swatch that was added.
        """
        with self._lock:
            self._require_initialized()
            swatch = Swatch.create(sample, now=self._clock())
            history = (swatch,) + self._history
            history = self._without_expired(history)
            history = history[:self.max_history]
            self.persistence.save(history)
            self.clipboard(swatch.hex)
            self._publish(history)
            logger.info(f"Captured {swatch.hex} ({len(history)} in history).")
            return swatch

    def capture_from(self, sampler: Callable[[], Optional[ColorSample]]) -> Optional[Swatch]:
        """
        Asks a sampler for a color and captures it.

        Args:
            sampler (Callable[[], Optional[ColorSample]]): Returns a color, or
                None if the user cancelled.

        Returns:
            Optional[Swatch]: The new swatch, or None when cancelled.
        """
        sample = sampler()
        if sample is None:
            logger.debug("Color sampling cancelled; history unchanged.")
            return None
        return self.capture(sample)

    def evict_expired(self) -> int:
        """
        Removes every swatch older than the retention window.

        Returns:
            int: The number of swatches removed.
        """
        with self._lock:
            self._require_initialized()
            kept = self._without_expired(self._history)
            removed = len(self._history) - len(kept)
            if removed:
                self.persistence.save(kept)
                self._publish(kept)
                logger.info(f"Evicted {removed} expired swatches.")
            return removed

    def clear(self):
        """Empties the history."""
        with self._lock:
            self._require_initialized()
            self.persistence.save(())
            self._publish(())
            logger.info("Color history cleared.")

    def copy(self, swatch_id: str) -> bool:
        """
        Copies the hex of an existing swatch to the clipboard.

        Returns:
            bool: False if no such swatch is in the history or the copy failed.
        """
        with self._lock:
            for swatch in self._history:
                if swatch.id == swatch_id:
                    return bool(self.clipboard(swatch.hex))
        logger.warning(f"No swatch with id {swatch_id} in history.")
        return False
