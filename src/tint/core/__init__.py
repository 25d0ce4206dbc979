# -*- coding: utf-8 -*-
"""
The Core Package for Tint.

Holds the color model, history persistence, the retention store and the
background reaper. Nothing here depends on Qt.
"""

from .color_store import ColorStore
from .errors import MalformedRecordError, StoreNotInitializedError, TintError
from .persistence import HISTORY_KEY, HistoryPersistence, SlotStorage
from .reaper import PeriodicReaper
from .swatch import RGB, ColorSample, Swatch

__all__ = [
    "ColorStore",
    "ColorSample",
    "HISTORY_KEY",
    "HistoryPersistence",
    "MalformedRecordError",
    "PeriodicReaper",
    "RGB",
    "SlotStorage",
    "StoreNotInitializedError",
    "Swatch",
    "TintError",
]
