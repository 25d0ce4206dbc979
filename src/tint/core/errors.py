# -*- coding: utf-8 -*-
"""
src/tint/core/errors.py

Exception types raised by the Tint core.
"""


class TintError(Exception):
    """Base class for all Tint errors."""


class MalformedRecordError(TintError):
    """A persisted swatch record does not have the expected shape."""


class StoreNotInitializedError(TintError):
    """A ColorStore mutation was attempted before initialize() ran."""
