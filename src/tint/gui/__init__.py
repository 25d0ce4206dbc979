# -*- coding: utf-8 -*-
"""
The GUI Package for Tint.

PyQt6 widgets: the screen sampling overlay and the history panel.
"""

from .history_panel import HistoryPanel
from .sampler_overlay import SamplerOverlay

__all__ = [
    "HistoryPanel",
    "SamplerOverlay",
]
