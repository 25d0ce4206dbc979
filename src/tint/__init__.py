# -*- coding: utf-8 -*-
"""
Tint Application Package.

A tray utility that picks colors from anywhere on screen, keeps them as a
time-bounded history and copies the latest hex code to the clipboard.

The GUI controller lives in `tint.app` and is not imported here, so the core
can be used (and tested) without a Qt display.
"""

__version__ = "0.1.0"
