# -*- coding: utf-8 -*-
"""
src/tint/gui/sampler_overlay.py

Defines the SamplerOverlay widget used to pick a color from the screen.

This module provides a PyQt6 QWidget that covers the primary screen with a
borderless, almost fully transparent window and a crosshair cursor. A left
click hides the overlay, reads the pixel under the cursor with 'mss' and
emits it as a ColorSample. Escape or a right click cancels the pick.
"""

import logging
from typing import Optional

import mss
import mss.exception
import numpy as np
from PyQt6.QtCore import QPoint, Qt, QTimer, pyqtSignal
from PyQt6.QtGui import QColor, QCursor, QPainter, QPen
from PyQt6.QtWidgets import QApplication, QWidget

from ..core.swatch import ColorSample

logger = logging.getLogger(__name__)

# Time for the compositor to remove the overlay before the pixel is read.
GRAB_DELAY_MS = 60


def sample_pixel(x: int, y: int) -> Optional[ColorSample]:
    """
    Reads one screen pixel at physical coordinates (x, y).

    Returns:
        Optional[ColorSample]: The pixel color, or None if the grab failed.
    """
    monitor = {"top": y, "left": x, "width": 1, "height": 1}
    try:
        with mss.mss() as sct:
            sct_img = sct.grab(monitor)
    except mss.exception.ScreenShotError as e:
        logger.error(f"Failed to read screen pixel at ({x}, {y}): {e}")
        return None

    # mss returns BGRA.
    pixel = np.array(sct_img)[0, 0]
    blue, green, red = (int(v) for v in pixel[:3])
    return ColorSample(red / 255.0, green / 255.0, blue / 255.0)


class SamplerOverlay(QWidget):
    """
    A full-screen overlay that samples the color under a mouse click.

    Emits `color_sampled` exactly once, with a ColorSample on success or
    None when the user cancels or the screen could not be read.
    """
    color_sampled = pyqtSignal(object)

    def __init__(self):
        super().__init__()
        logger.info("Initializing SamplerOverlay.")
        self._finished = False
        self._cursor_pos = QPoint()

        screen = QApplication.primaryScreen()
        if not screen:
            logger.error("No primary screen found. Falling back to a default overlay size.")
            self.setGeometry(0, 0, 800, 600)
            self._pixel_ratio = 1.0
        else:
            self.setGeometry(screen.geometry())
            self._pixel_ratio = screen.devicePixelRatio()

        self.setWindowFlags(
            Qt.WindowType.FramelessWindowHint |
            Qt.WindowType.WindowStaysOnTopHint |
            Qt.WindowType.Tool  # Prevents it from appearing in the taskbar
        )
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground)
        self.setAttribute(Qt.WidgetAttribute.WA_DeleteOnClose)
        self.setCursor(QCursor(Qt.CursorShape.CrossCursor))
        self.setMouseTracking(True)

    def showEvent(self, event):
        super().showEvent(event)
        self.activateWindow()
        self.raise_()

    def paintEvent(self, event):
        painter = QPainter(self)
        # Nearly transparent, but non-zero alpha so the window still gets mouse events.
        painter.fillRect(self.rect(), QColor(0, 0, 0, 1))
        if not self._cursor_pos.isNull():
            painter.setPen(QPen(QColor(255, 255, 255, 200), 1))
            painter.drawEllipse(self._cursor_pos, 12, 12)

    def mouseMoveEvent(self, event):
        self._cursor_pos = event.position().toPoint()
        self.update()

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            global_pos = event.globalPosition().toPoint()
            self.hide()
            QTimer.singleShot(GRAB_DELAY_MS, lambda: self._grab(global_pos))
        elif event.button() == Qt.MouseButton.RightButton:
            logger.info("Color pick cancelled (right click).")
            self._finish(None)

    def keyPressEvent(self, event):
        if event.key() == Qt.Key.Key_Escape:
            logger.info("Color pick cancelled (Escape key).")
            self._finish(None)

    def _grab(self, global_pos: QPoint):
        x = int(round(global_pos.x() * self._pixel_ratio))
        y = int(round(global_pos.y() * self._pixel_ratio))
        self._finish(sample_pixel(x, y))

    def _finish(self, sample: Optional[ColorSample]):
        if self._finished:
            return
        self._finished = True
        self.color_sampled.emit(sample)
        self.close()
