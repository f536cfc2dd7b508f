"""
Widgets used by the overlay and the close control.
"""

from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QFont, QPixmap
from PySide6.QtWidgets import QLabel, QPushButton, QSizePolicy

from .theme import TYPOGRAPHY

log = logging.getLogger(__name__)


class OverlayLabel(QLabel):
    """Large centered text filling the overlay."""

    def __init__(self, text: str = "", parent=None):
        super().__init__(text, parent)
        self.setObjectName("OverlayLabel")
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.setWordWrap(True)
        self.setFont(QFont(TYPOGRAPHY["font_family"], TYPOGRAPHY["overlay_font_pt"], QFont.Weight.Bold))
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)


class ImagePanel(QLabel):
    """Image stretched over the whole overlay (aspect ratio is not kept)."""

    def __init__(self, pixmap: QPixmap, parent=None):
        super().__init__(parent)
        self.setObjectName("ImagePanel")
        self._pixmap = pixmap
        self.setSizePolicy(QSizePolicy.Policy.Ignored, QSizePolicy.Policy.Ignored)
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)

    @classmethod
    def from_file(cls, path: str, parent=None) -> Optional["ImagePanel"]:
        """None when the path is empty or the file cannot be decoded."""
        if not path:
            return None
        pixmap = QPixmap(path)
        if pixmap.isNull():
            log.debug("Could not load overlay image %s", path)
            return None
        return cls(pixmap, parent)

    def resizeEvent(self, event) -> None:
        self.setPixmap(
            self._pixmap.scaled(
                self.size(),
                Qt.AspectRatioMode.IgnoreAspectRatio,
                Qt.TransformationMode.SmoothTransformation,
            )
        )
        super().resizeEvent(event)


class CloseControlButton(QPushButton):
    """The persistent, flat close button."""

    def __init__(self, text: str = "", parent=None):
        super().__init__(text, parent)
        self.setObjectName("CloseControl")
        self.setFlat(True)
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        self.setFont(QFont(TYPOGRAPHY["font_family"], TYPOGRAPHY["control_font_pt"], QFont.Weight.Bold))
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
