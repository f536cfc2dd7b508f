from __future__ import annotations

import logging
from typing import Optional, Sequence

from PySide6.QtCore import QObject, QThread, Qt, Signal, Slot
from PySide6.QtWidgets import QMessageBox, QWidget

from packages.core.overlay.state_machine import confirmation_message
from packages.core.reporting.notifier import NoticeLevel

log = logging.getLogger(__name__)

_ICONS = {
    "info": QMessageBox.Icon.Information,
    "warning": QMessageBox.Icon.Warning,
    "error": QMessageBox.Icon.Critical,
}

_LOG_LEVELS = {
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def _top_most(box: QMessageBox) -> QMessageBox:
    box.setWindowFlag(Qt.WindowType.WindowStaysOnTopHint, True)
    return box


class DialogNotifier(QObject):
    """
    Shows operator reports as modal message boxes.

    Safe to call from the close-sequence thread: the request is marshalled to
    the UI thread and the caller blocks until the box is dismissed, so reports
    stay in step with the work that raised them.
    """

    _requested = Signal(str, str, str)

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self._requested.connect(self._present, Qt.ConnectionType.BlockingQueuedConnection)

    def notify(self, title: str, body: str, level: NoticeLevel = "info") -> None:
        if QThread.currentThread() == self.thread():
            self._present(title, body, level)
        else:
            self._requested.emit(title, body, level)

    @Slot(str, str, str)
    def _present(self, title: str, body: str, level: str) -> None:
        log.log(_LOG_LEVELS.get(level, logging.INFO), "%s: %s", title, body)
        box = QMessageBox(_ICONS.get(level, QMessageBox.Icon.Information), title, body, QMessageBox.StandardButton.Ok)
        _top_most(box).exec()


def ask_cleanup_confirmation(process_names: Sequence[str], parent: Optional[QWidget] = None) -> bool:
    box = QMessageBox(
        QMessageBox.Icon.Warning,
        "Confirm",
        confirmation_message(process_names),
        QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
        parent,
    )
    box.setDefaultButton(QMessageBox.StandardButton.Yes)
    _top_most(box).exec()
    return box.standardButton(box.clickedButton()) == QMessageBox.StandardButton.Yes
