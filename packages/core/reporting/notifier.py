from __future__ import annotations

import logging
from typing import List, Literal, Optional, Protocol, Tuple

log = logging.getLogger(__name__)

NoticeLevel = Literal["info", "warning", "error"]

_LOG_LEVELS = {
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class Notifier(Protocol):
    def notify(self, title: str, body: str, level: NoticeLevel = "info") -> None:
        ...


class LogNotifier:
    def notify(self, title: str, body: str, level: NoticeLevel = "info") -> None:
        log.log(_LOG_LEVELS.get(level, logging.INFO), "%s: %s", title, body)


class RecordingNotifier:
    """Keeps every notice in memory; handy for dry runs and tests."""

    def __init__(self) -> None:
        self.notices: List[Tuple[NoticeLevel, str, str]] = []

    def notify(self, title: str, body: str, level: NoticeLevel = "info") -> None:
        self.notices.append((level, title, body))
        log.log(_LOG_LEVELS.get(level, logging.INFO), "%s: %s", title, body)

    def bodies(self, level: Optional[NoticeLevel] = None) -> List[str]:
        return [b for lvl, _t, b in self.notices if level is None or lvl == level]
