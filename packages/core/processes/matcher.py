from __future__ import annotations

import logging
from typing import List

from .backends import EXE_SUFFIX, ProcessEntry, ProcessLister
from .types import UNKNOWN_START_TIME, ProcessHandle

log = logging.getLogger(__name__)


def strip_suffix(name: str, suffix: str = EXE_SUFFIX) -> str:
    name = name.strip()
    if suffix and name.lower().endswith(suffix.lower()):
        return name[: -len(suffix)]
    return name


class ProcessMatcher:
    """
    Finds live processes for a configured name.

    A process matches when, compared case-insensitively,
      - its name (without the executable suffix) equals the configured name, or
      - its main module file name equals the configured name plus the suffix, or
      - its name equals the configured name with all whitespace removed
        ("Windows Explorer" -> "WindowsExplorer").

    Processes that cannot be inspected are left out of the result.
    """

    def __init__(self, lister: ProcessLister, suffix: str = EXE_SUFFIX) -> None:
        self._lister = lister
        self._suffix = suffix

    def match(self, configured_name: str) -> List[ProcessHandle]:
        target = strip_suffix(configured_name, self._suffix)
        if not target:
            return []

        wanted_name = target.lower()
        wanted_module = (target + self._suffix).lower()
        wanted_compact = "".join(target.split()).lower()

        matches: List[ProcessHandle] = []
        for entry in self._lister.processes():
            try:
                name = entry.name()
                if self._is_match(entry, name, wanted_name, wanted_module, wanted_compact):
                    matches.append(ProcessHandle(pid=entry.pid, name=name, start_time=self._start_time(entry)))
            except Exception as e:
                # Exited mid-scan, access denied, zombie...
                log.debug("Skipping pid %s while matching %r: %s", getattr(entry, "pid", "?"), target, e)
        log.debug("Matched %d process(es) for %r", len(matches), target)
        return matches

    def _is_match(
        self,
        entry: ProcessEntry,
        name: str,
        wanted_name: str,
        wanted_module: str,
        wanted_compact: str,
    ) -> bool:
        base = strip_suffix(name, self._suffix).lower()
        if base == wanted_name:
            return True
        if entry.module_name().lower() == wanted_module:
            return True
        return base == wanted_compact

    @staticmethod
    def _start_time(entry: ProcessEntry):
        try:
            return entry.start_time()
        except Exception as e:
            log.debug("Start time unavailable for pid %s: %s", entry.pid, e)
            return UNKNOWN_START_TIME
