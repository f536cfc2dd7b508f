from __future__ import annotations

import logging

from .backends import ProcessKiller
from .types import ProcessHandle

log = logging.getLogger(__name__)

DEFAULT_KILL_TIMEOUT_S = 5.0


class TreeTerminator:
    """Force-terminates a process and its descendants. Advisory: never retried, never raises."""

    def __init__(self, killer: ProcessKiller, timeout_s: float = DEFAULT_KILL_TIMEOUT_S) -> None:
        self._killer = killer
        self._timeout_s = timeout_s

    def terminate(self, handle: ProcessHandle) -> bool:
        try:
            self._killer.kill_tree(handle.pid, self._timeout_s)
            log.debug("Terminated tree of %s (pid %s)", handle.name, handle.pid)
            return True
        except Exception as e:
            log.debug("Could not terminate %s (pid %s): %s", handle.name, handle.pid, e)
            return False
