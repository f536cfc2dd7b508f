from __future__ import annotations

import logging
import os
import time
from typing import Callable, List, Optional, Sequence

from packages.core.reporting.notifier import Notifier, LogNotifier
from packages.shared.config import StartRule

from .backends import ProcessLauncher
from .types import LaunchOutcome

log = logging.getLogger(__name__)


class StartSequencer:
    """Launches the replacement processes in slot order, one entry at a time."""

    def __init__(
        self,
        launcher: ProcessLauncher,
        notifier: Optional[Notifier] = None,
        sleep: Callable[[float], None] = time.sleep,
        exists: Callable[[str], bool] = os.path.isfile,
    ) -> None:
        self._launcher = launcher
        self._notifier: Notifier = notifier or LogNotifier()
        self._sleep = sleep
        self._exists = exists

    def run(self, rules: Sequence[StartRule]) -> List[LaunchOutcome]:
        outcomes: List[LaunchOutcome] = []
        try:
            for rule in sorted(rules, key=lambda r: r.slot):
                path = rule.file_path.strip()
                if not path:
                    continue
                outcomes.append(self._start(rule, path))
        except Exception as e:
            log.exception("Process startup aborted")
            self._notifier.notify("Error", f"Error during process startup: {e}", "error")
        return outcomes

    def _start(self, rule: StartRule, path: str) -> LaunchOutcome:
        outcome = LaunchOutcome(slot=rule.slot, file_path=path)

        if not self._exists(path):
            log.warning("Start slot %d: %s does not exist", rule.slot, path)
            outcome.skipped_reason = "missing"
            self._notifier.notify("Warning", f"File not found: {path}", "warning")
            return outcome

        try:
            cwd = os.path.dirname(os.path.abspath(path)) or None
            self._launcher.launch(path, cwd=cwd, use_shell=True)
        except Exception as e:
            reason = getattr(e, "cause", None) or e
            log.error("Start slot %d: failed to start %s: %s", rule.slot, path, reason)
            outcome.skipped_reason = "launch-failed"
            self._notifier.notify("Error", f"Failed to start {path}: {reason}", "error")
            return outcome

        outcome.launched = True
        log.info("Start slot %d: launched %s", rule.slot, path)
        if rule.delay_ms > 0:
            self._sleep(rule.delay_ms / 1000.0)
        return outcome
