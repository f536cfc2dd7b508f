from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional, Sequence

from packages.core.reporting.notifier import Notifier, LogNotifier
from packages.shared.config import CleanupRule

from .backends import ProcessKiller, ProcessLister
from .matcher import ProcessMatcher
from .ranker import rank_for_retention
from .terminator import TreeTerminator
from .types import RuleOutcome

log = logging.getLogger(__name__)


class CleanupEngine:
    """
    Applies the configured cleanup rules in slot order.

    Per rule: match live processes, keep the ``keep_alive`` oldest, tree-kill
    the rest newest first, then sleep the rule's delay. A failing rule is
    logged and the next rule still runs.
    """

    def __init__(
        self,
        lister: ProcessLister,
        killer: ProcessKiller,
        notifier: Optional[Notifier] = None,
        sleep: Callable[[float], None] = time.sleep,
        matcher: Optional[ProcessMatcher] = None,
        terminator: Optional[TreeTerminator] = None,
    ) -> None:
        self._matcher = matcher or ProcessMatcher(lister)
        self._terminator = terminator or TreeTerminator(killer)
        self._notifier: Notifier = notifier or LogNotifier()
        self._sleep = sleep

    def run(self, rules: Sequence[CleanupRule]) -> List[RuleOutcome]:
        outcomes: List[RuleOutcome] = []
        try:
            for rule in sorted(rules, key=lambda r: r.slot):
                if not rule.process_name.strip():
                    continue
                outcomes.append(self._apply(rule))
                if rule.delay_ms > 0:
                    self._sleep(rule.delay_ms / 1000.0)
        except Exception as e:
            log.exception("Process cleanup aborted")
            self._notifier.notify("Error", f"Error during process cleanup: {e}", "error")
        return outcomes

    def _apply(self, rule: CleanupRule) -> RuleOutcome:
        outcome = RuleOutcome(slot=rule.slot, process_name=rule.process_name)
        try:
            matched = self._matcher.match(rule.process_name)
            plan = rank_for_retention(matched, rule.keep_alive)
            outcome.matched = len(matched)
            outcome.survivors = [h.pid for h in plan.survivors]
            for handle in plan.targets:
                if self._terminator.terminate(handle):
                    outcome.terminated.append(handle.pid)
        except Exception as e:
            log.exception("Cleanup rule %d (%s) failed", rule.slot, rule.process_name)
            outcome.error = str(e)

        log.info(
            "Cleanup slot %d %r: matched=%d kept=%s killed=%s",
            rule.slot,
            rule.process_name,
            outcome.matched,
            outcome.survivors,
            outcome.terminated,
        )
        return outcome
