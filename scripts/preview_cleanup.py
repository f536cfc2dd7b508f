"""
Dry run of the process cleanup configured in settings.ini.

Lists, per cleanup slot, which live processes match, which would be kept
(the oldest KeepAlive instances) and which would be killed, in kill order.
Nothing is terminated.

Usage:
    python scripts/preview_cleanup.py [path/to/settings.ini]
"""

import sys
import os
import logging
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from packages.core.processes.backends import PsutilProcessLister
from packages.core.processes.matcher import ProcessMatcher
from packages.core.processes.ranker import rank_for_retention
from packages.core.processes.types import UNKNOWN_START_TIME
from packages.shared.store import ConfigStore

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s'
)


def _fmt(handle) -> str:
    started = "unknown" if handle.start_time == UNKNOWN_START_TIME else handle.start_time.strftime("%H:%M:%S")
    return f"pid {handle.pid:>6}  {handle.name:<30} started {started}"


def main() -> int:
    path = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    store = ConfigStore(path)
    if path is not None and not path.exists():
        print(f"Settings file not found: {path}")
        return 1

    cfg = store.load()
    print("=" * 60)
    print(f"Cleanup preview for {store.path()}")
    print("=" * 60)

    if not cfg.process_cleanup:
        print("No cleanup slots configured.")
        return 0

    matcher = ProcessMatcher(PsutilProcessLister())
    for rule in cfg.process_cleanup:
        matched = matcher.match(rule.process_name)
        plan = rank_for_retention(matched, rule.keep_alive)
        print()
        print(f"[slot {rule.slot}] {rule.process_name}  keep={rule.keep_alive}  delay={rule.delay_ms}ms")
        print(f"  matched: {len(matched)}")
        for h in plan.survivors:
            print(f"  keep  {_fmt(h)}")
        for h in plan.targets:
            print(f"  kill  {_fmt(h)}")

    print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
