from __future__ import annotations

from typing import Sequence

from .types import RetentionPlan, ProcessHandle


def rank_for_retention(matched: Sequence[ProcessHandle], keep_alive: int) -> RetentionPlan:
    """
    Split ``matched`` into the ``keep_alive`` oldest survivors and the kill targets.

    Sorting is stable, so equal start times keep enumeration order. Targets come
    back newest first: when more instances exist than may be kept, the latest
    arrivals go first and the longest-running ones stay.
    """
    keep = max(0, keep_alive)
    ordered = sorted(matched, key=lambda h: h.start_time)
    survivors = tuple(ordered[:keep])
    targets = tuple(reversed(ordered[keep:]))
    return RetentionPlan(survivors=survivors, targets=targets)
