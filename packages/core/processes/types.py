from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple

# Sort key for processes whose start time cannot be read
UNKNOWN_START_TIME = datetime.min


@dataclass(frozen=True)
class ProcessHandle:
    """A matched live process. Re-queried on every cleanup pass, never cached."""
    pid: int
    name: str
    start_time: datetime = UNKNOWN_START_TIME


@dataclass(frozen=True)
class RetentionPlan:
    survivors: Tuple[ProcessHandle, ...]
    targets: Tuple[ProcessHandle, ...]  # newest first


@dataclass
class RuleOutcome:
    slot: int
    process_name: str
    matched: int = 0
    survivors: List[int] = field(default_factory=list)
    terminated: List[int] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class LaunchOutcome:
    slot: int
    file_path: str
    launched: bool = False
    skipped_reason: Optional[str] = None
