from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable, Iterable, List, Optional, Set, Tuple

BASE_TIME = datetime(2024, 1, 1, 8, 0, 0)


def at(seconds: int) -> datetime:
    return BASE_TIME + timedelta(seconds=seconds)


class FakeEntry:
    def __init__(
        self,
        pid: int,
        name: str,
        module: Optional[str] = None,
        started: Optional[datetime] = None,
        broken: Iterable[str] = (),
    ) -> None:
        self.pid = pid
        self._name = name
        self._module = module if module is not None else name
        self._started = started
        self._broken = set(broken)

    def name(self) -> str:
        if "name" in self._broken:
            raise PermissionError(f"access denied for {self.pid}")
        return self._name

    def module_name(self) -> str:
        if "module" in self._broken:
            raise PermissionError(f"access denied for {self.pid}")
        return self._module

    def start_time(self) -> datetime:
        if self._started is None:
            raise ProcessLookupError(self.pid)
        return self._started


class FakeLister:
    def __init__(self, entries: Iterable[FakeEntry] = (), error: Optional[Exception] = None) -> None:
        self.entries = list(entries)
        self.error = error
        self.calls = 0

    def processes(self) -> List[FakeEntry]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.entries)


class FakeKiller:
    def __init__(self, events: Optional[list] = None, failing: Iterable[int] = ()) -> None:
        self.killed: List[int] = []
        self.timeouts: List[float] = []
        self.events = events if events is not None else []
        self.failing: Set[int] = set(failing)

    def kill_tree(self, pid: int, timeout: float) -> None:
        self.events.append(("kill", pid))
        if pid in self.failing:
            raise OSError(f"cannot kill {pid}")
        self.killed.append(pid)
        self.timeouts.append(timeout)


class FakeLauncher:
    def __init__(self, events: Optional[list] = None, failing: Iterable[str] = ()) -> None:
        self.launched: List[Tuple[str, str, Optional[str], bool]] = []
        self.events = events if events is not None else []
        self.failing = set(failing)

    def launch(self, path: str, arguments: str = "", cwd: Optional[str] = None, use_shell: bool = False) -> None:
        self.events.append(("launch", path))
        if path in self.failing:
            raise OSError("boom")
        self.launched.append((path, arguments, cwd, use_shell))


class FakeMaximizer:
    def __init__(self, found: bool = True) -> None:
        self.found = found
        self.requests: List[str] = []

    def maximize(self, class_name: str) -> bool:
        self.requests.append(class_name)
        return self.found


class SleepRecorder:
    def __init__(self, events: Optional[list] = None) -> None:
        self.calls: List[float] = []
        self.events = events if events is not None else []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        self.events.append(("sleep", seconds))


class AfterHarness:
    def __init__(self) -> None:
        self.scheduled: List[Tuple[str, int, Callable[[], None]]] = []
        self.cancelled: List[object] = []

    def after(self, ms: int, cb: Callable[[], None]) -> str:
        handle = f"h{len(self.scheduled) + 1}"
        self.scheduled.append((handle, ms, cb))
        return handle

    def cancel(self, handle: object) -> None:
        self.cancelled.append(handle)

    def run(self, handle: str) -> None:
        for h, _ms, cb in list(self.scheduled):
            if h == handle:
                cb()
                return
        raise AssertionError(f"Handle {handle} not found")

    def last(self) -> str:
        return self.scheduled[-1][0]
