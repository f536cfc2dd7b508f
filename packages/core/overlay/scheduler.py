from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional

log = logging.getLogger(__name__)

AfterFn = Callable[[int, Callable[[], None]], object]
AfterCancelFn = Callable[[object], None]


@dataclass
class _Task:
    name: str
    interval_ms: int
    callback: Callable[[], None]
    periodic: bool
    handle: object = None


class TaskScheduler:
    """
    Named one-shot and periodic tasks on top of ``after``/``after_cancel``.

    The primitives decide which thread callbacks run on; the desktop app passes
    QTimer-backed ones so every task fires on the UI thread. Periodic tasks
    re-arm after their callback returns. Starting a name that is already
    scheduled replaces it.
    """

    def __init__(self, *, after: AfterFn, after_cancel: AfterCancelFn) -> None:
        self._after = after
        self._after_cancel = after_cancel
        self._tasks: Dict[str, _Task] = {}

    def start_periodic(self, name: str, interval_ms: int, callback: Callable[[], None]) -> None:
        self._start(_Task(name, max(1, int(interval_ms)), callback, periodic=True))

    def start_once(self, name: str, delay_ms: int, callback: Callable[[], None]) -> None:
        self._start(_Task(name, max(0, int(delay_ms)), callback, periodic=False))

    def cancel(self, name: str) -> None:
        task = self._tasks.pop(name, None)
        if task is not None and task.handle is not None:
            self._after_cancel(task.handle)
            log.debug("Cancelled task %s", name)

    def cancel_all(self) -> None:
        for name in list(self._tasks):
            self.cancel(name)

    def is_scheduled(self, name: str) -> bool:
        return name in self._tasks

    def _start(self, task: _Task) -> None:
        self.cancel(task.name)
        self._tasks[task.name] = task
        task.handle = self._after(task.interval_ms, lambda: self._fire(task))

    def _fire(self, task: _Task) -> None:
        if self._tasks.get(task.name) is not task:
            return  # cancelled or replaced while pending
        if not task.periodic:
            del self._tasks[task.name]
        task.callback()
        if task.periodic and self._tasks.get(task.name) is task:
            task.handle = self._after(task.interval_ms, lambda: self._fire(task))

    def handle_of(self, name: str) -> Optional[object]:
        task = self._tasks.get(name)
        return task.handle if task else None
