from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional, Sequence

from packages.core.processes.cleanup_engine import CleanupEngine
from packages.core.processes.start_sequencer import StartSequencer
from packages.core.reporting.notifier import Notifier, LogNotifier
from packages.shared.config import CleanupRule, StartRule

log = logging.getLogger(__name__)

SETTLE_DELAY_MS = 200


class CloseSequence:
    """
    The one background task spawned after the close is confirmed.

    cleanup delay -> cleanup rules -> ask the UI to close the overlay ->
    settle delay -> start rules -> finished. There is no cancellation; the
    confirmation dialog was the last chance to back out. The task never touches
    widgets: ``request_overlay_close`` and ``on_finished`` must marshal to the UI
    thread themselves, and ``request_overlay_close`` must not return until the
    overlay is gone.
    """

    def __init__(
        self,
        *,
        engine: CleanupEngine,
        sequencer: StartSequencer,
        cleanup_rules: Sequence[CleanupRule],
        start_rules: Sequence[StartRule],
        cleanup_delay_ms: int,
        request_overlay_close: Callable[[], None],
        on_finished: Callable[[], None],
        notifier: Optional[Notifier] = None,
        sleep: Callable[[float], None] = time.sleep,
        settle_delay_ms: int = SETTLE_DELAY_MS,
    ) -> None:
        self._engine = engine
        self._sequencer = sequencer
        self._cleanup_rules = list(cleanup_rules)
        self._start_rules = list(start_rules)
        self._cleanup_delay_ms = max(0, cleanup_delay_ms)
        self._request_overlay_close = request_overlay_close
        self._on_finished = on_finished
        self._notifier: Notifier = notifier or LogNotifier()
        self._sleep = sleep
        self._settle_delay_ms = settle_delay_ms

        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def started(self) -> bool:
        return self._thread is not None

    def start(self) -> threading.Thread:
        with self._lock:
            if self._thread is not None:
                raise RuntimeError("Close sequence already started")
            self._thread = threading.Thread(target=self.run, name="CloseSequence", daemon=False)
        self._thread.start()
        return self._thread

    def run(self) -> None:
        try:
            if self._cleanup_delay_ms > 0:
                log.info("Waiting %d ms before cleanup", self._cleanup_delay_ms)
                self._sleep(self._cleanup_delay_ms / 1000.0)

            outcomes = self._engine.run(self._cleanup_rules)
            killed = sum(len(o.terminated) for o in outcomes)
            log.info("Cleanup finished: %d rule(s), %d process tree(s) terminated", len(outcomes), killed)

            self._request_overlay_close()
            if self._settle_delay_ms > 0:
                self._sleep(self._settle_delay_ms / 1000.0)

            launches = self._sequencer.run(self._start_rules)
            log.info("Started %d of %d replacement process(es)", sum(1 for o in launches if o.launched), len(launches))
        except Exception as e:
            log.exception("Close sequence failed")
            self._notifier.notify("Error", f"Error during process cleanup: {e}", "error")
        finally:
            self._on_finished()
