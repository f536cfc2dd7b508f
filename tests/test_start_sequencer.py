import os

from packages.core.processes.start_sequencer import StartSequencer
from packages.core.reporting.notifier import RecordingNotifier
from packages.shared.config import StartRule

from fakes import FakeLauncher, SleepRecorder


def build(existing, failing=()):
    events: list = []
    launcher = FakeLauncher(events, failing=failing)
    sleep = SleepRecorder(events)
    notifier = RecordingNotifier()
    sequencer = StartSequencer(launcher, notifier=notifier, sleep=sleep, exists=lambda p: p in existing)
    return sequencer, launcher, sleep, notifier, events


def test_missing_entry_is_reported_and_next_entry_still_launches() -> None:
    app = os.path.abspath(os.path.join("opt", "kiosk", "app.exe"))
    sequencer, launcher, _sleep, notifier, _events = build({app})

    outcomes = sequencer.run([
        StartRule(slot=1, file_path="/missing/app", delay_ms=0),
        StartRule(slot=2, file_path=app, delay_ms=0),
    ])

    assert notifier.bodies("warning") == ["File not found: /missing/app"]
    assert [o.launched for o in outcomes] == [False, True]
    assert launcher.launched == [(app, "", os.path.dirname(app), True)]


def test_launch_failure_is_reported_and_does_not_abort() -> None:
    a, b = os.path.abspath("a.exe"), os.path.abspath("b.exe")
    sequencer, launcher, sleep, notifier, events = build({a, b}, failing={a})

    sequencer.run([
        StartRule(slot=1, file_path=a, delay_ms=100),
        StartRule(slot=2, file_path=b, delay_ms=250),
    ])

    assert notifier.bodies("error") == [f"Failed to start {a}: boom"]
    assert [p for p, *_ in launcher.launched] == [b]
    # No pause after an entry that did not start
    assert events == [("launch", a), ("launch", b), ("sleep", 0.25)]


def test_entries_run_in_slot_order() -> None:
    a, b = os.path.abspath("a.exe"), os.path.abspath("b.exe")
    sequencer, launcher, _sleep, _notifier, _events = build({a, b})

    sequencer.run([StartRule(slot=7, file_path=b, delay_ms=0), StartRule(slot=2, file_path=a, delay_ms=0)])

    assert [p for p, *_ in launcher.launched] == [a, b]


def test_blank_entry_is_inert() -> None:
    sequencer, launcher, sleep, notifier, _events = build(set())

    assert sequencer.run([StartRule(slot=1, file_path="  ", delay_ms=900)]) == []
    assert launcher.launched == []
    assert sleep.calls == []
    assert notifier.notices == []
