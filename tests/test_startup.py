import pytest

from packages.core.errors import StartupAppMissingError
from packages.core.processes.backends import ShellWindow
from packages.core.reporting.notifier import RecordingNotifier
from packages.core.startup import SHELL_WINDOW_WAIT_S, StartupLauncher
from packages.shared.config import StartupAppConfig

from fakes import FakeLauncher, FakeMaximizer, SleepRecorder

SHELL = ShellWindow(command="explorer.exe", window_class="CabinetWClass")


def build(app_path, *, exists=lambda p: True, failing=(), found=True, shell=SHELL, arguments=""):
    launcher = FakeLauncher(failing=failing)
    maximizer = FakeMaximizer(found=found)
    sleep = SleepRecorder()
    notifier = RecordingNotifier()
    startup = StartupLauncher(
        StartupAppConfig(app_path=app_path, app_arguments=arguments),
        launcher,
        maximizer,
        shell,
        notifier=notifier,
        sleep=sleep,
        exists=exists,
    )
    return startup, launcher, maximizer, sleep, notifier


def test_missing_absolute_path_is_fatal(tmp_path) -> None:
    missing = str(tmp_path / "kiosk.exe")
    startup, *_ = build(missing, exists=lambda p: False)

    with pytest.raises(StartupAppMissingError) as exc:
        startup.validate()
    assert str(exc.value) == f"Startup application not found: {missing}"


def test_relative_path_is_left_to_the_shell() -> None:
    startup, launcher, *_ = build("explorer.exe", exists=lambda p: False)

    startup.validate()
    assert startup.launch() is True
    assert launcher.launched == [("explorer.exe", "", None, True)]


def test_absolute_path_runs_from_its_own_directory(tmp_path) -> None:
    app = str(tmp_path / "kiosk.exe")
    startup, launcher, *_ = build(app, arguments=" --fullscreen ")

    assert startup.launch() is True
    assert launcher.launched == [(app, "--fullscreen", str(tmp_path), True)]


def test_launch_failure_is_reported_and_not_fatal() -> None:
    startup, _launcher, _max, _sleep, notifier = build("kiosk.exe", failing={"kiosk.exe"})

    assert startup.launch() is False
    assert notifier.bodies("error") == ["Failed to start application: boom"]


def test_shell_window_is_maximized_after_a_short_wait() -> None:
    startup, launcher, maximizer, sleep, notifier = build("kiosk.exe")

    assert startup.open_maximized_shell() is True
    assert launcher.launched[0][0] == "explorer.exe"
    assert launcher.launched[0][3] is True
    assert sleep.calls == [SHELL_WINDOW_WAIT_S]
    assert maximizer.requests == ["CabinetWClass"]
    assert notifier.notices == []


def test_shell_window_not_found_is_silent() -> None:
    startup, _launcher, _max, _sleep, notifier = build("kiosk.exe", found=False)

    assert startup.open_maximized_shell() is False
    assert notifier.notices == []


def test_platform_without_window_class_skips_maximize() -> None:
    shell = ShellWindow(command="xdg-open", window_class=None)
    startup, launcher, maximizer, *_ = build("kiosk.exe", shell=shell)

    assert startup.open_maximized_shell() is False
    assert launcher.launched[0][0] == "xdg-open"
    assert maximizer.requests == []


def test_shell_launch_failure_is_reported() -> None:
    startup, _launcher, maximizer, _sleep, notifier = build("kiosk.exe", failing={"explorer.exe"})

    assert startup.open_maximized_shell() is False
    assert maximizer.requests == []
    assert notifier.bodies("error") == ["Failed to open Explorer window: boom"]
