from packages.shared.config import CleanupRule, StartRule
from packages.shared.store import DEFAULT_SETTINGS, ConfigStore, parse_settings


def test_missing_file_is_created_with_defaults(tmp_path) -> None:
    path = tmp_path / "settings.ini"
    cfg = ConfigStore(path).load()

    assert path.exists()
    assert path.read_text(encoding="utf-8").splitlines() == DEFAULT_SETTINGS
    assert cfg.startup_app.delay_seconds == 1
    assert cfg.startup_app.open_maximized_explorer is True
    assert cfg.close_button.background_color == (192, 0, 0)
    assert cfg.close_button.y == "auto"
    assert cfg.close_button.cleanup_delay_ms == 5000
    assert cfg.process_cleanup == [CleanupRule(slot=1, process_name="explorer", keep_alive=0, delay_ms=200)]
    assert cfg.process_start == []


def test_missing_sections_use_built_in_defaults() -> None:
    cfg = parse_settings("[General]\nDelaySeconds=3\n")

    assert cfg.general.delay_seconds == 3
    assert cfg.close_button.background_color == (139, 0, 0)
    assert cfg.open_overlay.text == "Loading Explorer..."
    assert cfg.process_cleanup == []


def test_malformed_values_fall_back_per_field() -> None:
    cfg = parse_settings(
        "[StartupApp]\n"
        "DelaySeconds=soon\n"
        "OpenMaximizedExplorer=yes\n"
        "[OpenOverlay]\n"
        "DisplayMode=image\n"
        "BackgroundColor=300,0,0\n"
        "TextColor=1,2\n"
        "[CloseButton]\n"
        "X=left\n"
        "Y=\n"
        "Width=180\n"
    )

    assert cfg.startup_app.delay_seconds == 1
    assert cfg.startup_app.open_maximized_explorer is False
    assert cfg.open_overlay.display_mode == "Image"
    assert cfg.open_overlay.background_color == (0, 0, 0)
    assert cfg.open_overlay.text_color == (255, 255, 255)
    assert cfg.close_button.x == 0
    assert cfg.close_button.y == "auto"
    assert cfg.close_button.width == 180


def test_blank_slots_are_skipped_and_keep_their_numbers() -> None:
    cfg = parse_settings(
        "[ProcessCleanup]\n"
        "Process1=\n"
        "Process2=notepad\n"
        "Process2_KeepAlive=-3\n"
        "Process2_Delay=abc\n"
        "Process3=   \n"
        "Process4=Chrome Helper\n"
        "Process4_KeepAlive=2\n"
        "Process4_Delay=0\n"
        "[ProcessStart]\n"
        "Process1=C:\\Tools\\shell.exe\n"
        "Process1_Delay=750\n"
        "Process5=  \n"
    )

    assert cfg.process_cleanup == [
        CleanupRule(slot=2, process_name="notepad", keep_alive=0, delay_ms=200),
        CleanupRule(slot=4, process_name="Chrome Helper", keep_alive=2, delay_ms=0),
    ]
    assert cfg.process_start == [StartRule(slot=1, file_path="C:\\Tools\\shell.exe", delay_ms=750)]
    assert cfg.cleanup_process_names() == ["notepad", "Chrome Helper"]


def test_keys_are_case_sensitive() -> None:
    cfg = parse_settings("[CloseButton]\ntext=ignored\nText=Exit\n")
    assert cfg.close_button.text == "Exit"


def test_stray_and_indented_lines_keep_the_rest_of_the_file(tmp_path) -> None:
    path = tmp_path / "settings.ini"
    text = (
        "stray words before any section\n"
        "[ProcessCleanup]\n"
        "Process1=notepad\n"
        "    Process1_KeepAlive=1\n"
        "oops stray line\n"
        "=orphan value\n"
        "[ProcessStart]\n"
        "  Process1=C:\\Tools\\shell.exe\n"
    )
    path.write_text(text, encoding="utf-8")

    cfg = ConfigStore(path).load()

    assert cfg.process_cleanup == [CleanupRule(slot=1, process_name="notepad", keep_alive=1, delay_ms=200)]
    assert cfg.process_start == [StartRule(slot=1, file_path="C:\\Tools\\shell.exe", delay_ms=200)]
    assert path.read_text(encoding="utf-8") == text


def test_undecodable_file_falls_back_without_overwriting(tmp_path) -> None:
    path = tmp_path / "settings.ini"
    path.write_bytes(b"[CloseButton]\nText=\xff\xfe\xfa\n")

    cfg = ConfigStore(path).load()

    assert cfg.close_button.text == "Close Explorer"
    assert path.read_bytes() == b"[CloseButton]\nText=\xff\xfe\xfa\n"


def test_unwritable_location_falls_back_to_defaults(tmp_path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")

    cfg = ConfigStore(blocker / "settings.ini").load()

    assert cfg.close_button.text == "Close Explorer"
    assert cfg.cleanup_process_names() == ["explorer"]


def test_settings_path_can_be_overridden(tmp_path, monkeypatch) -> None:
    target = tmp_path / "custom.ini"
    monkeypatch.setenv("KIOSK_SHELL_SETTINGS", str(target))

    store = ConfigStore()

    assert store.path() == str(target)
    store.load()
    assert target.exists()


def test_settings_default_to_working_directory(tmp_path, monkeypatch) -> None:
    monkeypatch.delenv("KIOSK_SHELL_SETTINGS", raising=False)
    monkeypatch.chdir(tmp_path)

    assert ConfigStore().path() == str(tmp_path / "settings.ini")
