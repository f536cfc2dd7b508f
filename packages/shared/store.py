from __future__ import annotations

import configparser
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from packages.shared.config import MAX_SLOTS, AppConfig
from packages.shared.paths import settings_path

log = logging.getLogger(__name__)


def _slot_lines(section: str, with_keep_alive: bool, first: str = "") -> List[str]:
    lines = [f"[{section}]"]
    for i in range(1, MAX_SLOTS + 1):
        lines.append(f"Process{i}={first if i == 1 else ''}")
        if with_keep_alive:
            lines.append(f"Process{i}_KeepAlive=0")
        lines.append(f"Process{i}_Delay=200")
    return lines


DEFAULT_SETTINGS: List[str] = [
    "# Kiosk Shell Helper",
    "# Launches an application behind a startup overlay, then leaves a close button",
    "# that cleans up the processes below and starts their replacements.",
    "",
    "[General]",
    "DelaySeconds=5",
    "",
    "# Application to launch on startup",
    "[StartupApp]",
    "AppPath=C:\\Windows\\explorer.exe",
    "AppArguments=",
    "DelaySeconds=1",
    "OpenMaximizedExplorer=true",
    "",
    "# Overlay displayed during startup delay",
    "[OpenOverlay]",
    "DisplayMode=Text",
    "Text=Loading Explorer...",
    "BackgroundColor=0,0,0",
    "TextColor=255,255,255",
    "ImagePath=",
    "",
    "[CloseButton]",
    "BackgroundColor=192,0,0",
    "TextColor=255,255,255",
    "Text=Close Explorer",
    "X=0",
    "Y=auto",
    "Width=200",
    "CleanupDelay=5000",
    "",
    "# Overlay displayed when closing",
    "[CloseOverlay]",
    "BackgroundColor=0,0,0",
    "TextColor=255,255,255",
    "Text=Please Wait...",
    "",
    "# Close these processes when exiting the program",
    *_slot_lines("ProcessCleanup", with_keep_alive=True, first="explorer"),
    "",
    "# The following processes will be run after cleanup",
    *_slot_lines("ProcessStart", with_keep_alive=False),
]

# (section, ini key) -> model field
_SCALAR_KEYS: Dict[str, Dict[str, str]] = {
    "General": {"DelaySeconds": "delay_seconds"},
    "StartupApp": {
        "AppPath": "app_path",
        "AppArguments": "app_arguments",
        "DelaySeconds": "delay_seconds",
        "OpenMaximizedExplorer": "open_maximized_explorer",
    },
    "OpenOverlay": {
        "DisplayMode": "display_mode",
        "Text": "text",
        "BackgroundColor": "background_color",
        "TextColor": "text_color",
        "ImagePath": "image_path",
    },
    "CloseButton": {
        "BackgroundColor": "background_color",
        "TextColor": "text_color",
        "Text": "text",
        "X": "x",
        "Y": "y",
        "Width": "width",
        "CleanupDelay": "cleanup_delay_ms",
    },
    "CloseOverlay": {
        "BackgroundColor": "background_color",
        "TextColor": "text_color",
        "Text": "text",
    },
}

_SECTION_FIELDS = {
    "General": "general",
    "StartupApp": "startup_app",
    "OpenOverlay": "open_overlay",
    "CloseButton": "close_button",
    "CloseOverlay": "close_overlay",
}


def _new_parser() -> configparser.ConfigParser:
    parser = configparser.ConfigParser(
        interpolation=None,
        strict=False,
        comment_prefixes=("#", ";"),
        inline_comment_prefixes=None,
        default_section="__defaults__",
    )
    parser.optionxform = str  # keys are case-sensitive: Process1_KeepAlive
    return parser


def _clean_lines(text: str) -> str:
    """Trim every line; keep section headers and ``key=value`` lines inside a section."""
    kept: List[str] = []
    in_section = False
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line[0] in "#;":
            continue
        if line.startswith("[") and line.endswith("]"):
            in_section = True
            kept.append(line)
        elif in_section and "=" in line and not line.startswith("="):
            kept.append(line)
        else:
            log.debug("Ignoring settings line %r", line)
    return "\n".join(kept)


def parse_settings(text: str) -> AppConfig:
    """Build an :class:`AppConfig` from INI text.

    Unknown sections and keys are ignored. Blank cleanup/start slots are dropped,
    the rest keep their slot number so they run in slot order.
    """
    parser = _new_parser()
    parser.read_string(_clean_lines(text))

    data: Dict[str, Any] = {}
    for section, field in _SECTION_FIELDS.items():
        if not parser.has_section(section):
            continue
        values = {}
        for key, attr in _SCALAR_KEYS[section].items():
            if parser.has_option(section, key):
                values[attr] = parser.get(section, key)
        data[field] = values

    data["process_cleanup"] = []
    if parser.has_section("ProcessCleanup"):
        sec = parser["ProcessCleanup"]
        for i in range(1, MAX_SLOTS + 1):
            name = sec.get(f"Process{i}", "").strip()
            if not name:
                continue
            rule: Dict[str, Any] = {"slot": i, "process_name": name}
            if f"Process{i}_KeepAlive" in sec:
                rule["keep_alive"] = sec[f"Process{i}_KeepAlive"]
            if f"Process{i}_Delay" in sec:
                rule["delay_ms"] = sec[f"Process{i}_Delay"]
            data["process_cleanup"].append(rule)

    data["process_start"] = []
    if parser.has_section("ProcessStart"):
        sec = parser["ProcessStart"]
        for i in range(1, MAX_SLOTS + 1):
            path = sec.get(f"Process{i}", "").strip()
            if not path:
                continue
            rule = {"slot": i, "file_path": path}
            if f"Process{i}_Delay" in sec:
                rule["delay_ms"] = sec[f"Process{i}_Delay"]
            data["process_start"].append(rule)

    return AppConfig.model_validate(data)


class ConfigStore:
    """Reads ``settings.ini``, writing the documented default file first when it is missing."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = Path(path) if path is not None else settings_path()

    def load(self) -> AppConfig:
        if not self._path.exists():
            log.info("Settings file not found, creating defaults at %s", self._path)
            try:
                self.write_defaults()
            except OSError as e:
                log.error("Could not write default settings to %s (%s); using defaults", self._path, e)
                return parse_settings("\n".join(DEFAULT_SETTINGS))

        try:
            raw = self._path.read_text(encoding="utf-8-sig")
            return parse_settings(raw)
        except (OSError, UnicodeDecodeError, configparser.Error) as e:
            log.error("Could not read settings from %s (%s); using defaults", self._path, e)
            return parse_settings("\n".join(DEFAULT_SETTINGS))

    def write_defaults(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text("\n".join(DEFAULT_SETTINGS) + "\n", encoding="utf-8")

    def path(self) -> str:
        return str(self._path)
