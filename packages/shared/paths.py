from __future__ import annotations

import os
import sys
from pathlib import Path

APP_NAME = "KioskShellHelper"
SETTINGS_FILE_NAME = "settings.ini"
SETTINGS_ENV_VAR = "KIOSK_SHELL_SETTINGS"


def app_data_dir() -> Path:
    base = os.environ.get("APPDATA") or str(Path.home())
    return Path(base) / APP_NAME

def install_dir() -> Path:
    # settings.ini sits next to the executable when frozen (single-file builds)
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path.cwd()

def settings_path() -> Path:
    override = os.environ.get(SETTINGS_ENV_VAR)
    if override:
        return Path(override)
    return install_dir() / SETTINGS_FILE_NAME

def logs_dir() -> Path:
    return app_data_dir() / "logs"

def log_path() -> Path:
    return logs_dir() / "kiosk-shell.log"

def ensure_app_dirs() -> None:
    app_data_dir().mkdir(parents=True, exist_ok=True)
    logs_dir().mkdir(parents=True, exist_ok=True)
