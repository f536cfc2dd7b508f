from __future__ import annotations

from typing import Optional


class KioskShellError(Exception):
    """Base class for errors raised by the kiosk shell core."""


class StartupAppMissingError(KioskShellError):
    """The startup application is configured with an absolute path that does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Startup application not found: {path}")
        self.path = path


class LaunchError(KioskShellError):
    def __init__(self, path: str, cause: Optional[BaseException] = None) -> None:
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to start {path}{detail}")
        self.path = path
        self.cause = cause
