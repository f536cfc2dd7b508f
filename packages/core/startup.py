"""
Startup application handling.

The configured app is validated before any UI exists (a missing absolute path
is the only fatal error in the program), then launched through the shell. Once
the startup countdown elapses the overlay may also open a maximized file-manager
window so the kiosk user lands somewhere useful.
"""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path
from typing import Callable, Optional

from packages.core.errors import StartupAppMissingError
from packages.core.processes.backends import ProcessLauncher, ShellWindow, WindowMaximizer
from packages.core.reporting.notifier import Notifier, LogNotifier
from packages.shared.config import StartupAppConfig

log = logging.getLogger(__name__)

SHELL_WINDOW_WAIT_S = 0.5


class StartupLauncher:
    def __init__(
        self,
        cfg: StartupAppConfig,
        launcher: ProcessLauncher,
        maximizer: WindowMaximizer,
        shell: ShellWindow,
        notifier: Optional[Notifier] = None,
        sleep: Callable[[float], None] = time.sleep,
        exists: Callable[[str], bool] = os.path.isfile,
    ) -> None:
        self._cfg = cfg
        self._launcher = launcher
        self._maximizer = maximizer
        self._shell = shell
        self._notifier: Notifier = notifier or LogNotifier()
        self._sleep = sleep
        self._exists = exists

    def validate(self) -> None:
        """Raise :class:`StartupAppMissingError` for an absolute path that is not there."""
        path = self._cfg.app_path.strip()
        if os.path.isabs(path) and not self._exists(path):
            raise StartupAppMissingError(path)

    def launch(self) -> bool:
        path = self._cfg.app_path.strip()
        # Only absolute paths get their own directory as working directory
        cwd = os.path.dirname(path) if os.path.isabs(path) else None
        try:
            self._launcher.launch(path, arguments=self._cfg.app_arguments.strip(), cwd=cwd, use_shell=True)
        except Exception as e:
            reason = getattr(e, "cause", None) or e
            log.error("Failed to start startup application %s: %s", path, reason)
            self._notifier.notify("Error", f"Failed to start application: {reason}", "error")
            return False
        log.info("Started startup application %s", path)
        return True

    def open_maximized_shell(self) -> bool:
        """Open the file manager at the home directory and maximize it. Best effort."""
        try:
            self._launcher.launch(self._shell.command, arguments=str(Path.home()), use_shell=True)
            self._sleep(SHELL_WINDOW_WAIT_S)
            if self._shell.window_class is None:
                return False
            found = self._maximizer.maximize(self._shell.window_class)
            if not found:
                # Window not up yet; accepted limitation, no retry
                log.debug("Shell window %s did not appear in time", self._shell.window_class)
            return found
        except Exception as e:
            reason = getattr(e, "cause", None) or e
            log.error("Failed to open shell window: %s", reason)
            self._notifier.notify("Error", f"Failed to open Explorer window: {reason}", "error")
            return False
