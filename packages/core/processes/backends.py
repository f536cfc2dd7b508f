"""
Narrow OS capabilities the orchestrator depends on.

Each protocol has exactly one best-effort operation. The core logic
(matcher, cleanup engine, start sequencer, startup launcher) only ever sees
these protocols; the concrete classes below are wired in by the desktop app.

  ProcessLister    - enumerate live processes (psutil)
  ProcessKiller    - force-kill a process and its descendants (psutil)
  ProcessLauncher  - start a process or shell-open a target (subprocess / os.startfile)
  WindowMaximizer  - find a top-level window by class name and maximize it (user32 via ctypes)
"""

from __future__ import annotations

import ctypes
import logging
import os
import shlex
import subprocess
import sys
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional, Protocol

import psutil

from packages.core.errors import LaunchError

log = logging.getLogger(__name__)

# Executable suffix the OS appends to image names ("" where there is none)
EXE_SUFFIX = ".exe" if os.name == "nt" else ""


class ProcessEntry(Protocol):
    """One live process. Every accessor may raise if the process is gone or protected."""

    pid: int

    def name(self) -> str:
        ...

    def module_name(self) -> str:
        ...

    def start_time(self) -> datetime:
        ...


class ProcessLister(Protocol):
    def processes(self) -> Iterable[ProcessEntry]:
        ...


class ProcessKiller(Protocol):
    def kill_tree(self, pid: int, timeout: float) -> None:
        ...


class ProcessLauncher(Protocol):
    def launch(
        self,
        path: str,
        arguments: str = "",
        cwd: Optional[str] = None,
        use_shell: bool = False,
    ) -> None:
        ...


class WindowMaximizer(Protocol):
    def maximize(self, class_name: str) -> bool:
        ...


class PsutilProcessEntry:
    def __init__(self, proc: psutil.Process) -> None:
        self._proc = proc
        self.pid = proc.pid

    def name(self) -> str:
        return self._proc.name()

    def module_name(self) -> str:
        # Basename of the main executable image, e.g. "explorer.exe"
        return os.path.basename(self._proc.exe())

    def start_time(self) -> datetime:
        return datetime.fromtimestamp(self._proc.create_time())


class PsutilProcessLister:
    def processes(self) -> Iterable[ProcessEntry]:
        for proc in psutil.process_iter():
            yield PsutilProcessEntry(proc)


class PsutilTreeKiller:
    """Kills descendants first, then the root, then waits up to ``timeout`` seconds."""

    def kill_tree(self, pid: int, timeout: float) -> None:
        root = psutil.Process(pid)
        try:
            children = root.children(recursive=True)
        except psutil.Error:
            children = []

        procs = [*children, root]
        for p in procs:
            try:
                p.kill()
            except psutil.Error as e:
                log.debug("kill(%s) failed: %s", p.pid, e)

        gone, alive = psutil.wait_procs(procs, timeout=timeout)
        if alive:
            log.debug("Processes still alive after %.1fs: %s", timeout, [p.pid for p in alive])


class SubprocessLauncher:
    def launch(
        self,
        path: str,
        arguments: str = "",
        cwd: Optional[str] = None,
        use_shell: bool = False,
    ) -> None:
        try:
            if use_shell and os.name == "nt":
                os.startfile(path, arguments=arguments or "", cwd=cwd)
                return

            argv = [path, *shlex.split(arguments or "", posix=os.name != "nt")]
            if use_shell and os.path.isfile(path) and not os.access(path, os.X_OK):
                # Documents and other non-executables go through the desktop opener
                argv = ["xdg-open", path]

            kwargs: dict = {
                "cwd": cwd or None,
                "stdin": subprocess.DEVNULL,
                "stdout": subprocess.DEVNULL,
                "stderr": subprocess.DEVNULL,
            }
            if os.name == "nt":
                kwargs["creationflags"] = subprocess.CREATE_NEW_PROCESS_GROUP
            else:
                kwargs["start_new_session"] = True
            subprocess.Popen(argv, **kwargs)
        except (OSError, ValueError) as e:
            raise LaunchError(path, e) from e


class Win32WindowMaximizer:
    SW_MAXIMIZE = 3

    def __init__(self) -> None:
        user32 = ctypes.windll.user32
        user32.FindWindowW.argtypes = [ctypes.c_wchar_p, ctypes.c_wchar_p]
        user32.FindWindowW.restype = ctypes.c_void_p
        user32.ShowWindow.argtypes = [ctypes.c_void_p, ctypes.c_int]
        user32.ShowWindow.restype = ctypes.c_int
        self._user32 = user32

    def maximize(self, class_name: str) -> bool:
        hwnd = self._user32.FindWindowW(class_name, None)
        if not hwnd:
            log.debug("No top-level window with class %s", class_name)
            return False
        self._user32.ShowWindow(hwnd, self.SW_MAXIMIZE)
        return True


class NullWindowMaximizer:
    def maximize(self, class_name: str) -> bool:
        return False


@dataclass(frozen=True)
class ShellWindow:
    """How to open the platform file-manager shell and recognise its window."""
    command: str
    window_class: Optional[str]


@dataclass
class Backends:
    lister: ProcessLister
    killer: ProcessKiller
    launcher: ProcessLauncher
    maximizer: WindowMaximizer
    shell: ShellWindow


def default_backends() -> Backends:
    if sys.platform == "win32":
        maximizer: WindowMaximizer = Win32WindowMaximizer()
        shell = ShellWindow(command="explorer.exe", window_class="CabinetWClass")
    else:
        maximizer = NullWindowMaximizer()
        shell = ShellWindow(command="xdg-open", window_class=None)
    return Backends(
        lister=PsutilProcessLister(),
        killer=PsutilTreeKiller(),
        launcher=SubprocessLauncher(),
        maximizer=maximizer,
        shell=shell,
    )
