from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from packages.shared.paths import log_path, ensure_app_dirs

# Close-sequence work runs on its own thread; keep it distinguishable from the UI thread
LOG_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(name)s - %(message)s"
MAX_LOG_BYTES = 2_000_000
LOG_BACKUPS = 3


def setup_logging(level: int = logging.INFO, log_file: Optional[Path] = None) -> None:
    """Console plus rotating file logging. Calling it again is a no-op."""
    root = logging.getLogger()
    root.setLevel(level)

    if root.handlers:
        return

    if log_file is None:
        ensure_app_dirs()
        log_file = log_path()

    fmt = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(fmt)
    root.addHandler(console)

    rotating = RotatingFileHandler(str(log_file), maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8")
    rotating.setFormatter(fmt)
    root.addHandler(rotating)

    logging.getLogger(__name__).debug("Logging to %s", log_file)
