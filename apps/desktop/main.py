import logging
import signal
import sys
from PySide6.QtWidgets import QApplication

from packages.shared.paths import ensure_app_dirs
from packages.shared.store import ConfigStore
from packages.core.errors import StartupAppMissingError
from packages.core.logging_ import setup_logging
from packages.core.processes.backends import default_backends
from packages.core.startup import StartupLauncher
from .ui.dialogs import DialogNotifier
from .ui.window import OverlayWindow

log = logging.getLogger(__name__)


def main() -> None:
    ensure_app_dirs()
    setup_logging()

    store = ConfigStore()
    cfg = store.load()
    log.info("Loaded settings from %s", store.path())

    app = QApplication(sys.argv)
    # The overlay closes before the replacement processes start; exit is explicit
    app.setQuitOnLastWindowClosed(False)

    notifier = DialogNotifier()
    backends = default_backends()
    startup = StartupLauncher(
        cfg.startup_app,
        backends.launcher,
        backends.maximizer,
        backends.shell,
        notifier=notifier,
    )

    try:
        startup.validate()
    except StartupAppMissingError as e:
        log.error("%s", e)
        notifier.notify("Error", str(e), "error")
        sys.exit(1)

    startup.launch()

    win = OverlayWindow(cfg, backends, notifier, startup)
    win.start()

    # Ctrl+C from a console during development
    def signal_handler(sig, frame):
        print("\nReceived interrupt signal (Ctrl+C), shutting down...")
        app.quit()

    if hasattr(signal, 'SIGINT'):
        signal.signal(signal.SIGINT, signal_handler)

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
