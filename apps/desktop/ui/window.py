"""
Full-screen overlay and the persistent close control.

The OverlayController decides what happens; this module only turns its
effects into widget changes, QTimer ticks and the one background close task.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Optional, Tuple

from PySide6.QtCore import QTimer, Qt, Signal
from PySide6.QtGui import QCloseEvent, QGuiApplication
from PySide6.QtWidgets import QApplication, QStackedLayout, QVBoxLayout, QWidget

from packages.core.overlay.close_sequence import CloseSequence
from packages.core.overlay.position import ControlGeometry, ScreenGeometry
from packages.core.overlay.scheduler import TaskScheduler
from packages.core.overlay.state_machine import Effect, OverlayController, OverlayEvent
from packages.core.processes.backends import Backends
from packages.core.processes.cleanup_engine import CleanupEngine
from packages.core.processes.start_sequencer import StartSequencer
from packages.core.reporting.notifier import Notifier
from packages.core.startup import StartupLauncher
from packages.shared.config import AppConfig, CloseButtonConfig

from .components import CloseControlButton, ImagePanel, OverlayLabel
from .dialogs import ask_cleanup_confirmation
from .theme import Theme

log = logging.getLogger(__name__)

COUNTDOWN_INTERVAL_MS = 1000
POSITION_INTERVAL_MS = 15000
RENDER_FLUSH_S = 0.1


class ControlWindow(QWidget):
    """Frameless top-most tool window holding only the close button."""

    activated = Signal()

    def __init__(self, cfg: CloseButtonConfig, theme: Theme, can_close: Callable[[], bool]) -> None:
        super().__init__(
            None,
            Qt.WindowType.FramelessWindowHint
            | Qt.WindowType.WindowStaysOnTopHint
            | Qt.WindowType.Tool,
        )
        self.setAttribute(Qt.WidgetAttribute.WA_ShowWithoutActivating)
        self.setWindowTitle(cfg.text)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self.button = CloseControlButton(cfg.text, self)
        self.button.clicked.connect(self.activated)
        layout.addWidget(self.button)

        self._can_close = can_close
        self.setStyleSheet(theme.control_stylesheet())

    def place(self, geom: ControlGeometry) -> None:
        self.setGeometry(geom.x, geom.y, geom.width, geom.height)
        self.raise_()

    def closeEvent(self, event: QCloseEvent) -> None:
        # Only the close sequence may take the control down
        if self._can_close():
            event.accept()
        else:
            event.ignore()


class OverlayWindow(QWidget):
    """Opaque full-screen surface for the startup and closing phases."""

    # Emitted from the close-sequence thread; Qt queues them onto the UI thread
    close_requested = Signal()
    close_finished = Signal()

    def __init__(
        self,
        cfg: AppConfig,
        backends: Backends,
        notifier: Notifier,
        startup: StartupLauncher,
    ) -> None:
        super().__init__(None, Qt.WindowType.FramelessWindowHint | Qt.WindowType.WindowStaysOnTopHint)
        self.setObjectName("OverlayWindow")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self.setWindowTitle("Kiosk Shell Helper")

        self.cfg = cfg
        self.theme = Theme(cfg)
        self.backends = backends
        self.notifier = notifier
        self.startup = startup

        self.controller = OverlayController(
            countdown_seconds=cfg.startup_app.delay_seconds,
            open_maximized_shell=cfg.startup_app.open_maximized_explorer,
            control_x=cfg.close_button.x,
            control_width=cfg.close_button.width,
            y_policy=cfg.close_button.y,
        )
        self.scheduler = TaskScheduler(after=self._after, after_cancel=self._after_cancel)
        self._close_sequence: Optional[CloseSequence] = None

        self.control = ControlWindow(cfg.close_button, self.theme, self._closing)
        self.control.activated.connect(lambda: self._dispatch("CONTROL_ACTIVATED"))

        # The close thread waits here until the overlay is gone
        self.close_requested.connect(self._close_overlay, Qt.ConnectionType.BlockingQueuedConnection)
        self.close_finished.connect(lambda: self._dispatch("CLOSE_FINISHED"))

        self._effects: Dict[Effect, Callable[[], None]] = {
            "STOP_COUNTDOWN": lambda: self.scheduler.cancel("countdown"),
            "OPEN_MAXIMIZED_SHELL": self.startup.open_maximized_shell,
            "SHOW_PERSISTENT_CONTROL": self._show_persistent_control,
            "RECOMPUTE_POSITION": self._recompute_position,
            "START_POSITION_TIMER": lambda: self.scheduler.start_periodic(
                "position", POSITION_INTERVAL_MS, lambda: self._dispatch("POSITION_TICK")
            ),
            "ASK_CONFIRMATION": self._ask_confirmation,
            "STOP_POSITION_TIMER": lambda: self.scheduler.cancel("position"),
            "SHOW_CLOSE_OVERLAY": self._show_close_overlay,
            "FLUSH_RENDER": self._flush_render,
            "START_CLOSE_TASK": self._start_close_task,
            "EXIT": QApplication.quit,
        }

        self._build_ui()
        self.setStyleSheet(self.theme.startup_stylesheet())

    def _build_ui(self) -> None:
        self._stack = QStackedLayout(self)
        self._stack.setContentsMargins(0, 0, 0, 0)

        o = self.cfg.open_overlay
        startup_view: QWidget
        image = ImagePanel.from_file(o.image_path.strip()) if o.display_mode == "Image" else None
        if image is not None:
            startup_view = image
        else:
            if o.display_mode == "Image":
                log.info("Overlay image %r unavailable, showing text instead", o.image_path)
            startup_view = OverlayLabel(o.text)
        self._startup_view = startup_view
        self._stack.addWidget(startup_view)

        self._closing_view = OverlayLabel(self.cfg.close_overlay.text)
        self._stack.addWidget(self._closing_view)
        self._stack.setCurrentWidget(startup_view)

    # --- timers -----------------------------------------------------------

    def _after(self, ms: int, cb: Callable[[], None]) -> QTimer:
        timer = QTimer(self)
        timer.setSingleShot(True)
        timer.timeout.connect(cb)
        timer.timeout.connect(timer.deleteLater)
        timer.start(ms)
        return timer

    def _after_cancel(self, handle: object) -> None:
        if isinstance(handle, QTimer):
            handle.stop()
            handle.deleteLater()

    # --- lifecycle ----------------------------------------------------------

    def start(self) -> None:
        """Show the startup overlay and begin the countdown."""
        self.showFullScreen()
        self.raise_()
        self.activateWindow()
        self.scheduler.start_periodic("countdown", COUNTDOWN_INTERVAL_MS, self._on_countdown_tick)

    def _on_countdown_tick(self) -> None:
        self._apply(self.controller.countdown_tick())

    def _dispatch(self, event: OverlayEvent) -> None:
        self._apply(self.controller.dispatch(event))

    def _apply(self, effects: Tuple[Effect, ...]) -> None:
        for effect in effects:
            log.debug("Effect %s", effect)
            self._effects[effect]()

    # --- effects ------------------------------------------------------------

    def _show_persistent_control(self) -> None:
        # The overlay steps aside entirely; only the control window stays clickable
        self.hide()
        self.control.show()
        self.control.raise_()

    def _screen_geometry(self) -> ScreenGeometry:
        screen = QGuiApplication.primaryScreen()
        full = screen.geometry()
        work = screen.availableGeometry()
        return ScreenGeometry(width=full.width(), height=full.height(), work_height=work.height())

    def _recompute_position(self) -> None:
        geom = self.controller.control_geometry(self._screen_geometry())
        log.debug("Close control at x=%d y=%d %dx%d", geom.x, geom.y, geom.width, geom.height)
        self.control.place(geom)

    def _ask_confirmation(self) -> None:
        confirmed = ask_cleanup_confirmation(self.cfg.cleanup_process_names(), self.control)
        self._dispatch("CONFIRM_YES" if confirmed else "CONFIRM_NO")

    def _show_close_overlay(self) -> None:
        self.control.hide()
        self.setStyleSheet(self.theme.closing_stylesheet())
        self._stack.setCurrentWidget(self._closing_view)
        self.showFullScreen()
        self.raise_()

    def _flush_render(self) -> None:
        # The "please wait" screen must be on glass before the UI thread goes quiet
        self.repaint()
        QApplication.processEvents()
        time.sleep(RENDER_FLUSH_S)

    def _start_close_task(self) -> None:
        if self._close_sequence is not None:
            return
        engine = CleanupEngine(self.backends.lister, self.backends.killer, notifier=self.notifier)
        sequencer = StartSequencer(self.backends.launcher, notifier=self.notifier)
        self._close_sequence = CloseSequence(
            engine=engine,
            sequencer=sequencer,
            cleanup_rules=self.cfg.process_cleanup,
            start_rules=self.cfg.process_start,
            cleanup_delay_ms=self.cfg.close_button.cleanup_delay_ms,
            request_overlay_close=self.close_requested.emit,
            on_finished=self.close_finished.emit,
            notifier=self.notifier,
        )
        self._close_sequence.start()

    def _close_overlay(self) -> None:
        self.close()
        self.control.close()

    def _closing(self) -> bool:
        return self.controller.state in ("CLOSING", "TERMINATED")

    def closeEvent(self, event: QCloseEvent) -> None:
        # Kiosk: no Alt+F4 before the close sequence has begun
        if self._closing():
            event.accept()
        else:
            event.ignore()
