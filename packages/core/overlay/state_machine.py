"""
Overlay lifecycle: STARTUP -> PERSISTENT_CONTROL <-> CONFIRM_PENDING -> CLOSING -> TERMINATED

The table below is the whole state machine. ``transition`` is pure; the
``OverlayController`` owns the single current state plus the bits of
bookkeeping the table cannot express (countdown, first placement of the
control). The UI executes the returned effects in order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Literal, Optional, Sequence, Tuple

from .position import ControlGeometry, ScreenGeometry, compute_control_geometry

log = logging.getLogger(__name__)

OverlayState = Literal["STARTUP", "PERSISTENT_CONTROL", "CONFIRM_PENDING", "CLOSING", "TERMINATED"]

OverlayEvent = Literal[
    "COUNTDOWN_ELAPSED",
    "POSITION_TICK",
    "CONTROL_ACTIVATED",
    "CONFIRM_YES",
    "CONFIRM_NO",
    "CLOSE_FINISHED",
]

Effect = Literal[
    "STOP_COUNTDOWN",
    "OPEN_MAXIMIZED_SHELL",
    "SHOW_PERSISTENT_CONTROL",
    "RECOMPUTE_POSITION",
    "START_POSITION_TIMER",
    "ASK_CONFIRMATION",
    "STOP_POSITION_TIMER",
    "SHOW_CLOSE_OVERLAY",
    "FLUSH_RENDER",
    "START_CLOSE_TASK",
    "EXIT",
]


@dataclass(frozen=True)
class Transition:
    state: OverlayState
    effects: Tuple[Effect, ...] = ()


TRANSITIONS: Dict[Tuple[OverlayState, OverlayEvent], Transition] = {
    ("STARTUP", "COUNTDOWN_ELAPSED"): Transition(
        "PERSISTENT_CONTROL",
        (
            "STOP_COUNTDOWN",
            "OPEN_MAXIMIZED_SHELL",
            "SHOW_PERSISTENT_CONTROL",
            "RECOMPUTE_POSITION",
            "START_POSITION_TIMER",
        ),
    ),
    ("PERSISTENT_CONTROL", "POSITION_TICK"): Transition("PERSISTENT_CONTROL", ("RECOMPUTE_POSITION",)),
    ("PERSISTENT_CONTROL", "CONTROL_ACTIVATED"): Transition("CONFIRM_PENDING", ("ASK_CONFIRMATION",)),
    # The position timer keeps running while the question is on screen
    ("CONFIRM_PENDING", "POSITION_TICK"): Transition("CONFIRM_PENDING", ("RECOMPUTE_POSITION",)),
    ("CONFIRM_PENDING", "CONFIRM_NO"): Transition("PERSISTENT_CONTROL"),
    ("CONFIRM_PENDING", "CONFIRM_YES"): Transition(
        "CLOSING",
        ("STOP_POSITION_TIMER", "SHOW_CLOSE_OVERLAY", "FLUSH_RENDER", "START_CLOSE_TASK"),
    ),
    ("CLOSING", "CLOSE_FINISHED"): Transition("TERMINATED", ("EXIT",)),
}


def transition(state: OverlayState, event: OverlayEvent) -> Optional[Transition]:
    """Next state and effects, or None when ``event`` means nothing in ``state``."""
    return TRANSITIONS.get((state, event))


def confirmation_message(process_names: Sequence[str]) -> str:
    names = ", ".join(process_names) if process_names else "configured processes"
    return f"This will clean up the following processes: {names}\n\nAre you sure?"


class OverlayController:
    """Single owner of the overlay state. Only the UI thread calls into it."""

    def __init__(
        self,
        countdown_seconds: int,
        open_maximized_shell: bool = True,
        control_x: int = 0,
        control_width: int = 200,
        y_policy: str = "auto",
    ) -> None:
        self._state: OverlayState = "STARTUP"
        self._remaining = countdown_seconds
        self._open_maximized_shell = open_maximized_shell
        self._control_x = control_x
        self._control_width = control_width
        self._y_policy = y_policy
        self._first_position = True

    @property
    def state(self) -> OverlayState:
        return self._state

    @property
    def remaining_seconds(self) -> int:
        return self._remaining

    def countdown_tick(self) -> Tuple[Effect, ...]:
        """One second of the startup countdown. Elapses once the count reaches zero."""
        if self._state != "STARTUP":
            return ()
        self._remaining -= 1
        if self._remaining <= 0:
            return self.dispatch("COUNTDOWN_ELAPSED")
        return ()

    def dispatch(self, event: OverlayEvent) -> Tuple[Effect, ...]:
        step = transition(self._state, event)
        if step is None:
            log.debug("Ignoring %s in state %s", event, self._state)
            return ()

        previous, self._state = self._state, step.state
        effects = step.effects
        if not self._open_maximized_shell:
            effects = tuple(e for e in effects if e != "OPEN_MAXIMIZED_SHELL")
        if previous != self._state:
            log.info("Overlay %s -> %s (%s)", previous, self._state, event)
        return effects

    def control_geometry(self, screen: ScreenGeometry) -> ControlGeometry:
        first, self._first_position = self._first_position, False
        return compute_control_geometry(
            screen,
            x=self._control_x,
            width=self._control_width,
            y_policy=self._y_policy,
            first=first,
        )
