from __future__ import annotations

from dataclasses import dataclass

FIRST_POSITION_BOTTOM_OFFSET = 150
DEFAULT_STRIP_HEIGHT = 40  # used when the taskbar/panel is hidden


@dataclass(frozen=True)
class ScreenGeometry:
    """Primary screen size and the part of it not reserved by the taskbar/panel."""
    width: int
    height: int
    work_height: int

    @property
    def reserved_strip_height(self) -> int:
        strip = self.height - self.work_height
        return strip if strip > 0 else DEFAULT_STRIP_HEIGHT


@dataclass(frozen=True)
class ControlGeometry:
    x: int
    y: int
    width: int
    height: int


def resolve_y(screen: ScreenGeometry, y_policy: str, first: bool) -> int:
    """
    Vertical position of the close control.

    The first placement always sits a fixed offset above the screen bottom.
    Afterwards ``y_policy`` applies: "auto" (or anything that is not an integer)
    places it flush above the reserved strip, an integer is used as is.
    """
    if first:
        return screen.height - FIRST_POSITION_BOTTOM_OFFSET
    policy = (y_policy or "").strip()
    if policy.lower() != "auto":
        try:
            return int(policy)
        except ValueError:
            pass
    return screen.work_height - screen.reserved_strip_height


def compute_control_geometry(screen: ScreenGeometry, x: int, width: int, y_policy: str, first: bool) -> ControlGeometry:
    return ControlGeometry(
        x=x,
        y=resolve_y(screen, y_policy, first),
        width=width,
        height=screen.reserved_strip_height,
    )
