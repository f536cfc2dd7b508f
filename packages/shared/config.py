from __future__ import annotations

from typing import Any, List, Literal, Tuple

from pydantic import BaseModel, Field, ValidationInfo, field_validator

MAX_SLOTS = 10

Rgb = Tuple[int, int, int]
DisplayMode = Literal["Text", "Image"]


def coerce_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def coerce_rgb(value: Any, default: Rgb) -> Rgb:
    """Parse an ``R,G,B`` triple; anything else (wrong arity, non-int, out of range) gives ``default``."""
    if isinstance(value, (tuple, list)):
        parts = [str(p) for p in value]
    elif isinstance(value, str):
        parts = value.split(",")
    else:
        return default
    if len(parts) != 3:
        return default
    try:
        r, g, b = (int(p.strip()) for p in parts)
    except ValueError:
        return default
    if not all(0 <= c <= 255 for c in (r, g, b)):
        return default
    return (r, g, b)


def _field_default(model: type[BaseModel], info: ValidationInfo) -> Any:
    return model.model_fields[info.field_name].default


class GeneralConfig(BaseModel):
    delay_seconds: int = 5

    @field_validator("delay_seconds", mode="before")
    @classmethod
    def _lenient_int(cls, v: Any, info: ValidationInfo) -> int:
        return coerce_int(v, _field_default(cls, info))


class StartupAppConfig(BaseModel):
    app_path: str = "explorer.exe"
    app_arguments: str = ""
    delay_seconds: int = 1
    open_maximized_explorer: bool = True

    @field_validator("delay_seconds", mode="before")
    @classmethod
    def _lenient_int(cls, v: Any, info: ValidationInfo) -> int:
        return coerce_int(v, _field_default(cls, info))

    @field_validator("open_maximized_explorer", mode="before")
    @classmethod
    def _flag(cls, v: Any) -> bool:
        if isinstance(v, bool):
            return v
        return str(v).strip().lower() == "true"


class OpenOverlayConfig(BaseModel):
    display_mode: DisplayMode = "Text"
    text: str = "Loading Explorer..."
    background_color: Rgb = (0, 0, 0)
    text_color: Rgb = (255, 255, 255)
    image_path: str = ""

    @field_validator("display_mode", mode="before")
    @classmethod
    def _mode(cls, v: Any) -> str:
        return "Image" if str(v).strip().lower() == "image" else "Text"

    @field_validator("background_color", "text_color", mode="before")
    @classmethod
    def _color(cls, v: Any, info: ValidationInfo) -> Rgb:
        return coerce_rgb(v, _field_default(cls, info))


class CloseButtonConfig(BaseModel):
    background_color: Rgb = (139, 0, 0)
    text_color: Rgb = (255, 255, 255)
    text: str = "Close Explorer"
    x: int = 0
    y: str = "auto"  # "auto" or an integer pixel offset from the top
    width: int = 200
    cleanup_delay_ms: int = 5000

    @field_validator("background_color", "text_color", mode="before")
    @classmethod
    def _color(cls, v: Any, info: ValidationInfo) -> Rgb:
        return coerce_rgb(v, _field_default(cls, info))

    @field_validator("x", "width", "cleanup_delay_ms", mode="before")
    @classmethod
    def _lenient_int(cls, v: Any, info: ValidationInfo) -> int:
        return coerce_int(v, _field_default(cls, info))

    @field_validator("y", mode="before")
    @classmethod
    def _y(cls, v: Any) -> str:
        return str(v).strip() or "auto"


class CloseOverlayConfig(BaseModel):
    background_color: Rgb = (0, 0, 0)
    text_color: Rgb = (255, 255, 255)
    text: str = "Please Wait..."

    @field_validator("background_color", "text_color", mode="before")
    @classmethod
    def _color(cls, v: Any, info: ValidationInfo) -> Rgb:
        return coerce_rgb(v, _field_default(cls, info))


class CleanupRule(BaseModel, frozen=True):
    process_name: str
    slot: int = 0
    keep_alive: int = 0
    delay_ms: int = 200

    @field_validator("keep_alive", "delay_ms", mode="before")
    @classmethod
    def _non_negative(cls, v: Any, info: ValidationInfo) -> int:
        return max(0, coerce_int(v, _field_default(cls, info)))


class StartRule(BaseModel, frozen=True):
    file_path: str
    slot: int = 0
    delay_ms: int = 200

    @field_validator("delay_ms", mode="before")
    @classmethod
    def _non_negative(cls, v: Any, info: ValidationInfo) -> int:
        return max(0, coerce_int(v, _field_default(cls, info)))


class AppConfig(BaseModel):
    general: GeneralConfig = Field(default_factory=GeneralConfig)
    startup_app: StartupAppConfig = Field(default_factory=StartupAppConfig)
    open_overlay: OpenOverlayConfig = Field(default_factory=OpenOverlayConfig)
    close_button: CloseButtonConfig = Field(default_factory=CloseButtonConfig)
    close_overlay: CloseOverlayConfig = Field(default_factory=CloseOverlayConfig)
    process_cleanup: List[CleanupRule] = Field(default_factory=lambda: [
        CleanupRule(slot=1, process_name="explorer"),
    ])
    process_start: List[StartRule] = Field(default_factory=list)

    def cleanup_process_names(self) -> List[str]:
        return [r.process_name for r in self.process_cleanup if r.process_name.strip()]
