"""
QSS generation for the overlay and the close control.

All colors come from settings.ini as RGB triples; this module only turns them
into stylesheets and fonts.
"""

from __future__ import annotations

from packages.shared.config import AppConfig, Rgb

TYPOGRAPHY = {
    "font_family": "Arial",
    "overlay_font_pt": 48,
    "control_font_pt": 12,
    "font_weight_bold": "700",
}

SPACING = {
    "overlay_margin": "32px",
    "control_padding": "0px 8px",
}


def rgb_css(color: Rgb) -> str:
    r, g, b = color
    return f"rgb({r}, {g}, {b})"


def adjust_brightness(color: Rgb, percent: int) -> Rgb:
    """Lighten (positive) or darken (negative) a color by ``percent``."""
    factor = 1 + (percent / 100)
    r, g, b = (max(0, min(255, int(c * factor))) for c in color)
    return (r, g, b)


class Theme:
    """Stylesheets for the three visual phases: startup overlay, close control, closing overlay."""

    def __init__(self, cfg: AppConfig) -> None:
        self.cfg = cfg

    def overlay_stylesheet(self, background: Rgb, text: Rgb) -> str:
        return f"""
        QWidget#OverlayWindow {{
            background-color: {rgb_css(background)};
        }}

        QLabel#OverlayLabel {{
            color: {rgb_css(text)};
            background-color: transparent;
            font-family: {TYPOGRAPHY["font_family"]};
            font-size: {TYPOGRAPHY["overlay_font_pt"]}pt;
            font-weight: {TYPOGRAPHY["font_weight_bold"]};
            margin: {SPACING["overlay_margin"]};
        }}

        QLabel#ImagePanel {{
            background-color: transparent;
        }}
        """

    def startup_stylesheet(self) -> str:
        o = self.cfg.open_overlay
        return self.overlay_stylesheet(o.background_color, o.text_color)

    def closing_stylesheet(self) -> str:
        c = self.cfg.close_overlay
        return self.overlay_stylesheet(c.background_color, c.text_color)

    def control_stylesheet(self) -> str:
        b = self.cfg.close_button
        return f"""
        QPushButton#CloseControl {{
            background-color: {rgb_css(b.background_color)};
            color: {rgb_css(b.text_color)};
            border: none;
            border-radius: 0px;
            padding: {SPACING["control_padding"]};
            font-family: {TYPOGRAPHY["font_family"]};
            font-size: {TYPOGRAPHY["control_font_pt"]}pt;
            font-weight: {TYPOGRAPHY["font_weight_bold"]};
        }}

        QPushButton#CloseControl:hover {{
            background-color: {rgb_css(adjust_brightness(b.background_color, 15))};
        }}

        QPushButton#CloseControl:pressed {{
            background-color: {rgb_css(adjust_brightness(b.background_color, -20))};
        }}
        """

