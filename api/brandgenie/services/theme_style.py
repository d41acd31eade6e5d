"""Derive the view configuration for a selected theme.

The rendering layer receives CSS custom properties as explicit state instead
of the service touching any global style.
"""

from __future__ import annotations

import colorsys
from typing import Tuple

from ..models.schemas import HEX_COLOR_RE, ThemeConfig, ThemeStyle


def _hex_to_rgb(hex_str: str) -> Tuple[float, float, float]:
    if not HEX_COLOR_RE.match(hex_str or ""):
        raise ValueError(f"Invalid hex color format: {hex_str}")
    hex_str = hex_str.lstrip("#")
    return int(hex_str[0:2], 16) / 255, int(hex_str[2:4], 16) / 255, int(hex_str[4:6], 16) / 255


def hex_to_hsl(hex_str: str) -> str:
    """Convert ``#RRGGBB`` to a space-separated ``"H S% L%"`` triple."""
    r, g, b = _hex_to_rgb(hex_str)
    h, l, s = colorsys.rgb_to_hls(r, g, b)
    return f"{round(h * 360) % 360} {round(s * 100)}% {round(l * 100)}%"


def build_theme_style(theme: ThemeConfig) -> ThemeStyle:
    return ThemeStyle(
        css_variables={
            "--primary": hex_to_hsl(theme.primary_color),
            "--accent": hex_to_hsl(theme.accent_color),
            "--background": hex_to_hsl(theme.background_color),
        },
        headline_font=theme.headline_font,
        body_font=theme.body_font,
    )
