"""Unit conversion helpers for CSS lengths and RGB color space."""
from __future__ import annotations

import math
import re
from typing import Optional

ROOT_FONT_SIZE_PX = 16.0
RGB_CHANNEL_MAX = 255
MAX_RGB_DISTANCE = math.sqrt(3 * RGB_CHANNEL_MAX ** 2)

_LENGTH_RE = re.compile(r"^(-?\d*\.?\d+)\s*(px|rem|em)?$", re.IGNORECASE)


def rem_to_px(value: float) -> float:
    """Convert a root-relative length to pixels."""
    return value * ROOT_FONT_SIZE_PX


def length_to_px(value: object) -> Optional[float]:
    """Approximate a CSS length as pixels.

    ``px`` and unitless numbers are taken as is; ``rem`` and ``em`` are
    multiplied by the root font size. Any other unit yields ``None``.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        return None
    match = _LENGTH_RE.match(value.strip())
    if match is None:
        return None
    number = float(match.group(1))
    unit = (match.group(2) or "px").lower()
    if unit in ("rem", "em"):
        return rem_to_px(number)
    return number


def rgb_to_hex(red: int, green: int, blue: int) -> str:
    """Format an RGB triple as a lower-case six digit hex color."""
    return "#{:02x}{:02x}{:02x}".format(
        _clamp_channel(red), _clamp_channel(green), _clamp_channel(blue)
    )


def _clamp_channel(value: int) -> int:
    return max(0, min(RGB_CHANNEL_MAX, int(value)))
