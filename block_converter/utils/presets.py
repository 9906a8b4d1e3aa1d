"""Match literal colors and font sizes to theme presets within a tolerance."""
from __future__ import annotations

import math
from copy import deepcopy
from typing import AbstractSet, Any, Dict, Optional, Sequence, Tuple

from block_converter.model.theme_model import ColorPreset, FontSizePreset, ThemePresets
from block_converter.utils.logger import get_logger
from block_converter.utils.units import MAX_RGB_DISTANCE, length_to_px
from block_converter.utils.values import parse_rgb

LOGGER = get_logger(__name__)

COLOR_MATCH_TOLERANCE = 0.03
FONT_SIZE_MIN_TOLERANCE_PX = 0.25
FONT_SIZE_RELATIVE_TOLERANCE = 0.03
# Absorbs float rounding so a distance of exactly ``tolerance`` still matches.
_DISTANCE_EPSILON = 1e-9

RGB = Tuple[float, float, float]


def rgb_distance(first: RGB, second: RGB) -> float:
    """Euclidean distance between two colors in RGB space."""
    return math.sqrt(sum((a - b) ** 2 for a, b in zip(first, second)))


def normalized_rgb_distance(first: RGB, second: RGB) -> float:
    """RGB distance scaled to ``0..1`` by the largest possible distance."""
    return rgb_distance(first, second) / MAX_RGB_DISTANCE


def within_color_tolerance(first: RGB, second: RGB, tolerance: float = COLOR_MATCH_TOLERANCE) -> bool:
    return rgb_distance(first, second) <= tolerance * MAX_RGB_DISTANCE + _DISTANCE_EPSILON


def match_color_preset(
    value: object,
    presets: Sequence[ColorPreset],
    tolerance: float = COLOR_MATCH_TOLERANCE,
) -> Optional[str]:
    """Return the slug of the closest palette color within ``tolerance``."""
    target = parse_rgb(value)
    if target is None or not presets:
        return None

    best_slug: Optional[str] = None
    best_distance = math.inf
    for preset in presets:
        candidate = parse_rgb(preset.color)
        if candidate is None:
            continue
        if not within_color_tolerance(target, candidate, tolerance):
            continue
        distance = rgb_distance(target, candidate)
        if distance < best_distance:
            best_slug = preset.slug
            best_distance = distance
    return best_slug


def font_size_to_px(value: object) -> Optional[float]:
    """Approximate a font size in pixels (``rem``/``em`` x 16)."""
    return length_to_px(value)


def match_font_size_preset(value: object, presets: Sequence[FontSizePreset]) -> Optional[str]:
    """Return the first preset whose size is within tolerance of ``value``.

    Presets are visited in declared order, so ties go to the earlier entry
    rather than the closer one.
    """
    target = font_size_to_px(value)
    if target is None:
        return None
    for preset in presets:
        size = font_size_to_px(preset.size)
        if size is None:
            continue
        tolerance = max(FONT_SIZE_MIN_TOLERANCE_PX, size * FONT_SIZE_RELATIVE_TOLERANCE)
        if abs(target - size) <= tolerance + _DISTANCE_EPSILON:
            return preset.slug
    return None


def apply_theme_presets(
    attrs: Dict[str, Any],
    theme: Optional[ThemePresets],
    allowed_attrs: Optional[AbstractSet[str]] = None,
) -> Dict[str, Any]:
    """Replace literal text/background colors and font sizes with preset slugs.

    A literal is only swapped for a slug attribute when the unit accepts that
    attribute (``allowed_attrs``) and the slug attribute is not already set.
    """
    if theme is None or theme.is_empty:
        return attrs
    style = attrs.get("style")
    if not isinstance(style, dict):
        return attrs

    result = deepcopy(attrs)
    style = result["style"]

    def allowed(name: str) -> bool:
        return (allowed_attrs is None or name in allowed_attrs) and name not in result

    color = style.get("color")
    if isinstance(color, dict):
        for key, attr_name in (("text", "textColor"), ("background", "backgroundColor")):
            if key not in color or not allowed(attr_name):
                continue
            slug = match_color_preset(color[key], theme.colors)
            if slug is not None:
                LOGGER.debug("Matched %s color %s to preset %s", key, color[key], slug)
                result[attr_name] = slug
                del color[key]
        if not color:
            del style["color"]

    typography = style.get("typography")
    if isinstance(typography, dict) and "fontSize" in typography and allowed("fontSize"):
        slug = match_font_size_preset(typography["fontSize"], theme.font_sizes)
        if slug is not None:
            LOGGER.debug("Matched font size %s to preset %s", typography["fontSize"], slug)
            result["fontSize"] = slug
            del typography["fontSize"]
            if not typography:
                del style["typography"]

    if not style:
        del result["style"]
    return result
