"""Read page-builder widget settings into block attribute trees."""
from __future__ import annotations

import re
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence

from block_converter.model.style_model import AttributeTree
from block_converter.parser.style_normalizer import prune_empty
from block_converter.utils.logger import get_logger
from block_converter.utils.values import (
    normalize_alignment,
    normalize_color,
    sanitize_font_family,
    sanitize_font_style,
    sanitize_font_weight,
    sanitize_text_decoration,
    scalar_text,
)

LOGGER = get_logger(__name__)

_HAS_UNIT_RE = re.compile(r"[a-z%]+$", re.IGNORECASE)

SIDES = ("top", "right", "bottom", "left")
# Page-builder radius sides map onto corners clockwise from the top left.
RADIUS_CORNERS = (
    ("top", "topLeft"),
    ("right", "topRight"),
    ("bottom", "bottomRight"),
    ("left", "bottomLeft"),
)

KNOWN_ALIGNMENT_KEYS = (
    "flex_justify_content",
    "align",
    "alignment",
    "button_align",
    "content_position",
    "justify_content",
    "horizontal_align",
    "layout_align",
    "layout_justify_content",
    "icon_align",
    "image_align",
    "position",
    "text_align",
)

# setting key -> (typography attribute, takes a {size, unit} slider)
TYPOGRAPHY_FIELDS = (
    ("typography_font_family", "fontFamily", False),
    ("typography_font_size", "fontSize", True),
    ("typography_font_weight", "fontWeight", False),
    ("typography_line_height", "lineHeight", True),
    ("typography_font_style", "fontStyle", False),
    ("typography_text_decoration", "textDecoration", False),
    ("typography_text_transform", "textTransform", False),
    ("typography_letter_spacing", "letterSpacing", True),
    ("typography_word_spacing", "wordSpacing", True),
)
_KEYWORD_SANITIZERS = {
    "fontFamily": sanitize_font_family,
    "fontWeight": sanitize_font_weight,
    "fontStyle": sanitize_font_style,
    "textDecoration": sanitize_text_decoration,
}

SPACING_KEYS = (("_margin", "margin"), ("margin", "margin"), ("_padding", "padding"), ("padding", "padding"))
GAP_KEYS = ("gap", "gap_columns", "column_gap")
TEXT_COLOR_KEYS = ("title_color", "text_color", "color")
BACKGROUND_COLOR_KEYS = ("_background_color", "background_color")


def resolve_dimension(value: Any, fallback_unit: str = "px") -> str:
    """Turn ``{"size": 10, "unit": "em"}``, ``"10"`` or ``10`` into a CSS length."""
    if isinstance(value, dict):
        size = value.get("size", value.get("value", ""))
        unit = scalar_text(value.get("unit")) or fallback_unit
        size_text = scalar_text(size)
        if size_text is None or size_text.strip() == "":
            return ""
        return f"{size_text.strip()}{unit}"

    text = scalar_text(value)
    if text is None:
        return ""
    text = text.strip()
    if not text or text.lower() == "default":
        return ""
    if _HAS_UNIT_RE.search(text):
        return text
    return f"{text}{fallback_unit or 'px'}"


def parse_typography(settings: Mapping[str, Any]) -> AttributeTree:
    """``typography_*`` settings to a ``typography`` tree (unprefixed keys)."""
    if not isinstance(settings, Mapping):
        return {}
    typography: Dict[str, str] = {}
    for key, attr, is_slider in TYPOGRAPHY_FIELDS:
        if key not in settings:
            continue
        raw = settings[key]
        if is_slider:
            fallback = "" if key == "typography_line_height" else "px"
            value = _slider_value(raw, fallback)
        else:
            sanitizer = _KEYWORD_SANITIZERS.get(attr)
            value = sanitizer(raw) if sanitizer else (scalar_text(raw) or "").strip()
        if value:
            typography[attr] = value
    return typography


def _slider_value(raw: Any, fallback_unit: str) -> str:
    if not isinstance(raw, dict):
        return resolve_dimension(raw, fallback_unit) if fallback_unit else (scalar_text(raw) or "").strip()
    size = scalar_text(raw.get("size"))
    if size is None or size.strip() == "":
        return ""
    unit = raw.get("unit")
    unit_text = scalar_text(unit) if unit is not None else fallback_unit
    return f"{size.strip()}{unit_text or ''}"


def parse_spacing(settings: Mapping[str, Any]) -> AttributeTree:
    """Margin, padding and gap settings to a ``spacing`` tree."""
    if not isinstance(settings, Mapping):
        return {}
    spacing: AttributeTree = {}
    for key, kind in SPACING_KEYS:
        box = settings.get(key)
        if not isinstance(box, dict) or not box:
            continue
        unit = scalar_text(box.get("unit")) or "px"
        resolved = {}
        for side in SIDES:
            if side in box:
                value = resolve_dimension(box[side], unit)
                if value:
                    resolved[side] = value
        if resolved:
            spacing[kind] = resolved

    for key in GAP_KEYS:
        if not settings.get(key):
            continue
        value = resolve_dimension(settings[key], "px")
        if value:
            spacing["blockGap"] = value
            break
    return spacing


def parse_border(settings: Mapping[str, Any]) -> AttributeTree:
    """``border_*`` settings to a ``border`` tree."""
    if not isinstance(settings, Mapping):
        return {}
    border: AttributeTree = {}

    radius = settings.get("border_radius")
    if isinstance(radius, dict):
        unit = scalar_text(radius.get("unit")) or "px"
        corners = {}
        for side, corner in RADIUS_CORNERS:
            if side in radius:
                value = resolve_dimension(radius[side], unit)
                if value:
                    corners[corner] = value
        if corners:
            border["radius"] = corners

    style = (scalar_text(settings.get("border_border")) or "").strip()
    if style:
        border["style"] = style

    color = normalize_color(settings.get("border_color"))
    width = settings.get("border_width")
    if isinstance(width, dict):
        unit = scalar_text(width.get("unit")) or "px"
        for side in SIDES:
            if side in width:
                value = resolve_dimension(width[side], unit)
                if value:
                    border.setdefault(side, {})["width"] = value
                    if color:
                        border[side]["color"] = color
    if color and not any(side in border for side in SIDES):
        border["color"] = color
    return border


def parse_colors(settings: Mapping[str, Any]) -> AttributeTree:
    """Text and background colors as lower-case hex."""
    if not isinstance(settings, Mapping):
        return {}
    color: AttributeTree = {}
    text = _first_color(settings, TEXT_COLOR_KEYS)
    if text:
        color["text"] = text
    background = _first_color(settings, BACKGROUND_COLOR_KEYS)
    if background:
        color["background"] = background
    return color


def _first_color(settings: Mapping[str, Any], keys: Iterable[str]) -> str:
    for key in keys:
        value = normalize_color(settings.get(key))
        if value:
            return value
    return ""


def parse_container_styles(settings: Mapping[str, Any]) -> AttributeTree:
    """Spacing, background color and custom classes of a container element."""
    if not isinstance(settings, Mapping):
        return {}
    attrs: AttributeTree = {}
    style: AttributeTree = {}

    spacing = parse_spacing(settings)
    if spacing:
        style["spacing"] = spacing
    background = _first_color(settings, BACKGROUND_COLOR_KEYS)
    if background:
        style["color"] = {"background": background}

    classes = (scalar_text(settings.get("css_classes")) or "").strip()
    if classes:
        attrs["className"] = classes
    if style:
        attrs["style"] = style
    return attrs


def parse_element_style(settings: Any) -> AttributeTree:
    """Everything the reader understands, merged into one attribute tree."""
    if not isinstance(settings, Mapping):
        return {}
    attrs = parse_container_styles(settings)
    style = attrs.setdefault("style", {})
    style["typography"] = parse_typography(settings)
    style["border"] = parse_border(settings)
    colors = parse_colors(settings)
    if colors:
        style.setdefault("color", {}).update(colors)

    alignment = detect_alignment(settings)
    if alignment:
        attrs["textAlign"] = alignment
    attrs = prune_empty(attrs)
    LOGGER.debug("Read %d setting(s) into %s", len(settings), sorted(attrs))
    return attrs


def detect_alignment(
    settings: Mapping[str, Any],
    priority_keys: Sequence[str] = (),
    fallback: Optional[Iterable[Any]] = None,
) -> str:
    """First recognizable alignment among ``priority_keys`` then the known keys."""
    if not isinstance(settings, Mapping):
        return ""
    for key in list(priority_keys) + list(KNOWN_ALIGNMENT_KEYS):
        if key not in settings:
            continue
        value = normalize_alignment(settings[key])
        if value:
            return value
    for value in fallback or ():
        normalized = normalize_alignment(value)
        if normalized:
            return normalized
    return ""
