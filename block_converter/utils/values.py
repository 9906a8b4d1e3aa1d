"""Scalar style value normalization.

Every function here is total: it accepts whatever a widget setting happens to
hold and returns either a canonical string or an explicit empty sentinel
(``""`` or ``None``). Callers check for emptiness before using a value.
"""
from __future__ import annotations

import re
from typing import Dict, List, Mapping, Optional, Tuple

from block_converter.utils.units import rgb_to_hex

ZERO_DIMENSION_RE = re.compile(r"^0(\.0+)?(px|em|rem|%)?$")
CSS_DIMENSION_RE = re.compile(r"^-?(\d+\.?\d*|\.\d+)(px|em|rem|vh|vw|%)?$", re.IGNORECASE)

_HEX_SHORT_RE = re.compile(r"^#([0-9a-f]{3})$")
_HEX_LONG_RE = re.compile(r"^#([0-9a-f]{6})$")
_RGB_RE = re.compile(r"^rgb\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*\)$")
_RGBA_RE = re.compile(
    r"^rgba\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d*\.?\d+)\s*\)$"
)
_CAMEL_RE = re.compile(r"([a-z0-9])([A-Z])")
_CLASS_STRIP_RE = re.compile(r"[^A-Za-z0-9_-]")
_PERCENT_OCTET_RE = re.compile(r"%[a-fA-F0-9]{2}")
_FONT_FAMILY_STRIP_RE = re.compile(r"[^A-Za-z0-9 ,'\"_.\-]")
_WHITESPACE_RE = re.compile(r"\s+")

FONT_WEIGHTS = frozenset(str(weight) for weight in range(100, 1000, 100))
FONT_WEIGHT_KEYWORDS: Dict[str, str] = {"normal": "400", "bold": "700"}
FONT_STYLES = frozenset({"normal", "italic", "oblique"})
TEXT_DECORATIONS = frozenset({"none", "underline", "overline", "line-through"})
CSS_WIDE_KEYWORDS = frozenset({"inherit", "initial", "unset", "default"})

ALIGNMENT_MAP: Mapping[str, str] = {
    "left": "left",
    "center": "center",
    "right": "right",
    "end": "end",
    "start": "start",
    "justify": "justify",
    "justified": "justify",
    "flex-start": "start",
    "flex-end": "end",
    "space-between": "justify",
    "space-around": "justify",
    "space-evenly": "justify",
    "middle": "center",
}


def scalar_text(value: object) -> Optional[str]:
    """Return the string form of a scalar setting, ``None`` for anything else."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return None


# ----------------------------------------------------------------------
# Dimensions
def normalize_zero_dimension(value: object) -> str:
    """Collapse zero-like lengths (``0px``, ``0.00em``, ``0%``) to ``"0"``.

    Blank or non-scalar values give ``""``; anything else is returned
    unchanged.
    """
    text = scalar_text(value)
    if text is None:
        return ""
    if text.strip() == "":
        return ""
    if ZERO_DIMENSION_RE.match(text.strip().lower()):
        return "0"
    return text


def zero_dimension_or_none(value: object) -> Optional[str]:
    """Return ``"0"`` for zero-like lengths and ``None`` for everything else.

    ``None`` tells the caller the value has no native representation and
    must be externalized as is.
    """
    return "0" if normalize_zero_dimension(value) == "0" else None


def sanitize_css_dimension(value: object) -> str:
    """Accept plain numeric lengths in px/em/rem/vh/vw/% (or unitless)."""
    text = scalar_text(value)
    if text is None:
        return ""
    text = text.strip()
    if not CSS_DIMENSION_RE.match(text):
        return ""
    return text.lower()


# ----------------------------------------------------------------------
# Colors
def parse_rgb(value: object) -> Optional[Tuple[int, int, int]]:
    """Parse hex, ``rgb()`` or visible ``rgba()`` colors into an RGB triple."""
    text = scalar_text(value)
    if text is None:
        return None
    color = text.strip().lower()
    if not color:
        return None

    match = _HEX_SHORT_RE.match(color)
    if match:
        digits = match.group(1)
        return (int(digits[0] * 2, 16), int(digits[1] * 2, 16), int(digits[2] * 2, 16))

    match = _HEX_LONG_RE.match(color)
    if match:
        digits = match.group(1)
        return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))

    match = _RGB_RE.match(color)
    if match:
        return _channels(match.group(1), match.group(2), match.group(3))

    match = _RGBA_RE.match(color)
    if match:
        if float(match.group(4)) <= 0:
            return None
        return _channels(match.group(1), match.group(2), match.group(3))

    return None


def _channels(red: str, green: str, blue: str) -> Optional[Tuple[int, int, int]]:
    triple = (int(red), int(green), int(blue))
    if any(channel > 255 for channel in triple):
        return None
    return triple


def normalize_color(value: object) -> str:
    """Return a lower-case ``#rrggbb`` color or ``""``.

    Fully transparent colors, ``transparent`` and variable references are
    treated as no color at all.
    """
    rgb = parse_rgb(value)
    if rgb is None:
        return ""
    return rgb_to_hex(*rgb)


def is_variable_reference(value: object) -> bool:
    """True for theme/global tokens that carry no literal value."""
    text = scalar_text(value)
    if text is None:
        return False
    lowered = text.strip().lower()
    return lowered.startswith(("var(", "var:")) or "globals/" in lowered


# ----------------------------------------------------------------------
# Typography keywords
def sanitize_font_weight(value: object) -> str:
    text = scalar_text(value)
    if text is None:
        return ""
    text = text.strip().lower()
    if text in FONT_WEIGHT_KEYWORDS:
        return FONT_WEIGHT_KEYWORDS[text]
    return text if text in FONT_WEIGHTS else ""


def sanitize_font_style(value: object) -> str:
    text = scalar_text(value)
    if text is None:
        return ""
    text = text.strip().lower()
    return text if text in FONT_STYLES else ""


def sanitize_text_decoration(value: object) -> str:
    text = scalar_text(value)
    if text is None:
        return ""
    text = text.strip().lower()
    return text if text in TEXT_DECORATIONS else ""


def sanitize_font_family(value: object) -> str:
    """Strip characters that do not belong in a font-family list."""
    text = scalar_text(value)
    if text is None:
        return ""
    if is_variable_reference(text):
        return ""
    cleaned = _FONT_FAMILY_STRIP_RE.sub("", text)
    cleaned = _WHITESPACE_RE.sub(" ", cleaned).strip()
    if cleaned.lower() in CSS_WIDE_KEYWORDS:
        return ""
    return cleaned


# ----------------------------------------------------------------------
# Classes, keys and misc
def clean_class(value: object) -> str:
    """Sanitize a single HTML class name."""
    text = scalar_text(value)
    if text is None:
        return ""
    text = _PERCENT_OCTET_RE.sub("", text)
    return _CLASS_STRIP_RE.sub("", text)


def split_classes(value: object) -> List[str]:
    """Split a class attribute string into sanitized, de-duplicated names."""
    text = scalar_text(value)
    if text is None:
        return []
    seen: Dict[str, None] = {}
    for part in text.split():
        clean = clean_class(part)
        if clean:
            seen.setdefault(clean, None)
    return list(seen)


def camel_to_kebab(value: str) -> str:
    return _CAMEL_RE.sub(r"\1-\2", value).replace("_", "-").lower()


def normalize_alignment(value: object) -> str:
    """Map loose alignment spellings onto canonical values."""
    if isinstance(value, dict):
        value = value.get("value", value.get("size"))
    if not isinstance(value, str):
        return ""
    return ALIGNMENT_MAP.get(value.strip().lower(), "")


def format_background_image(value: object) -> str:
    """Wrap a background image reference in ``url(...)`` when needed."""
    if isinstance(value, dict):
        value = value.get("url", "")
    text = scalar_text(value)
    if text is None:
        return ""
    text = text.strip()
    if not text:
        return ""
    if text.startswith("url("):
        return text
    return f"url({text})"


def normalize_style_value(value: object) -> str:
    """Resolve ``var:preset|color|primary`` references into CSS variables."""
    text = scalar_text(value)
    if text is None:
        return ""
    if text.startswith("var:"):
        parts = [clean_class(part) for part in text[4:].split("|")]
        parts = [part for part in parts if part]
        if parts:
            return "var(--wp--" + "--".join(parts) + ")"
    return text
