"""Canonicalize attribute trees before they are split against a unit's policy."""
from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict

from block_converter.model.style_model import AttributeTree
from block_converter.utils.logger import get_logger
from block_converter.utils.values import normalize_zero_dimension, scalar_text

LOGGER = get_logger(__name__)

SPACING_SIDES = ("padding", "margin")
ZERO_COLLAPSE_TYPOGRAPHY = ("letterSpacing", "wordSpacing")
# Values the target renders implicitly; re-asserting them only adds noise.
IMPLICIT_DEFAULTS = {"fontStyle": "normal", "textDecoration": "none"}


def prune_empty(node: Any) -> Any:
    """Recursively drop ``None``, ``""`` and collections that end up empty."""
    if isinstance(node, dict):
        pruned: Dict[str, Any] = {}
        for key, value in node.items():
            value = prune_empty(value)
            if _is_blank(value):
                continue
            pruned[key] = value
        return pruned
    if isinstance(node, list):
        return [item for item in (prune_empty(item) for item in node) if not _is_blank(item)]
    return node


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (dict, list, tuple, set)):
        return len(value) == 0
    return False


def normalize_style_tree(unit: str, style: Any) -> AttributeTree:
    """Elide implicit defaults, collapse zero lengths to ``"0"`` and prune."""
    if not isinstance(style, dict):
        return {}
    style = deepcopy(style)

    typography = style.get("typography")
    if isinstance(typography, dict):
        for key, default in IMPLICIT_DEFAULTS.items():
            text = scalar_text(typography.get(key))
            if text is not None and text.strip().lower() == default:
                del typography[key]
        for key in ZERO_COLLAPSE_TYPOGRAPHY:
            if key in typography:
                _collapse_zero(typography, key)

    spacing = style.get("spacing")
    if isinstance(spacing, dict):
        for side in SPACING_SIDES:
            sides = spacing.get(side)
            if isinstance(sides, dict):
                for key in list(sides):
                    _collapse_zero(sides, key)
            elif side in spacing:
                _collapse_zero(spacing, side)
        if "blockGap" in spacing:
            _collapse_zero(spacing, "blockGap")

    dimensions = style.get("dimensions")
    if isinstance(dimensions, dict) and "minHeight" in dimensions:
        _collapse_zero(dimensions, "minHeight")

    normalized = prune_empty(style)
    LOGGER.debug("Normalized %s style tree: %s", unit, normalized)
    return normalized


def _collapse_zero(container: Dict[str, Any], key: str) -> None:
    value = container[key]
    if isinstance(value, (dict, list)):
        return
    if normalize_zero_dimension(value) == "0":
        container[key] = "0"


def normalize_attributes(unit: str, attrs: Any) -> AttributeTree:
    """Normalize a unit's full attribute map, including its ``style`` tree."""
    if not isinstance(attrs, dict):
        return {}
    attrs = dict(attrs)

    aria_label = attrs.get("ariaLabel")
    if aria_label is not None and (scalar_text(aria_label) or "").strip() == "":
        del attrs["ariaLabel"]

    if "style" in attrs:
        style = normalize_style_tree(unit, attrs["style"])
        if style:
            attrs["style"] = style
        else:
            del attrs["style"]

    return prune_empty(attrs)
