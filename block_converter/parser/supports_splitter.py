"""Partition normalized attributes into native, external and dropped buckets."""
from __future__ import annotations

from copy import deepcopy
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Tuple, Union

from block_converter.model.style_model import AttributeTree, Declarations, SplitResult
from block_converter.model.support_matrix import SUPPORT_MATRIX, SupportPolicy, UnitType, policy_for
from block_converter.utils.logger import get_logger
from block_converter.utils.values import (
    camel_to_kebab,
    format_background_image,
    normalize_style_value,
    scalar_text,
)

LOGGER = get_logger(__name__)

_SIDES = ("top", "right", "bottom", "left")
_RADIUS_CORNERS = ("top-left", "top-right", "bottom-left", "bottom-right")


def _property_table() -> Dict[str, str]:
    table = {
        "typography-font-family": "font-family",
        "typography-font-size": "font-size",
        "typography-font-style": "font-style",
        "typography-font-weight": "font-weight",
        "typography-letter-spacing": "letter-spacing",
        "typography-line-height": "line-height",
        "typography-text-align": "text-align",
        "typography-text-columns": "column-count",
        "typography-text-decoration": "text-decoration",
        "typography-text-transform": "text-transform",
        "typography-word-spacing": "word-spacing",
        "typography-writing-mode": "writing-mode",
        "spacing-padding": "padding",
        "spacing-margin": "margin",
        "spacing-block-gap": "gap",
        "spacing-block-gap-top": "row-gap",
        "spacing-block-gap-left": "column-gap",
        "color-text": "color",
        "color-background": "background-color",
        "color-gradient": "background-image",
        "dimensions-min-height": "min-height",
        "dimensions-width": "width",
        "dimensions-aspect-ratio": "aspect-ratio",
        "border-color": "border-color",
        "border-width": "border-width",
        "border-style": "border-style",
        "border-radius": "border-radius",
        "background-image": "background-image",
        "background-image-url": "background-image",
        "background-background-image": "background-image",
        "background-background-image-url": "background-image",
        "background-position": "background-position",
        "background-background-position": "background-position",
        "background-size": "background-size",
        "background-background-size": "background-size",
        "background-repeat": "background-repeat",
        "background-background-repeat": "background-repeat",
        "background-attachment": "background-attachment",
        "background-background-attachment": "background-attachment",
        "box-shadow": "box-shadow",
        "shadow": "box-shadow",
    }
    for side in _SIDES:
        table[f"spacing-padding-{side}"] = f"padding-{side}"
        table[f"spacing-margin-{side}"] = f"margin-{side}"
        for leaf in ("color", "style", "width"):
            table[f"border-{side}-{leaf}"] = f"border-{side}-{leaf}"
    for corner in _RADIUS_CORNERS:
        table[f"border-radius-{corner}"] = f"border-{corner}-radius"
    return table


# Flattened style path to the CSS property it styles. Paths missing here have
# no stylesheet form.
CSS_PROPERTY_MAP: Mapping[str, str] = MappingProxyType(_property_table())


def flatten_style(prefix: str, value: Any) -> Iterator[Tuple[str, Any]]:
    """Yield ``(kebab-path, leaf)`` pairs for a style sub-tree."""
    if isinstance(value, dict):
        for key, child in value.items():
            yield from flatten_style(f"{prefix}-{camel_to_kebab(str(key))}", child)
        return
    yield prefix, value


def split_attributes(
    unit: Union[str, UnitType, None],
    attrs: AttributeTree,
    matrix: Mapping[UnitType, SupportPolicy] = SUPPORT_MATRIX,
) -> SplitResult:
    """Split ``attrs`` against the policy of ``unit``.

    Allowed style categories move to ``native`` whole and are not inspected.
    Other style categories are flattened into ``external`` and also recorded,
    un-flattened, under ``dropped["style"]``. Simple attributes go to
    ``native`` when allowed and to ``dropped`` otherwise.
    """
    result = SplitResult()
    if not isinstance(attrs, dict):
        return result

    policy = policy_for(unit, matrix)
    for key, value in attrs.items():
        if key == "style" and isinstance(value, dict):
            native_style, dropped_style = _split_style(policy, value, result.external)
            if native_style:
                result.native["style"] = native_style
            if dropped_style:
                result.dropped["style"] = dropped_style
        elif policy.allows_attr(key):
            result.native[key] = deepcopy(value)
        else:
            result.dropped[key] = deepcopy(value)

    if result.external or result.dropped:
        LOGGER.debug(
            "Split %s: external=%s dropped=%s", unit, sorted(result.external), sorted(result.dropped)
        )
    return result


def _split_style(
    policy: SupportPolicy, style: Dict[str, Any], external: Dict[str, Any]
) -> Tuple[AttributeTree, AttributeTree]:
    native: AttributeTree = {}
    dropped: AttributeTree = {}
    for category, subtree in style.items():
        if policy.allows_style(category):
            native[category] = deepcopy(subtree)
            continue
        for path, leaf in flatten_style(camel_to_kebab(str(category)), subtree):
            external[path] = deepcopy(leaf)
        dropped[category] = deepcopy(subtree)
    return native, dropped


def css_property_for(path: str) -> str:
    """Translate a flattened style path into the CSS property it styles.

    Returns ``""`` for paths without a stylesheet form, such as ``elements``
    or ``layout`` sub-trees.
    """
    return CSS_PROPERTY_MAP.get(path, "")


def unmapped_style_paths(external: Mapping[str, Any]) -> Dict[str, Any]:
    """The part of an ``external`` bucket that :func:`to_css_declarations` skips."""
    return {path: deepcopy(value) for path, value in external.items() if not css_property_for(path)}


def to_css_declarations(external: Mapping[str, Any]) -> Declarations:
    """Turn an ``external`` bucket into property/value pairs for the stylesheet.

    Unmapped paths and non-scalar leaves have no CSS form and are skipped.
    """
    declarations: Declarations = {}
    for path, value in external.items():
        prop = css_property_for(path)
        text = scalar_text(value)
        if not prop or text is None or not text.strip():
            continue
        if prop == "background-image" and not text.strip().startswith(("url(", "linear-gradient", "radial-gradient")):
            text = format_background_image(text)
        declarations[prop] = normalize_style_value(text.strip())
    return declarations
