"""Assemble serialized blocks from native attributes and inner content."""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, List, Mapping, Optional, Union

from block_converter.model.style_model import AttributeTree
from block_converter.model.support_matrix import UnitType
from block_converter.parser.style_normalizer import prune_empty
from block_converter.renderer.block_serializer import serialize_block, strip_core_namespace
from block_converter.renderer.html_attributes import build_attribute_string
from block_converter.renderer.image_markup import normalize_image_markup
from block_converter.renderer.inline_style import build_inline_style
from block_converter.utils.logger import get_logger
from block_converter.utils.values import clean_class, scalar_text, split_classes

LOGGER = get_logger(__name__)

PostProcessor = Callable[[Mapping[str, Any], str], str]

BLOCK_NAME_RE = re.compile(r"^([a-z][a-z0-9_-]*/)?[a-z][a-z0-9_-]*$")
GROUP_TAGS = frozenset({"div", "section", "main", "aside", "header", "footer", "article"})
# Units whose color and font size classes belong on the inner element.
INNER_PRESET_UNITS = frozenset({UnitType.BUTTON.value})


class BuildPath(str, Enum):
    """How a block's wrapper markup is produced."""

    CANONICAL = "canonical"
    HEURISTIC = "heuristic"


@dataclass(frozen=True, slots=True)
class BuilderPolicy:
    path: BuildPath = BuildPath.CANONICAL
    wrapper_tag: str = "div"
    post_process: Optional[PostProcessor] = None


_CANONICAL = BuilderPolicy()
_WRAPPER = BuilderPolicy(path=BuildPath.HEURISTIC)

BUILDER_POLICIES: Mapping[UnitType, BuilderPolicy] = MappingProxyType(
    {
        UnitType.PARAGRAPH: _CANONICAL,
        UnitType.HEADING: _CANONICAL,
        UnitType.LIST: _CANONICAL,
        UnitType.QUOTE: _CANONICAL,
        UnitType.GROUP: _WRAPPER,
        UnitType.COLUMNS: _WRAPPER,
        UnitType.COLUMN: _WRAPPER,
        UnitType.BUTTONS: _WRAPPER,
        UnitType.BUTTON: _WRAPPER,
        UnitType.IMAGE: BuilderPolicy(post_process=normalize_image_markup),
        UnitType.GALLERY: _CANONICAL,
        UnitType.VIDEO: _CANONICAL,
        UnitType.EMBED: _CANONICAL,
        UnitType.HTML: _CANONICAL,
        UnitType.SPACER: _CANONICAL,
        UnitType.SEPARATOR: _CANONICAL,
        UnitType.COVER: _CANONICAL,
    }
)


def policy_for_unit(unit: str) -> BuilderPolicy:
    unit_type = UnitType.lookup(unit)
    if unit_type is None:
        return _CANONICAL
    return BUILDER_POLICIES.get(unit_type, _CANONICAL)


def build(
    unit: str,
    attrs: Optional[AttributeTree],
    content: str = "",
    path: Optional[Union[BuildPath, str]] = None,
) -> str:
    """Serialize one block.

    ``path`` forces the canonical or heuristic wrapper path for this call;
    otherwise the unit's policy decides. A unit name that is not a valid
    block name yields ``content`` unchanged.
    """
    name = (scalar_text(unit) or "").strip().lower()
    if not BLOCK_NAME_RE.match(name):
        LOGGER.debug("Cannot build block with invalid name %r", unit)
        return content if isinstance(content, str) else ""
    slug = strip_core_namespace(name)
    content = content if isinstance(content, str) else ""

    attrs = prune_empty(attrs) if isinstance(attrs, dict) else {}
    if slug == UnitType.HTML.value:
        attrs = {}

    if slug == UnitType.BUTTON.value and not content.strip():
        return serialize_block(name, attrs, "")

    policy = policy_for_unit(slug)
    chosen = _resolve_path(path, policy)
    if chosen is BuildPath.HEURISTIC:
        tag = _wrapper_tag(slug, attrs, policy)
        content = render_wrapper(slug, attrs, content, tag)
    elif policy.post_process is not None:
        content = policy.post_process(attrs, content)

    return serialize_block(name, attrs, content)


def _resolve_path(path: Optional[Union[BuildPath, str]], policy: BuilderPolicy) -> BuildPath:
    if isinstance(path, BuildPath):
        return path
    if isinstance(path, str):
        try:
            return BuildPath(path.strip().lower())
        except ValueError:
            LOGGER.debug("Unknown build path %r, using %s", path, policy.path.value)
    return policy.path


def _wrapper_tag(slug: str, attrs: AttributeTree, policy: BuilderPolicy) -> str:
    if slug == UnitType.GROUP.value:
        tag = (scalar_text(attrs.get("tagName")) or "").strip().lower()
        if tag in GROUP_TAGS:
            return tag
    return policy.wrapper_tag


def wrapper_classes(slug: str, attrs: Mapping[str, Any]) -> List[str]:
    """``wp-block-<slug>``, alignment, preset classes and custom classes."""
    classes = [f"wp-block-{slug}"]

    align = clean_class((scalar_text(attrs.get("align")) or "").strip())
    if align:
        classes.append(f"align{align}")

    if slug not in INNER_PRESET_UNITS:
        classes.extend(preset_classes(attrs))
    classes.extend(split_classes(attrs.get("className")))
    return list(dict.fromkeys(classes))


def preset_classes(attrs: Mapping[str, Any]) -> List[str]:
    classes: List[str] = []

    style = attrs.get("style") if isinstance(attrs.get("style"), Mapping) else {}
    color = style.get("color") if isinstance(style.get("color"), Mapping) else {}

    text_slug = clean_class(attrs.get("textColor"))
    if text_slug:
        classes.append(f"has-{text_slug}-color")
    if text_slug or color.get("text"):
        classes.append("has-text-color")

    background_slug = clean_class(attrs.get("backgroundColor"))
    if background_slug:
        classes.append(f"has-{background_slug}-background-color")
    if background_slug or color.get("background"):
        classes.append("has-background")

    font_size_slug = clean_class(attrs.get("fontSize"))
    if font_size_slug:
        classes.append(f"has-{font_size_slug}-font-size")
    return classes


def render_wrapper(slug: str, attrs: Mapping[str, Any], content: str, tag: str = "div") -> str:
    """``<tag class="..." style="...">content</tag>`` for container-like blocks."""
    attributes = build_attribute_string(
        {"class": wrapper_classes(slug, attrs), "style": build_inline_style(attrs.get("style"))}
    )
    return f"<{tag} {attributes}>{content}</{tag}>"
