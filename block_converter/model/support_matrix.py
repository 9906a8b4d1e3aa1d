"""Closed table of what each target unit type can carry natively."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional, Union


class UnitType(str, Enum):
    """Target unit types the converter knows about."""

    PARAGRAPH = "paragraph"
    HEADING = "heading"
    LIST = "list"
    QUOTE = "quote"
    GROUP = "group"
    COLUMNS = "columns"
    COLUMN = "column"
    BUTTONS = "buttons"
    BUTTON = "button"
    IMAGE = "image"
    GALLERY = "gallery"
    VIDEO = "video"
    EMBED = "embed"
    HTML = "html"
    SPACER = "spacer"
    SEPARATOR = "separator"
    COVER = "cover"

    @classmethod
    def lookup(cls, unit: Union[str, "UnitType", None]) -> Optional["UnitType"]:
        """Resolve ``"heading"`` or ``"core/heading"``; ``None`` when unknown."""
        if isinstance(unit, UnitType):
            return unit
        if not isinstance(unit, str):
            return None
        slug = unit.strip().lower().rsplit("/", 1)[-1]
        try:
            return cls(slug)
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class SupportPolicy:
    """Allow-sets of one unit type: native style categories and simple attributes."""

    style: FrozenSet[str] = field(default_factory=frozenset)
    attrs: FrozenSet[str] = field(default_factory=frozenset)

    def allows_style(self, category: str) -> bool:
        return category in self.style

    def allows_attr(self, name: str) -> bool:
        return name in UNIVERSAL_ATTRS or name in self.attrs


# Accepted on every unit, including unknown ones.
UNIVERSAL_ATTRS: FrozenSet[str] = frozenset({"className"})

EMPTY_POLICY = SupportPolicy()

_TEXT_STYLE = frozenset({"typography", "spacing", "color"})
_PRESET_ATTRS = frozenset({"textColor", "backgroundColor", "fontSize"})


def _policy(style: FrozenSet[str], *attrs: str) -> SupportPolicy:
    return SupportPolicy(style=frozenset(style), attrs=frozenset(attrs))


SUPPORT_MATRIX: Mapping[UnitType, SupportPolicy] = MappingProxyType(
    {
        UnitType.PARAGRAPH: _policy(_TEXT_STYLE, "align", "dropCap", *_PRESET_ATTRS),
        UnitType.HEADING: _policy(_TEXT_STYLE, "textAlign", "level", "anchor", *_PRESET_ATTRS),
        UnitType.LIST: _policy(_TEXT_STYLE, "ordered", "start", "reversed", *_PRESET_ATTRS),
        UnitType.QUOTE: _policy(_TEXT_STYLE, "citation", "textAlign", *_PRESET_ATTRS),
        UnitType.GROUP: _policy(
            _TEXT_STYLE, "layout", "tagName", "align", "anchor", *_PRESET_ATTRS
        ),
        UnitType.COLUMNS: _policy(
            frozenset({"spacing", "color"}),
            "align",
            "verticalAlignment",
            "isStackedOnMobile",
            "textColor",
            "backgroundColor",
        ),
        UnitType.COLUMN: _policy(
            frozenset({"spacing", "color"}),
            "align",
            "width",
            "verticalAlignment",
            "textColor",
            "backgroundColor",
        ),
        UnitType.BUTTONS: _policy(frozenset({"spacing"}), "layout", "align"),
        UnitType.BUTTON: _policy(
            _TEXT_STYLE, "width", "align", "textAlign", "url", "linkTarget", "rel", *_PRESET_ATTRS
        ),
        UnitType.IMAGE: _policy(
            frozenset({"border", "spacing"}),
            "id",
            "url",
            "alt",
            "caption",
            "href",
            "linkDestination",
            "linkTarget",
            "sizeSlug",
            "width",
            "height",
            "align",
        ),
        UnitType.GALLERY: _policy(
            frozenset({"spacing"}), "columns", "imageCrop", "linkTo", "sizeSlug", "align"
        ),
        UnitType.VIDEO: _policy(
            frozenset({"spacing"}),
            "id",
            "src",
            "poster",
            "caption",
            "autoplay",
            "loop",
            "muted",
            "controls",
            "playsInline",
            "align",
        ),
        UnitType.EMBED: _policy(
            frozenset({"spacing"}),
            "url",
            "type",
            "providerNameSlug",
            "responsive",
            "caption",
            "align",
        ),
        UnitType.HTML: EMPTY_POLICY,
        UnitType.SPACER: _policy(frozenset({"spacing"}), "height", "width"),
        UnitType.SEPARATOR: _policy(
            frozenset({"color", "spacing"}), "opacity", "tagName", "backgroundColor"
        ),
        UnitType.COVER: _policy(
            frozenset({"spacing", "color", "dimensions", "typography"}),
            "url",
            "id",
            "dimRatio",
            "overlayColor",
            "customOverlayColor",
            "minHeight",
            "minHeightUnit",
            "contentPosition",
            "isDark",
            "align",
        ),
    }
)


def policy_for(
    unit: Union[str, UnitType, None],
    matrix: Mapping[UnitType, SupportPolicy] = SUPPORT_MATRIX,
) -> SupportPolicy:
    """Return the unit's policy, or an empty one for unknown units."""
    unit_type = UnitType.lookup(unit)
    if unit_type is None:
        return EMPTY_POLICY
    return matrix.get(unit_type, EMPTY_POLICY)
