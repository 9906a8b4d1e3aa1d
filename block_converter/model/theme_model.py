"""Theme preset definitions: color palette and font-size scale."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Tuple


@dataclass(frozen=True, slots=True)
class ColorPreset:
    """A named palette entry such as ``primary -> #336699``."""

    slug: str
    color: str


@dataclass(frozen=True, slots=True)
class FontSizePreset:
    """A named entry of the theme's font-size scale."""

    slug: str
    size: str


@dataclass(frozen=True, slots=True)
class ThemePresets:
    """Palette and font-size scale of the active theme, in declared order."""

    colors: Tuple[ColorPreset, ...] = field(default_factory=tuple)
    font_sizes: Tuple[FontSizePreset, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.colors and not self.font_sizes

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ThemePresets":
        """Build presets from ``{"colors": [...], "fontSizes": [...]}``.

        Entries are ``{"slug": ..., "color": ...}`` / ``{"slug": ..., "size": ...}``;
        malformed entries are skipped.
        """
        colors = tuple(
            ColorPreset(slug=slug, color=value)
            for slug, value in _entries(data.get("colors"), "color")
        )
        font_sizes = tuple(
            FontSizePreset(slug=slug, size=value)
            for slug, value in _entries(data.get("fontSizes", data.get("font_sizes")), "size")
        )
        return cls(colors=colors, font_sizes=font_sizes)


def _entries(raw: object, value_key: str) -> Iterable[Tuple[str, str]]:
    if not isinstance(raw, list):
        return []
    entries: List[Tuple[str, str]] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        slug = item.get("slug")
        value = item.get(value_key)
        if isinstance(slug, str) and slug.strip() and isinstance(value, (str, int, float)):
            entries.append((slug.strip(), str(value)))
    return entries
