"""Font family normalization and per-document font usage aggregation."""
from __future__ import annotations

import re
from typing import Dict, List, Mapping, Optional

from block_converter.model.style_model import FontRequirement
from block_converter.utils.logger import get_logger
from block_converter.utils.values import sanitize_font_family, sanitize_font_weight, scalar_text

LOGGER = get_logger(__name__)

GENERIC_FAMILIES = frozenset({"serif", "sans-serif", "monospace"})
SYSTEM_FAMILIES = frozenset(
    {
        "inherit",
        "initial",
        "unset",
        "serif",
        "sans-serif",
        "monospace",
        "cursive",
        "fantasy",
        "system-ui",
        "ui-sans-serif",
        "ui-serif",
        "ui-monospace",
        "ui-rounded",
    }
)
ITALIC_STYLES = frozenset({"italic", "oblique"})

_SPACES_RE = re.compile(r"\s+")


def normalize_font_family(raw: object) -> str:
    """Reduce a font-family list to its first family name."""
    family = sanitize_font_family(raw)
    if not family:
        return ""
    first = family.split(",")[0].strip().strip("\"' ")
    first = _SPACES_RE.sub(" ", first).strip()
    if first.lower() in GENERIC_FAMILIES:
        first = first.lower()
    if first.lower() in ("inherit", "initial", "unset"):
        return ""
    return first


def is_system_font(family: str) -> bool:
    return family.strip().lower() in SYSTEM_FAMILIES


class FontUsage:
    """Accumulates which families, weights and italic flags a document uses."""

    def __init__(self, aliases: Optional[Mapping[str, str]] = None) -> None:
        self._aliases = {key.strip().lower(): value for key, value in (aliases or {}).items()}
        self._families: Dict[str, FontRequirement] = {}

    def resolve_family(self, raw: object) -> str:
        """Normalize ``raw`` and apply the alias map (``"opensans" -> "Open Sans"``)."""
        family = normalize_font_family(raw)
        if not family:
            return ""
        alias = self._aliases.get(family.lower())
        if alias:
            family = normalize_font_family(alias)
        return family

    def register(self, family: object, weight: object = "", style: object = "") -> None:
        resolved = self.resolve_family(family)
        if not resolved or is_system_font(resolved):
            return
        requirement = self._families.get(resolved)
        if requirement is None:
            requirement = FontRequirement(family=resolved)
            self._families[resolved] = requirement

        clean_weight = sanitize_font_weight(weight)
        if clean_weight:
            requirement.weights.add(clean_weight)
        style_text = (scalar_text(style) or "").strip().lower()
        requirement.italics.add("1" if style_text in ITALIC_STYLES else "0")
        LOGGER.debug("Font usage %s weight=%r style=%r", resolved, clean_weight, style_text)

    def as_dict(self) -> Dict[str, Dict[str, List[str]]]:
        return {family: requirement.as_dict() for family, requirement in self._families.items()}

    def clear(self) -> None:
        self._families.clear()
