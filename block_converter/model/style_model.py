"""Style model: split results, stylesheet rules, font requirements and the inventory."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Set

AttributeTree = Dict[str, Any]
Declarations = Dict[str, str]

BASE_REASON_PREFIXES = ("kit", "theme")


@dataclass(slots=True)
class SplitResult:
    """Outcome of partitioning an attribute tree against a unit's policy."""

    native: AttributeTree = field(default_factory=dict)
    external: Dict[str, Any] = field(default_factory=dict)
    dropped: AttributeTree = field(default_factory=dict)


class Tier(str, Enum):
    """Precedence tier of a stylesheet rule."""

    BASE = "base"
    OVERRIDE = "override"

    @classmethod
    def from_reason(cls, reason: str) -> "Tier":
        """Kit/theme level reasons are base styles; everything else overrides."""
        if isinstance(reason, str) and reason.strip().lower().startswith(BASE_REASON_PREFIXES):
            return cls.BASE
        return cls.OVERRIDE


@dataclass(slots=True)
class Rule:
    """A selector with its declarations, rendered outside any media query."""

    selector: str
    declarations: Declarations = field(default_factory=dict)
    tier: Tier = Tier.OVERRIDE

    def merge(self, declarations: Mapping[str, str]) -> None:
        """Last write wins per property."""
        self.declarations.update(declarations)


@dataclass(slots=True)
class MediaRule(Rule):
    """A rule scoped to a media query."""

    query: str = ""


@dataclass(slots=True)
class FontRequirement:
    """Weights and italic flags a font family is used with."""

    family: str
    weights: Set[str] = field(default_factory=set)
    italics: Set[str] = field(default_factory=set)

    def as_dict(self) -> Dict[str, List[str]]:
        return {
            "weights": sorted(self.weights) or ["400"],
            "italics": sorted(self.italics) or ["0"],
        }


@dataclass(slots=True)
class Inventory:
    """Append-only record of what happened to each attribute during conversion."""

    externalized: List[Dict[str, Any]] = field(default_factory=list)
    dropped: List[Dict[str, Any]] = field(default_factory=list)
    conversions: List[Dict[str, Any]] = field(default_factory=list)

    def as_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            "externalized": [dict(entry) for entry in self.externalized],
            "dropped": [dict(entry) for entry in self.dropped],
            "conversions": [dict(entry) for entry in self.conversions],
        }

    def clear(self) -> None:
        self.externalized.clear()
        self.dropped.clear()
        self.conversions.clear()
