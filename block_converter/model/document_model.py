"""Input elements and the converted document handed to writers."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from block_converter.model.style_model import AttributeTree


@dataclass(slots=True)
class ElementInput:
    """A source element already dispatched to a target unit type."""

    unit: str
    attrs: AttributeTree = field(default_factory=dict)
    content: str = ""
    path: Optional[str] = None
    settings: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ElementInput":
        """Read ``{"unit": ..., "attrs": {...}, "settings": {...}, "content": "..."}``.

        Malformed fields are left blank.
        """
        unit = data.get("unit", data.get("type", ""))
        attrs = data.get("attrs")
        content = data.get("content")
        path = data.get("path")
        settings = data.get("settings")
        return cls(
            unit=unit if isinstance(unit, str) else "",
            attrs=dict(attrs) if isinstance(attrs, dict) else {},
            content=content if isinstance(content, str) else "",
            path=path if isinstance(path, str) else None,
            settings=dict(settings) if isinstance(settings, dict) else {},
        )


@dataclass(slots=True)
class ConvertedDocument:
    """Markup plus the side outputs collected while converting one document."""

    markup: str
    stylesheet: str
    fonts: Dict[str, Dict[str, List[str]]] = field(default_factory=dict)
    inventory: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)
