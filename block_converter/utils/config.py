"""Converter settings loaded from a JSON file or a plain mapping."""
from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping

from block_converter.model.theme_model import ThemePresets
from block_converter.utils.logger import get_logger

LOGGER = get_logger(__name__)

_ALIAS_SEPARATOR_RE = re.compile(r"\s*(=>|=|:)\s*")


@dataclass(frozen=True, slots=True)
class ConverterConfig:
    """Settings shared by every element of one conversion run."""

    class_prefix: str = "bc-ext-"
    class_hash_length: int = 10
    tablet_max_width: int = 1024
    mobile_max_width: int = 767
    font_aliases: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    theme: ThemePresets = field(default_factory=ThemePresets)
    verify_round_trip: bool = True
    block_separator: str = "\n\n"

    @property
    def tablet_query(self) -> str:
        return f"(max-width: {self.tablet_max_width}px)"

    @property
    def mobile_query(self) -> str:
        return f"(max-width: {self.mobile_max_width}px)"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ConverterConfig":
        """Build a config from a mapping; unknown keys and malformed values are ignored."""
        kwargs: Dict[str, Any] = {}

        for name in ("class_prefix", "block_separator"):
            value = data.get(name)
            if isinstance(value, str) and (value.strip() or name == "block_separator"):
                kwargs[name] = value
        for name in ("class_hash_length", "tablet_max_width", "mobile_max_width"):
            value = data.get(name)
            if isinstance(value, int) and not isinstance(value, bool) and value > 0:
                kwargs[name] = value
        if isinstance(data.get("verify_round_trip"), bool):
            kwargs["verify_round_trip"] = data["verify_round_trip"]

        if "font_aliases" in data:
            kwargs["font_aliases"] = MappingProxyType(parse_font_alias_map(data["font_aliases"]))
        theme = data.get("theme")
        if isinstance(theme, Mapping):
            kwargs["theme"] = ThemePresets.from_mapping(theme)

        return cls(**kwargs)

    @classmethod
    def from_file(cls, path: Path) -> "ConverterConfig":
        """Read a JSON config file."""
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a JSON object: {path}")
        LOGGER.debug("Loaded config from %s", path)
        return cls.from_mapping(data)


def parse_font_alias_map(raw: Any) -> Dict[str, str]:
    """Parse font aliases given as a mapping, a JSON object or ``wrong => right`` lines.

    Keys are lower-cased; lines starting with ``#`` are comments.
    """
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return {}
        try:
            decoded = json.loads(text)
        except json.JSONDecodeError:
            decoded = None
        if isinstance(decoded, dict):
            raw = decoded
        else:
            return _parse_alias_lines(text)

    if not isinstance(raw, Mapping):
        return {}
    aliases: Dict[str, str] = {}
    for wrong, right in raw.items():
        wrong_key = str(wrong).strip().lower()
        right_value = str(right).strip() if isinstance(right, (str, int, float)) else ""
        if wrong_key and right_value:
            aliases[wrong_key] = right_value
    return aliases


def _parse_alias_lines(text: str) -> Dict[str, str]:
    aliases: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        parts = _ALIAS_SEPARATOR_RE.split(line, maxsplit=1)
        if len(parts) != 3:
            continue
        wrong, right = parts[0].strip().lower(), parts[2].strip()
        if wrong and right:
            aliases[wrong] = right
    return aliases
