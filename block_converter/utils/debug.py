"""Helpers to persist conversion diagnostics for debugging."""
from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from block_converter.model.document_model import ConvertedDocument


class DebugDumper:
    """Writes the inventory and font usage of a conversion onto disk for inspection."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def dump(self, document: ConvertedDocument) -> Path:
        """Persist everything but the markup and stylesheet as JSON."""
        self.directory.mkdir(parents=True, exist_ok=True)
        payload = {
            "inventory": self._serialize(document.inventory),
            "fonts": self._serialize(document.fonts),
        }
        target = self.directory / "inventory.json"
        target.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        return target

    def _serialize(self, value: Any) -> Any:
        if is_dataclass(value) and not isinstance(value, type):
            return {k: self._serialize(v) for k, v in asdict(value).items()}
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, dict):
            return {str(k): self._serialize(v) for k, v in value.items()}
        if isinstance(value, (list, tuple, set, frozenset)):
            return [self._serialize(v) for v in value]
        return value
