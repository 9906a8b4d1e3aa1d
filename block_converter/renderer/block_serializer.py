"""Canonical serialization of block comment delimiters.

The output matches what the block editor itself writes when it saves a
block, so markup produced here survives a load/save cycle byte for byte.
"""
from __future__ import annotations

import json
from typing import Any, Mapping, Optional

CORE_NAMESPACE = "core/"

# Sequences that would break out of an HTML comment or be mangled by the
# editor's own escaping.
_JSON_ESCAPES = (
    ("--", "\\u002d\\u002d"),
    ("<", "\\u003c"),
    (">", "\\u003e"),
    ("&", "\\u0026"),
    ('\\"', "\\u0022"),
)


def serialize_block_attributes(attrs: Optional[Mapping[str, Any]]) -> str:
    """Encode block attributes as the compact, escaped JSON the editor writes."""
    encoded = json.dumps(dict(attrs or {}), ensure_ascii=False, separators=(",", ":"))
    for needle, replacement in _JSON_ESCAPES:
        encoded = encoded.replace(needle, replacement)
    return encoded


def strip_core_namespace(name: str) -> str:
    if name.startswith(CORE_NAMESPACE):
        return name[len(CORE_NAMESPACE):]
    return name


def serialize_block(name: str, attrs: Optional[Mapping[str, Any]], content: str = "") -> str:
    """Wrap ``content`` in the comment delimiters of block ``name``.

    Empty content produces a self-closing (void) delimiter.
    """
    block_name = strip_core_namespace(name)
    attr_part = serialize_block_attributes(attrs) + " " if attrs else ""
    if not content:
        return f"<!-- wp:{block_name} {attr_part}/-->"
    return f"<!-- wp:{block_name} {attr_part}-->{content}<!-- /wp:{block_name} -->"
