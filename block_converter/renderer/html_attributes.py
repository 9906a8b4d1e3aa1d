"""Helpers for HTML class lists and attribute strings."""
from __future__ import annotations

from html import escape
from typing import Any, Dict, Iterable, List, Mapping, Union

from block_converter.utils.values import clean_class, scalar_text, split_classes

ClassInput = Union[str, Iterable[str], None]


def _class_parts(group: ClassInput) -> List[str]:
    if group is None:
        return []
    if isinstance(group, str):
        return split_classes(group)
    parts: List[str] = []
    for item in group:
        parts.extend(split_classes(item))
    return parts


def append_class(existing: ClassInput, new_class: str) -> str:
    """Append ``new_class`` keeping the original order and dropping duplicates."""
    ordered: Dict[str, None] = dict.fromkeys(_class_parts(existing))
    clean = clean_class(new_class)
    if clean:
        ordered.setdefault(clean, None)
    return " ".join(ordered)


def merge_classes(existing: ClassInput, new: ClassInput) -> str:
    """Union of two class lists, sanitized and sorted."""
    classes = set(_class_parts(existing)) | set(_class_parts(new))
    return " ".join(sorted(classes))


def build_attribute_string(attrs: Mapping[str, Any]) -> str:
    """Render ``key="value"`` pairs sorted by key; blank entries are skipped."""
    parts: List[str] = []
    for key in sorted(attrs, key=lambda name: str(name).strip().lower()):
        value = attrs[key]
        if isinstance(value, (list, tuple)):
            value = " ".join(str(item).strip() for item in value if str(item).strip())
        name = str(key).strip().lower()
        text = (scalar_text(value) or "").strip()
        if not name or not text:
            continue
        parts.append(f'{_escape_attribute(name)}="{_escape_attribute(text)}"')
    return " ".join(parts)


def _escape_attribute(text: str) -> str:
    # Single quotes stay literal, as the block editor writes them.
    return escape(text, quote=False).replace('"', "&quot;")
