"""Rebuild the figure class list of image blocks."""
from __future__ import annotations

import re
from typing import Any, List, Mapping

from bs4 import BeautifulSoup, Tag

from block_converter.utils.values import clean_class, scalar_text, split_classes

BASE_CLASS = "wp-block-image"
RESIZED_CLASS = "is-resized"

_GENERATED_CLASS_RE = re.compile(r"^(wp-block-image|is-resized|size-[A-Za-z0-9_-]+|align[A-Za-z0-9_-]+)$")


def is_generated_class(name: str) -> bool:
    return bool(_GENERATED_CLASS_RE.match(name))


def figure_classes(attrs: Mapping[str, Any], existing: List[str]) -> List[str]:
    """Canonical class list: base, alignment, size, resize flag, custom, leftovers."""
    classes: List[str] = [BASE_CLASS]

    align = clean_class((scalar_text(attrs.get("align")) or "").strip())
    if align:
        classes.append(f"align{align}")

    size_slug = clean_class((scalar_text(attrs.get("sizeSlug")) or "").strip())
    if size_slug:
        classes.append(f"size-{size_slug}")

    width = (scalar_text(attrs.get("width")) or "").strip()
    if width and width != "100%":
        classes.append(RESIZED_CLASS)

    classes.extend(split_classes(attrs.get("className")))
    classes.extend(name for name in existing if not is_generated_class(name))

    # Keep the first occurrence of each class.
    return list(dict.fromkeys(classes))


def normalize_image_markup(attrs: Mapping[str, Any], html: str) -> str:
    """Replace the class list of the first ``<figure>`` in ``html``.

    Markup without a figure is returned unchanged.
    """
    if not isinstance(html, str) or "<figure" not in html:
        return html
    soup = BeautifulSoup(html, "html.parser")
    figure = soup.find("figure")
    if not isinstance(figure, Tag):
        return html

    raw = figure.get("class") or []
    existing = raw.split() if isinstance(raw, str) else [str(name) for name in raw]
    figure["class"] = figure_classes(attrs if isinstance(attrs, Mapping) else {}, existing)
    return str(soup)
