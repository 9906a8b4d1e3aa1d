"""Inline ``style`` shorthand for wrapper blocks, in the editor's property order."""
from __future__ import annotations

from typing import Any, Callable, List, Mapping, Optional, Tuple

from block_converter.utils.values import (
    camel_to_kebab,
    format_background_image,
    normalize_style_value,
    scalar_text,
)

Declaration = Tuple[str, str]
Predicate = Callable[[Mapping[str, Any]], bool]
Renderer = Callable[[Mapping[str, Any]], List[Declaration]]

SIDES = ("top", "right", "bottom", "left")
CORNERS = (
    ("topLeft", "border-top-left-radius"),
    ("topRight", "border-top-right-radius"),
    ("bottomRight", "border-bottom-right-radius"),
    ("bottomLeft", "border-bottom-left-radius"),
)
TYPOGRAPHY_ORDER = (
    ("fontSize", "font-size"),
    ("fontFamily", "font-family"),
    ("fontStyle", "font-style"),
    ("fontWeight", "font-weight"),
    ("lineHeight", "line-height"),
    ("textColumns", "column-count"),
    ("textDecoration", "text-decoration"),
    ("textTransform", "text-transform"),
    ("letterSpacing", "letter-spacing"),
    ("wordSpacing", "word-spacing"),
    ("writingMode", "writing-mode"),
)
BACKGROUND_ORDER = (
    ("backgroundPosition", "position", "background-position"),
    ("backgroundSize", "size", "background-size"),
    ("backgroundRepeat", "repeat", "background-repeat"),
    ("backgroundAttachment", "attachment", "background-attachment"),
)


def _node(style: Mapping[str, Any], *path: str) -> Any:
    node: Any = style
    for key in path:
        if not isinstance(node, Mapping):
            return None
        node = node.get(key)
    return node


def _value(node: Any) -> str:
    text = scalar_text(node)
    if text is None:
        return ""
    return normalize_style_value(text.strip())


def _has_value(*path: str) -> Predicate:
    return lambda style: _value(_node(style, *path)) != ""


def _has_node(*path: str) -> Predicate:
    return lambda style: _node(style, *path) not in (None, "", {}, [])


def _single(prop: str, *path: str) -> Renderer:
    return lambda style: [(prop, _value(_node(style, *path)))]


def _box(kind: str) -> Renderer:
    def render(style: Mapping[str, Any]) -> List[Declaration]:
        node = _node(style, "spacing", kind)
        if not isinstance(node, Mapping):
            return [(kind, _value(node))]
        return [(f"{kind}-{side}", _value(node.get(side))) for side in SIDES]

    return render


def _typography(style: Mapping[str, Any]) -> List[Declaration]:
    typography = _node(style, "typography")
    if not isinstance(typography, Mapping):
        return []
    known = {key for key, _ in TYPOGRAPHY_ORDER}
    declarations = [(prop, _value(typography.get(key))) for key, prop in TYPOGRAPHY_ORDER]
    declarations.extend(
        (camel_to_kebab(str(key)), _value(value))
        for key, value in typography.items()
        if key not in known
    )
    return declarations


def _background(style: Mapping[str, Any]) -> List[Declaration]:
    background = _node(style, "background")
    if not isinstance(background, Mapping):
        return []
    image = background.get("backgroundImage", background.get("image"))
    declarations = [("background-image", format_background_image(image))]
    for long_key, short_key, prop in BACKGROUND_ORDER:
        declarations.append((prop, _value(background.get(long_key, background.get(short_key)))))
    return declarations


def _border(style: Mapping[str, Any]) -> List[Declaration]:
    border = _node(style, "border")
    if not isinstance(border, Mapping):
        return []
    declarations = [("border-color", _value(border.get("color")))]
    radius = border.get("radius")
    if isinstance(radius, Mapping):
        declarations.extend((prop, _value(radius.get(key))) for key, prop in CORNERS)
    else:
        declarations.append(("border-radius", _value(radius)))
    declarations.append(("border-style", _value(border.get("style"))))
    declarations.append(("border-width", _value(border.get("width"))))
    for side in SIDES:
        side_node = border.get(side)
        if not isinstance(side_node, Mapping):
            continue
        declarations.append((f"border-{side}-width", _value(side_node.get("width"))))
        declarations.append((f"border-{side}-color", _value(side_node.get("color"))))
        declarations.append((f"border-{side}-style", _value(side_node.get("style"))))
    return declarations


# Visiting order of the inline style; each entry renders only when its
# predicate holds.
INLINE_STYLE_ORDER: Tuple[Tuple[Predicate, Renderer], ...] = (
    (_has_value("spacing", "blockGap"), _single("gap", "spacing", "blockGap")),
    (_has_node("spacing", "margin"), _box("margin")),
    (_has_node("spacing", "padding"), _box("padding")),
    (_has_node("typography"), _typography),
    (_has_value("color", "background"), _single("background-color", "color", "background")),
    (_has_value("color", "text"), _single("color", "color", "text")),
    (_has_node("background"), _background),
    (_has_value("dimensions", "minHeight"), _single("min-height", "dimensions", "minHeight")),
    (_has_value("boxShadow"), _single("box-shadow", "boxShadow")),
    (_has_node("border"), _border),
)


def inline_declarations(style: Optional[Mapping[str, Any]]) -> List[Declaration]:
    """Return the non-empty ``(property, value)`` pairs of ``style`` in render order."""
    if not isinstance(style, Mapping):
        return []
    declarations: List[Declaration] = []
    for predicate, renderer in INLINE_STYLE_ORDER:
        if not predicate(style):
            continue
        declarations.extend((prop, value) for prop, value in renderer(style) if value)
    return declarations


def build_inline_style(style: Optional[Mapping[str, Any]]) -> str:
    """Render ``style`` as ``prop:value;prop:value`` (no trailing semicolon)."""
    return ";".join(f"{prop}:{value}" for prop, value in inline_declarations(style))
