"""Collect externalized declarations into a deduplicated, tiered stylesheet."""
from __future__ import annotations

import hashlib
import json
import re
from copy import deepcopy
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from block_converter.model.style_model import (
    AttributeTree,
    Declarations,
    Inventory,
    MediaRule,
    Rule,
    Tier,
)
from block_converter.parser.style_normalizer import prune_empty
from block_converter.renderer.fonts import FontUsage
from block_converter.renderer.html_attributes import append_class
from block_converter.utils.config import ConverterConfig
from block_converter.utils.logger import get_logger
from block_converter.utils.values import (
    format_background_image,
    scalar_text,
    zero_dimension_or_none,
)

LOGGER = get_logger(__name__)

INVENTORY_TAG = "BC_EXTRA_ATTRS_MAP_V1"

PROPERTY_NAME_RE = re.compile(r"^[-a-zA-Z0-9]+$")
# Characters that would end the declaration or the rule it sits in.
UNSAFE_VALUE_CHARS = frozenset("{};<")

_BACKGROUND_LEAVES = (
    ("position", "background-position"),
    ("size", "background-size"),
    ("repeat", "background-repeat"),
)
_SPACING_LEAVES = (
    ("letterSpacing", "letter-spacing"),
    ("wordSpacing", "word-spacing"),
)


def canonical_json(value: Any) -> str:
    """Key-order independent JSON used to fingerprint declaration sets."""
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


class ExternalStyleCollector:
    """Per-document accumulator of external CSS rules, font usage and the inventory.

    One instance belongs to exactly one output document. Reusing it for a
    second document without calling :meth:`reset` leaks the first document's
    rules into the second stylesheet.
    """

    def __init__(self, config: Optional[ConverterConfig] = None) -> None:
        self._config = config or ConverterConfig()
        self._rules: Dict[Tuple[Tier, str], Rule] = {}
        self._media_rules: Dict[Tuple[Tier, str, str], MediaRule] = {}
        self._fonts = FontUsage(self._config.font_aliases)
        self._inventory = Inventory()

    # ------------------------------------------------------------------
    # Class generation
    # ------------------------------------------------------------------
    def class_id(self, unit: str, declarations: Mapping[str, Any]) -> str:
        """Deterministic id of a declaration set for one unit type."""
        payload = f"{unit}|{canonical_json(dict(declarations))}"
        digest = hashlib.md5(payload.encode("utf-8")).hexdigest()
        return digest[: self._config.class_hash_length]

    def class_name(self, unit: str, declarations: Mapping[str, Any]) -> str:
        return f"{self._config.class_prefix}{self.class_id(unit, declarations)}"

    def externalize_declarations(
        self, unit: str, declarations: Mapping[str, Any], reason: str = "unsupported-style"
    ) -> str:
        """Register ``declarations`` under a generated class and return the class name.

        Returns ``""`` when nothing survives cleaning.
        """
        cleaned = self._clean_declarations(declarations)
        if not cleaned:
            return ""
        class_name = self.class_name(unit, cleaned)
        self.register_rule(f".{class_name}", cleaned, reason)
        self._inventory.externalized.append(
            {"block": unit, "rules": dict(cleaned), "reason": reason, "class": class_name}
        )
        return class_name

    def externalize_attrs(self, unit: str, attrs: AttributeTree) -> AttributeTree:
        """Move background images, shadows and non-zero spacing out of ``attrs``.

        The extracted leaves become one generated class appended to
        ``className``; the remaining tree is returned pruned.
        """
        style = attrs.get("style") if isinstance(attrs, dict) else None
        if not isinstance(style, dict):
            return attrs

        attrs = deepcopy(attrs)
        style = attrs["style"]
        extracted: Declarations = {}

        background = style.get("background")
        if isinstance(background, dict):
            image = format_background_image(background.get("image", background.get("backgroundImage")))
            if image:
                extracted["background-image"] = image
                for key, prop in _BACKGROUND_LEAVES:
                    text = (scalar_text(background.get(key)) or "").strip()
                    if text:
                        extracted[prop] = text
                for key in ("image", "backgroundImage", "position", "size", "repeat"):
                    background.pop(key, None)

        shadow = (scalar_text(style.get("boxShadow")) or "").strip()
        if shadow:
            extracted["box-shadow"] = shadow
            del style["boxShadow"]

        typography = style.get("typography")
        if isinstance(typography, dict):
            for key, prop in _SPACING_LEAVES:
                text = (scalar_text(typography.get(key)) or "").strip()
                if text and zero_dimension_or_none(text) is None:
                    extracted[prop] = text
                    del typography[key]

        if not extracted:
            return attrs

        attrs["style"] = prune_empty(style)
        if not attrs["style"]:
            del attrs["style"]
        # Rejected values leave the tree without a class.
        extracted = self._clean_declarations(extracted)
        if not extracted:
            return attrs
        class_name = self.class_name(unit, extracted)
        attrs["className"] = append_class(attrs.get("className", ""), class_name)
        self.register_rule(f".{class_name}", extracted, "style-tree")
        self._inventory.externalized.append(
            {"block": unit, "rules": dict(extracted), "reason": "style-tree", "class": class_name}
        )
        return attrs

    # ------------------------------------------------------------------
    # Rule registration
    # ------------------------------------------------------------------
    def register_rule(self, selector: str, declarations: Mapping[str, Any], reason: str = "") -> None:
        """Add declarations to ``selector`` in the tier implied by ``reason``.

        Writes to the same selector and tier merge; the later value wins per
        property.
        """
        selector = (scalar_text(selector) or "").strip()
        cleaned = self._clean_declarations(declarations)
        if not selector or not cleaned:
            return
        tier = Tier.from_reason(reason)
        rule = self._rules.get((tier, selector))
        if rule is None:
            rule = Rule(selector=selector, tier=tier)
            self._rules[(tier, selector)] = rule
        rule.merge(cleaned)
        LOGGER.debug("Registered %s rule %s (%s)", rule.tier.value, selector, reason or "no reason")

    def register_media_rule(
        self, query: str, selector: str, declarations: Mapping[str, Any], reason: str = ""
    ) -> bool:
        """Same as :meth:`register_rule`, scoped to ``@media query``.

        Returns whether a rule was written.
        """
        query = (scalar_text(query) or "").strip()
        selector = (scalar_text(selector) or "").strip()
        cleaned = self._clean_declarations(declarations)
        if not query or UNSAFE_VALUE_CHARS.intersection(query) or not selector or not cleaned:
            return False
        tier = Tier.from_reason(reason)
        key = (tier, query, selector)
        rule = self._media_rules.get(key)
        if rule is None:
            rule = MediaRule(selector=selector, tier=tier, query=query)
            self._media_rules[key] = rule
        rule.merge(cleaned)
        return True

    def _clean_declarations(self, declarations: Mapping[str, Any]) -> Declarations:
        # Values are trimmed and filtered only; no priority marker is appended.
        cleaned: Declarations = {}
        if not isinstance(declarations, Mapping):
            return cleaned
        for prop, value in declarations.items():
            prop_text = (scalar_text(prop) or "").strip()
            value_text = (scalar_text(value) or "").strip()
            if not prop_text or not value_text:
                continue
            if not PROPERTY_NAME_RE.match(prop_text) or UNSAFE_VALUE_CHARS.intersection(value_text):
                LOGGER.warning("Rejected unsafe CSS declaration %r: %r", prop_text, value_text)
                continue
            cleaned[prop_text] = value_text
        return cleaned

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def render_stylesheet(self) -> str:
        """Render base rules, override rules, base media rules, override media rules."""
        parts: List[str] = []
        for tier in (Tier.BASE, Tier.OVERRIDE):
            parts.extend(
                _render_rule(rule) for rule in self._rules.values() if rule.tier is tier
            )
        for tier in (Tier.BASE, Tier.OVERRIDE):
            parts.extend(self._render_media_tier(tier))
        return "".join(part for part in parts if part)

    def _render_media_tier(self, tier: Tier) -> Iterable[str]:
        grouped: Dict[str, List[MediaRule]] = {}
        for rule in self._media_rules.values():
            if rule.tier is tier:
                grouped.setdefault(rule.query, []).append(rule)
        for query, rules in grouped.items():
            body = "".join(_render_rule(rule, indent="\t") for rule in rules)
            if body:
                yield f"@media {query} {{\n{body}}}\n"

    # ------------------------------------------------------------------
    # Fonts
    # ------------------------------------------------------------------
    def register_font_usage(self, family: object, weight: object = "", style: object = "") -> None:
        self._fonts.register(family, weight, style)

    def get_font_usage(self) -> Dict[str, Dict[str, List[str]]]:
        return self._fonts.as_dict()

    # ------------------------------------------------------------------
    # Inventory
    # ------------------------------------------------------------------
    def record_dropped(self, unit: str, kind: str, payload: Any) -> None:
        self._inventory.dropped.append(
            {"block": unit, "type": kind, "payload": deepcopy(payload), "tag": INVENTORY_TAG}
        )

    def record_conversion(self, unit: str, decision: str, context: Optional[Mapping[str, Any]] = None) -> None:
        self._inventory.conversions.append(
            {"block": unit, "decision": decision, "context": dict(context or {}), "tag": INVENTORY_TAG}
        )

    def record_inner_sanitization(self, unit: str, result: str) -> None:
        self._inventory.dropped.append(
            {"block": unit, "type": "inner-html", "payload": result, "tag": INVENTORY_TAG}
        )

    def get_inventory(self) -> Dict[str, List[Dict[str, Any]]]:
        return self._inventory.as_dict()

    def reset(self) -> None:
        """Forget all rules, fonts and inventory entries."""
        self._rules.clear()
        self._media_rules.clear()
        self._fonts.clear()
        self._inventory.clear()


def _render_rule(rule: Rule, indent: str = "") -> str:
    lines = [
        f"{indent}\t{prop}: {value};\n"
        for prop, value in rule.declarations.items()
        if prop.strip() and value.strip()
    ]
    if not lines:
        return ""
    return f"{indent}{rule.selector} {{\n" + "".join(lines) + f"{indent}}}\n"
