"""Per-element pipeline: normalize, split, externalize and build one block."""
from __future__ import annotations

import re
from copy import deepcopy
from typing import Any, Mapping, Optional, Union

from block_converter.model.document_model import ElementInput
from block_converter.model.style_model import AttributeTree
from block_converter.model.support_matrix import policy_for
from block_converter.parser.block_parser import is_round_trip_stable
from block_converter.parser.settings_parser import parse_element_style
from block_converter.parser.style_normalizer import normalize_attributes
from block_converter.parser.supports_splitter import (
    split_attributes,
    to_css_declarations,
    unmapped_style_paths,
)
from block_converter.renderer.block_builder import BuildPath, build
from block_converter.renderer.html_attributes import merge_classes
from block_converter.renderer.inline_style import inline_declarations
from block_converter.renderer.style_collector import ExternalStyleCollector
from block_converter.utils.config import ConverterConfig
from block_converter.utils.logger import get_logger
from block_converter.utils.presets import apply_theme_presets

LOGGER = get_logger(__name__)

_UNSAFE_ELEMENT_RE = re.compile(r"<(script|style)[^>]*>.*?</\1>", re.IGNORECASE | re.DOTALL)
TABLET_SUFFIX = "_tablet"
MOBILE_SUFFIX = "_mobile"


def merge_trees(base: Mapping[str, Any], override: Mapping[str, Any]) -> AttributeTree:
    """Deep merge of two attribute trees; ``override`` wins on conflicting leaves."""
    merged: AttributeTree = deepcopy(dict(base))
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_trees(current, value)
        else:
            merged[key] = deepcopy(value)
    return merged


class BlockOutputBuilder:
    """Turns element attributes into block markup, feeding one document's collector."""

    def __init__(self, collector: ExternalStyleCollector, config: Optional[ConverterConfig] = None) -> None:
        self._collector = collector
        self._config = config or ConverterConfig()

    @property
    def collector(self) -> ExternalStyleCollector:
        return self._collector

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def prepare_attributes(self, unit: str, attrs: Any) -> AttributeTree:
        """Return the native attributes of ``unit``; everything else is externalized or recorded."""
        normalized = normalize_attributes(unit, attrs)
        self._register_fonts(normalized)

        policy = policy_for(unit)
        normalized = apply_theme_presets(normalized, self._config.theme, policy.attrs)
        normalized = self._collector.externalize_attrs(unit, normalized)

        split = split_attributes(unit, normalized)
        native = split.native
        if split.external:
            class_name = self._collector.externalize_declarations(unit, to_css_declarations(split.external))
            if class_name:
                native["className"] = merge_classes(native.get("className", ""), class_name)
        if split.dropped:
            self._collector.record_dropped(unit, "attrs", split.dropped)
        unmapped = unmapped_style_paths(split.external)
        if unmapped:
            self._collector.record_dropped(unit, "unmapped-style", unmapped)
        return native

    def sanitize_inner_html(self, unit: str, html: Any) -> str:
        """Strip ``<script>`` and ``<style>`` elements from inner markup."""
        if not isinstance(html, str):
            return ""
        cleaned = _UNSAFE_ELEMENT_RE.sub("", html)
        if cleaned != html:
            LOGGER.debug("Removed script/style markup from %s", unit)
            self._collector.record_inner_sanitization(unit, cleaned)
        return cleaned

    def render(
        self,
        unit: str,
        attrs: Any,
        content: str = "",
        path: Optional[Union[BuildPath, str]] = None,
    ) -> str:
        """Prepare attributes and build the block, optionally checking load/save stability."""
        native = self.prepare_attributes(unit, attrs)
        markup = build(unit, native, content, path)
        if self._config.verify_round_trip and not is_round_trip_stable(markup):
            LOGGER.warning("Block %s does not survive a load/save cycle unchanged", unit)
            self._collector.record_conversion(unit, "unstable-serialization", {"markup": markup})
        return markup

    def render_element(self, element: ElementInput) -> str:
        """Render one input element; explicit attributes win over ones read from settings."""
        attrs = element.attrs
        if element.settings:
            attrs = merge_trees(parse_element_style(element.settings), element.attrs)
            responsive = self.externalize_responsive(element.unit, element.settings)
            if responsive:
                attrs["className"] = merge_classes(attrs.get("className", ""), responsive)
        content = self.sanitize_inner_html(element.unit, element.content)
        return self.render(element.unit, attrs, content, element.path)

    def externalize_responsive(self, unit: str, settings: Mapping[str, Any]) -> str:
        """Turn ``*_tablet`` and ``*_mobile`` settings into media scoped classes.

        Returns the generated class names separated by spaces, or ``""``.
        """
        classes = []
        for suffix, query in (
            (TABLET_SUFFIX, self._config.tablet_query),
            (MOBILE_SUFFIX, self._config.mobile_query),
        ):
            device = {key[: -len(suffix)]: value for key, value in settings.items() if key.endswith(suffix)}
            declarations = dict(inline_declarations(parse_element_style(device).get("style")))
            if not declarations:
                continue
            class_name = self._collector.class_name(unit, {"@media": query, **declarations})
            if not self._collector.register_media_rule(query, f".{class_name}", declarations, "responsive"):
                continue
            self._collector.record_conversion(unit, "responsive-media-rule", {"query": query, "class": class_name})
            classes.append(class_name)
        return " ".join(classes)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _register_fonts(self, attrs: Mapping[str, Any]) -> None:
        style = attrs.get("style")
        typography = style.get("typography") if isinstance(style, Mapping) else None
        if not isinstance(typography, Mapping) or "fontFamily" not in typography:
            return
        self._collector.register_font_usage(
            typography.get("fontFamily"),
            typography.get("fontWeight", ""),
            typography.get("fontStyle", ""),
        )
