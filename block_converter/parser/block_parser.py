"""Parse serialized block markup back into a block tree.

Follows the block editor's own delimiter grammar so that markup produced by
the builder can be checked for load/save stability.
"""
from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from block_converter.renderer.block_serializer import serialize_block
from block_converter.utils.logger import get_logger

LOGGER = get_logger(__name__)

TOKEN_RE = re.compile(
    r"<!--\s+(?P<closer>/)?wp:(?P<namespace>[a-z][a-z0-9_-]*/)?(?P<name>[a-z][a-z0-9_-]*)\s+"
    r"(?P<attrs>\{(?:(?!\}\s+/?-->).)*\}\s+)?(?P<void>/)?-->",
    re.DOTALL,
)


@dataclass(slots=True)
class ParsedBlock:
    """One block as loaded from markup; ``name`` is ``None`` for freeform HTML."""

    name: Optional[str]
    attrs: Optional[Dict[str, Any]] = field(default_factory=dict)
    inner_blocks: List["ParsedBlock"] = field(default_factory=list)
    inner_html: str = ""
    inner_content: List[Optional[str]] = field(default_factory=list)


@dataclass(slots=True)
class _Frame:
    block: ParsedBlock
    token_start: int
    token_length: int
    prev_offset: int
    leading_html_start: Optional[int] = None


def _freeform(html: str) -> ParsedBlock:
    return ParsedBlock(name=None, attrs={}, inner_html=html, inner_content=[html])


def _decode_attrs(raw: Optional[str]) -> Optional[Dict[str, Any]]:
    if raw is None:
        return {}
    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError:
        LOGGER.debug("Undecodable block attributes: %s", raw)
        return None
    return decoded if isinstance(decoded, dict) else None


class BlockParser:
    """Stack based tokenizer over block comment delimiters."""

    def __init__(self, document: str) -> None:
        self._document = document
        self._offset = 0
        self._output: List[ParsedBlock] = []
        self._stack: List[_Frame] = []

    def parse(self) -> List[ParsedBlock]:
        while self._proceed():
            pass
        return self._output

    # ------------------------------------------------------------------
    # Internal state machine
    # ------------------------------------------------------------------
    def _proceed(self) -> bool:
        match = TOKEN_RE.search(self._document, self._offset)

        if match is None:
            if not self._stack:
                self._add_freeform()
            else:
                while self._stack:
                    self._add_block_from_stack()
            return False

        start = match.start()
        length = match.end() - match.start()
        namespace = match.group("namespace") or "core/"
        name = namespace + match.group("name")
        attrs = _decode_attrs(match.group("attrs"))

        if match.group("closer"):
            return self._close_block(start, length)

        block = ParsedBlock(name=name, attrs=attrs)
        if match.group("void"):
            if not self._stack:
                if start > self._offset:
                    self._output.append(_freeform(self._document[self._offset:start]))
                self._output.append(block)
            else:
                self._add_inner_block(block, start, length)
            self._offset = start + length
            return True

        leading = self._offset if start > self._offset else None
        self._stack.append(_Frame(block, start, length, start + length, leading))
        self._offset = start + length
        return True

    def _close_block(self, start: int, length: int) -> bool:
        if not self._stack:
            # A closer without an opener: the rest of the document is freeform.
            self._add_freeform()
            return False

        if len(self._stack) == 1:
            self._add_block_from_stack(start)
            self._offset = start + length
            return True

        top = self._stack.pop()
        html = self._document[top.prev_offset:start]
        top.block.inner_html += html
        top.block.inner_content.append(html)
        top.prev_offset = start + length
        self._add_inner_block(top.block, top.token_start, top.token_length, start + length)
        self._offset = start + length
        return True

    def _add_freeform(self) -> None:
        if self._offset >= len(self._document):
            return
        self._output.append(_freeform(self._document[self._offset:]))

    def _add_inner_block(
        self, block: ParsedBlock, token_start: int, token_length: int, last_offset: Optional[int] = None
    ) -> None:
        parent = self._stack[-1]
        parent.block.inner_blocks.append(block)
        html = self._document[parent.prev_offset:token_start]
        if html:
            parent.block.inner_html += html
            parent.block.inner_content.append(html)
        parent.block.inner_content.append(None)
        parent.prev_offset = last_offset if last_offset else token_start + token_length

    def _add_block_from_stack(self, end_offset: Optional[int] = None) -> None:
        top = self._stack.pop()
        if end_offset is None:
            html = self._document[top.prev_offset:]
        else:
            html = self._document[top.prev_offset:end_offset]
        if html:
            top.block.inner_html += html
            top.block.inner_content.append(html)
        if top.leading_html_start is not None:
            self._output.append(
                _freeform(self._document[top.leading_html_start:top.token_start])
            )
        self._output.append(top.block)


def parse_blocks(document: str) -> List[ParsedBlock]:
    """Parse ``document`` into top-level blocks, freeform HTML included."""
    if not isinstance(document, str) or not document:
        return []
    return BlockParser(document).parse()


def serialize_parsed_block(block: ParsedBlock) -> str:
    content_parts: List[str] = []
    inner = iter(block.inner_blocks)
    for chunk in block.inner_content:
        if chunk is None:
            child = next(inner, None)
            if child is not None:
                content_parts.append(serialize_parsed_block(child))
        else:
            content_parts.append(chunk)
    content = "".join(content_parts)
    if block.name is None:
        return content
    return serialize_block(block.name, block.attrs or {}, content)


def serialize_blocks(blocks: List[ParsedBlock]) -> str:
    """Re-serialize parsed blocks through the canonical serializer."""
    return "".join(serialize_parsed_block(block) for block in blocks)


def is_round_trip_stable(markup: str) -> bool:
    """True when loading and re-saving ``markup`` reproduces it exactly."""
    return serialize_blocks(parse_blocks(markup)) == markup
