"""Flatten a document tree into linear text with an offset map.

The linear text is what selectors are built from and resolved against. Each
character of it maps back to a (text node, raw offset) position through a
sorted table of ranges, so results can be projected onto the native tree.

Whitespace rule (shared with ``normalize_whitespace``):

- every run of whitespace collapses to a single space, including runs that
  span several text nodes;
- block elements act as whitespace;
- leading and trailing whitespace of the whole document is dropped.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import cached_property

from anchoring.document import Document, ElementNode, Node, TextNode
from anchoring.linearizer.config import create_html_registry
from anchoring.linearizer.registry import ElementType, TagRegistry
from anchoring.logging_config import logger

_TOKEN_RE = re.compile(r"\s+|\S+")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    """Apply the linearizer's whitespace rule to a standalone string."""
    return _WHITESPACE_RE.sub(" ", text).strip()


@dataclass(frozen=True)
class MapEntry:
    """Maps linear characters [char_start, char_end) to raw node text.

    Most entries are one-to-one. A collapsed entry is a single linear space
    standing for a whitespace run of any length (or for a block boundary,
    in which case the raw range is empty).
    """

    char_start: int
    char_end: int
    node: TextNode
    node_offset_start: int
    node_offset_end: int

    @property
    def collapsed(self) -> bool:
        return (self.char_end - self.char_start) != (
            self.node_offset_end - self.node_offset_start
        )

    def node_offset(self, position: int) -> int:
        """Translate a linear position inside [char_start, char_end] to a raw offset."""
        if not self.collapsed:
            return self.node_offset_start + (position - self.char_start)
        if position <= self.char_start:
            return self.node_offset_start
        return self.node_offset_end


@dataclass(frozen=True)
class LinearizedText:
    """Normalized text of a document plus its reverse offset map."""

    text: str
    map: tuple[MapEntry, ...] = ()

    def __len__(self) -> int:
        return len(self.text)

    @cached_property
    def starts(self) -> tuple[int, ...]:
        return tuple(entry.char_start for entry in self.map)

    @cached_property
    def ends(self) -> tuple[int, ...]:
        return tuple(entry.char_end for entry in self.map)

    @property
    def coverage(self) -> int:
        """Number of leading characters covered by the map."""
        return self.map[-1].char_end if self.map else 0


class _LinearBuilder:
    """Accumulates linear text and map entries during one walk."""

    def __init__(self) -> None:
        self._parts: list[str] = []
        self._entries: list[MapEntry] = []
        self._length = 0
        # Whitespace seen since the last emitted word: (node, raw start, raw end)
        self._pending: tuple[TextNode, int, int] | None = None

    def boundary(self) -> None:
        if self._pending is None and self._entries:
            last = self._entries[-1]
            self._pending = (last.node, last.node_offset_end, last.node_offset_end)

    def add_text(self, node: TextNode) -> None:
        for match in _TOKEN_RE.finditer(node.text):
            if match.group().isspace():
                if self._pending is None and self._entries:
                    self._pending = (node, match.start(), match.end())
                continue
            self._flush_pending()
            self._emit(match.group(), node, match.start(), match.end())

    def finish(self) -> LinearizedText:
        # Trailing whitespace is dropped
        return LinearizedText(text="".join(self._parts), map=tuple(self._entries))

    def _flush_pending(self) -> None:
        if self._pending is not None:
            node, start, end = self._pending
            self._pending = None
            self._emit(" ", node, start, end)

    def _emit(self, chunk: str, node: TextNode, start: int, end: int) -> None:
        char_start = self._length
        char_end = char_start + len(chunk)
        self._parts.append(chunk)
        self._length = char_end

        if self._entries:
            last = self._entries[-1]
            if (
                last.node is node
                and last.node_offset_end == start
                and not last.collapsed
                and end - start == len(chunk)
            ):
                self._entries[-1] = MapEntry(
                    last.char_start, char_end, node, last.node_offset_start, end
                )
                return

        self._entries.append(MapEntry(char_start, char_end, node, start, end))


class Linearizer:
    """Walks a document tree and produces LinearizedText.

    The registry decides which elements are skipped and which start a new
    block; text inside every other element is kept.
    """

    def __init__(self, registry: TagRegistry | None = None) -> None:
        """Initialize the linearizer.

        Args:
            registry: Tag registry to use (default: HTML transcript registry)
        """
        self._registry = registry or create_html_registry()

    def linearize(self, document: Document | ElementNode) -> LinearizedText:
        """Linearize a document, or a subtree of one.

        Args:
            document: Document snapshot or element to linearize

        Returns:
            LinearizedText; an empty document yields empty text and map
        """
        root = document.root if isinstance(document, Document) else document
        builder = _LinearBuilder()
        self._walk(root, builder)
        result = builder.finish()
        logger.debug(
            f"Linearized {len(result.text)} characters into {len(result.map)} map entries"
        )
        return result

    def _walk(self, node: Node, builder: _LinearBuilder) -> None:
        if isinstance(node, TextNode):
            builder.add_text(node)
            return

        kind = self._registry.element_type(node.tag)
        if kind is ElementType.SKIP:
            return

        if kind is ElementType.BLOCK:
            builder.boundary()
        for child in node.children:
            self._walk(child, builder)
        if kind is ElementType.BLOCK:
            builder.boundary()


# Module-level linearizer (created once, reused)
_linearizer = Linearizer()


def linearize(document: Document | ElementNode) -> LinearizedText:
    """Linearize a document with the default HTML registry."""
    return _linearizer.linearize(document)
