"""Tag registry mapping element names to linearization behavior."""

from __future__ import annotations

from enum import Enum, auto


class ElementType(Enum):
    """Classification of elements for linearization."""

    BLOCK = auto()  # Starts a new text block (p, div, li, br)
    INLINE = auto()  # Text-level element, text flows through (span, a, em)
    SKIP = auto()  # Subtree contributes no text (script, style)


def get_tag_name(tag: str) -> str:
    """Get tag name without namespace prefix, lowercased.

    Args:
        tag: Tag name, possibly in Clark notation ("{ns}div")

    Returns:
        Bare tag name (e.g., "div")
    """
    if "}" in tag:
        tag = tag.split("}")[-1]
    return tag.lower()


class TagRegistry:
    """Registry mapping tag names to element types.

    Tags that were never registered are treated as INLINE, so unfamiliar
    markup never drops text.
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._types: dict[str, ElementType] = {}

    def register(self, tag_name: str, element_type: ElementType) -> None:
        """Register the element type for a tag name.

        Args:
            tag_name: The tag name (namespace is ignored)
            element_type: How the linearizer treats the tag
        """
        self._types[get_tag_name(tag_name)] = element_type

    def block(self, *tag_names: str) -> None:
        """Mark tags as block boundaries."""
        for tag_name in tag_names:
            self.register(tag_name, ElementType.BLOCK)

    def skip(self, *tag_names: str) -> None:
        """Mark tags as skip (subtree contributes no text)."""
        for tag_name in tag_names:
            self.register(tag_name, ElementType.SKIP)

    def element_type(self, tag_name: str) -> ElementType:
        """Return the element type for a tag, INLINE when unregistered."""
        return self._types.get(get_tag_name(tag_name), ElementType.INLINE)

    def should_skip(self, tag_name: str) -> bool:
        return self.element_type(tag_name) is ElementType.SKIP

    def is_block(self, tag_name: str) -> bool:
        return self.element_type(tag_name) is ElementType.BLOCK

    def registered_tags(self) -> set[str]:
        """Return set of all registered tag names."""
        return set(self._types.keys())

    def skipped_tags(self) -> set[str]:
        """Return set of all tag names marked as skip."""
        return {tag for tag, kind in self._types.items() if kind is ElementType.SKIP}
