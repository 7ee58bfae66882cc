"""Generic HTML adapter built on lxml.

Converts an lxml tree into the Document model: element text and tails become
TextNodes in document order, comments and processing instructions are
dropped (their tails are kept). Node ids are lxml XPaths, which stay stable
as long as the page structure does.
"""

from __future__ import annotations

from lxml import etree, html

from anchoring.document import Document, ElementNode, TextNode
from anchoring.linearizer.registry import get_tag_name


def parse_html(markup: str) -> etree._Element | None:
    """Parse a full page or a fragment, returning None for empty markup."""
    if not markup.strip():
        return None
    return html.fromstring(markup)


def element_to_node(elem: etree._Element) -> ElementNode:
    """Convert an lxml element and its subtree into an ElementNode.

    Args:
        elem: The element to convert

    Returns:
        ElementNode mirroring the element, with XPath node ids
    """
    tree = elem.getroottree()
    path = tree.getpath(elem)
    node = ElementNode(
        tag=get_tag_name(elem.tag),
        attrs={str(key): str(value) for key, value in elem.attrib.items()},
        node_id=path,
    )

    text_index = 0

    def add_text(value: str) -> None:
        nonlocal text_index
        text_index += 1
        node.append(TextNode(value, node_id=f"{path}/text()[{text_index}]"))

    if elem.text:
        add_text(elem.text)

    for child in elem:
        # Comments and processing instructions have a non-string tag
        if isinstance(child.tag, str):
            node.append(element_to_node(child))
        if child.tail:
            add_text(child.tail)

    return node


def document_from_html(markup: str, url: str | None = None) -> Document:
    """Build a Document from HTML markup.

    Empty markup yields an empty document rather than a parse error.
    """
    root = parse_html(markup)
    if root is None:
        return Document(root=ElementNode(tag="body", node_id="body"), url=url)
    return Document(root=element_to_node(root), url=url)


class HtmlAdapter:
    """Fallback adapter for any page: the whole tree becomes the document."""

    @property
    def platform(self) -> str:
        return "html"

    def can_handle(self, url: str | None) -> bool:
        return True

    def to_document(self, markup: str, url: str | None = None) -> Document:
        return document_from_html(markup, url)
