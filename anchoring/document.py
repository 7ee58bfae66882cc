"""Document tree consumed by the linearizer.

Adapters build documents from page markup; callers can also build them by
hand. Nodes compare by identity: the materializer hands back the very node
objects that were linearized, so one snapshot must be used for a whole
linearize/resolve/materialize pass.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Union

from anchoring.errors import UnknownNodeError


@dataclass(eq=False)
class TextNode:
    """A run of raw text."""

    text: str
    node_id: str | None = None


@dataclass(eq=False)
class ElementNode:
    """A structural node with ordered children."""

    tag: str
    children: list[Node] = field(default_factory=list)
    attrs: dict[str, str] = field(default_factory=dict)
    node_id: str | None = None

    def append(self, child: Node) -> Node:
        self.children.append(child)
        return child

    def iter(self) -> Iterator[Node]:
        """Iterate over this node and all descendants in document order."""
        yield self
        for child in self.children:
            if isinstance(child, ElementNode):
                yield from child.iter()
            else:
                yield child

    def iter_text(self) -> Iterator[TextNode]:
        for node in self.iter():
            if isinstance(node, TextNode):
                yield node

    def text_content(self) -> str:
        """Raw concatenated text, without any normalization."""
        return "".join(node.text for node in self.iter_text())


Node = Union[TextNode, ElementNode]


@dataclass
class Document:
    """
    Snapshot of a rendered page.

    Attributes:
        root: Root element of the tree
        url: Address the snapshot was taken from, if known
    """

    root: ElementNode
    url: str | None = None

    @classmethod
    def from_text(cls, text: str, node_id: str = "text") -> Document:
        """Create a document holding a single text node."""
        root = ElementNode(tag="body", node_id="body")
        if text:
            root.append(TextNode(text, node_id=node_id))
        return cls(root=root)

    @classmethod
    def from_blocks(cls, blocks: list[str]) -> Document:
        """Create a document with one paragraph per string."""
        root = ElementNode(tag="body", node_id="body")
        for index, block in enumerate(blocks):
            paragraph = ElementNode(tag="p", node_id=f"block-{index}")
            paragraph.append(TextNode(block, node_id=f"block-{index}/text"))
            root.append(paragraph)
        return cls(root=root)

    def find(self, node_id: str) -> Node | None:
        """Return the first node with the given id, or None."""
        for node in self.root.iter():
            if node.node_id == node_id:
                return node
        return None

    def scoped(self, node_id: str) -> Document:
        """Return a document rooted at the element with the given id.

        Raises:
            UnknownNodeError: If no node has that id
        """
        node = self.find(node_id)
        if node is None:
            raise UnknownNodeError(node_id)
        if isinstance(node, TextNode):
            wrapper = ElementNode(tag="body", children=[node], node_id=node_id)
            return Document(root=wrapper, url=self.url)
        return Document(root=node, url=self.url)
