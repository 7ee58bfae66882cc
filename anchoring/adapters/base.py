"""Protocols and data structures shared by per-site adapters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from anchoring.document import Document


@dataclass
class ChatMessage:
    """One message of a scraped conversation."""

    role: str
    text: str
    message_index: int
    node_id: str


@dataclass
class ConversationData:
    """A scraped conversation and the document it was read from."""

    conversation_id: str | None
    conversation_url: str | None
    document: Document
    messages: list[ChatMessage] = field(default_factory=list)


class DocumentAdapter(Protocol):
    """Protocol for per-site adapters.

    Adapters turn page markup into a Document whose node structure is stable
    across re-renders of the same content, which is what the linearizer and
    the stored position hints rely on.
    """

    @property
    def platform(self) -> str:
        """Platform identifier (e.g., "chatgpt")."""
        ...

    def can_handle(self, url: str | None) -> bool:
        """Check if this adapter understands pages at the given URL.

        Args:
            url: Page address, or None when unknown

        Returns:
            True if this adapter should be used for the page
        """
        ...

    def to_document(self, markup: str, url: str | None = None) -> Document:
        """Build a Document snapshot from page markup.

        Args:
            markup: HTML of the page or of a fragment
            url: Page address, if known

        Returns:
            Document ready for linearization
        """
        ...
