"""Per-site adapters producing Document snapshots from page markup."""

from anchoring.adapters.base import ChatMessage, ConversationData, DocumentAdapter
from anchoring.adapters.chatgpt import ChatGPTAdapter
from anchoring.adapters.factory import AdapterRegistry, create_default_registry
from anchoring.adapters.html import HtmlAdapter, document_from_html

__all__ = [
    "AdapterRegistry",
    "ChatGPTAdapter",
    "ChatMessage",
    "ConversationData",
    "DocumentAdapter",
    "HtmlAdapter",
    "create_default_registry",
    "document_from_html",
]
