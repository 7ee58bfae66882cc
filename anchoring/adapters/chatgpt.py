"""ChatGPT transcript adapter.

Message containers are located with XPath expressions tried in order, so a
UI change that breaks the primary expression falls back to older markup.
Each message becomes one <article> block whose node id is
``message-<index>``, which keeps message-scoped selectors stable when other
parts of the page re-render.
"""

from __future__ import annotations

import re
from urllib.parse import urlparse

from lxml import etree

from anchoring.adapters.base import ChatMessage, ConversationData
from anchoring.adapters.html import element_to_node, parse_html
from anchoring.document import Document, ElementNode
from anchoring.errors import ScrapeError
from anchoring.linearizer import linearize
from anchoring.logging_config import logger

CHATGPT_HOSTS = {"chatgpt.com", "chat.openai.com"}

# chatgpt.com/c/{conversationId}
CONVERSATION_ID_PATTERN = re.compile(r"/c/([a-f0-9-]+)")

ROLE_ATTRIBUTE = "data-message-author-role"


def _has_class(name: str) -> str:
    return f'contains(concat(" ", normalize-space(@class), " "), " {name} ")'


# Message containers, most current markup first
MESSAGE_XPATHS = (
    f"//*[@{ROLE_ATTRIBUTE}]//*[{_has_class('prose')}]",
    f"//*[{_has_class('message')}]//*[{_has_class('markdown')}]",
    '//*[@data-testid="conversation-turn"]',
)


def message_node_id(index: int) -> str:
    """Node id of the block holding message ``index``."""
    return f"message-{index}"


class ChatGPTAdapter:
    """Adapter for chatgpt.com conversation pages."""

    @property
    def platform(self) -> str:
        return "chatgpt"

    def can_handle(self, url: str | None) -> bool:
        if not url:
            return False
        host = urlparse(url).hostname or ""
        return host in CHATGPT_HOSTS or host.endswith(".chatgpt.com")

    def get_conversation_id(self, url: str | None) -> str | None:
        """Extract the conversation id from a conversation URL."""
        if not url:
            return None
        match = CONVERSATION_ID_PATTERN.search(url)
        if match:
            return match.group(1)
        logger.warning(f"Could not extract conversation ID from URL: {url}")
        return None

    def find_messages(self, root: etree._Element) -> list[etree._Element]:
        """Return message containers using the first XPath that matches."""
        for xpath in MESSAGE_XPATHS:
            elements = root.xpath(xpath)
            if elements:
                logger.debug(f"Found {len(elements)} messages via {xpath}")
                return list(elements)

        logger.warning("No message containers found with any known XPath")
        return []

    def to_document(self, markup: str, url: str | None = None) -> Document:
        """
        Build a transcript Document with one block per message.

        Raises:
            ScrapeError: If no messages are found on the page
        """
        root = parse_html(markup)
        elements = self.find_messages(root) if root is not None else []
        if not elements:
            raise ScrapeError(
                "Could not find any messages on the page. ChatGPT UI may have changed."
            )

        body = ElementNode(tag="body", node_id="conversation")
        for index, elem in enumerate(elements):
            role = _message_role(elem)
            if not role:
                logger.warning(f"Skipping message {index} without an author role")
                continue
            body.append(
                ElementNode(
                    tag="article",
                    children=[element_to_node(elem)],
                    attrs={"role": role, "data-message-index": str(index)},
                    node_id=message_node_id(index),
                )
            )

        if not body.children:
            raise ScrapeError("Found message containers but none had an author role")
        return Document(root=body, url=url)

    def scrape(self, markup: str, url: str | None = None) -> ConversationData:
        """Scrape the conversation: document plus per-message normalized text."""
        document = self.to_document(markup, url)
        messages = []
        for block in document.root.children:
            if not isinstance(block, ElementNode):
                continue
            messages.append(
                ChatMessage(
                    role=block.attrs["role"],
                    text=linearize(block).text,
                    message_index=int(block.attrs["data-message-index"]),
                    node_id=block.node_id or "",
                )
            )

        logger.info(f"Scraped {len(messages)} messages")
        return ConversationData(
            conversation_id=self.get_conversation_id(url),
            conversation_url=url,
            document=document,
            messages=messages,
        )


def _message_role(elem: etree._Element) -> str:
    roles = elem.xpath(f"ancestor-or-self::*[@{ROLE_ATTRIBUTE}][1]/@{ROLE_ATTRIBUTE}")
    return str(roles[0]) if roles else ""
