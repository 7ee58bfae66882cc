"""Tests for the ChatGPT transcript adapter."""

import pytest

from anchoring.adapters.chatgpt import ChatGPTAdapter, message_node_id
from anchoring.errors import ScrapeError
from anchoring.linearizer import linearize
from anchoring.resolver import MatchMethod, resolve
from anchoring.selectors import build_selector


@pytest.fixture
def adapter():
    return ChatGPTAdapter()


class TestUrls:
    """Tests for URL handling."""

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://chatgpt.com/c/abc-123", True),
            ("https://chat.openai.com/c/abc-123", True),
            ("https://www.chatgpt.com/", True),
            ("https://example.com/c/abc-123", False),
            (None, False),
        ],
    )
    def test_can_handle(self, adapter, url, expected) -> None:
        assert adapter.can_handle(url) is expected

    def test_conversation_id(self, adapter, conversation_url) -> None:
        assert adapter.get_conversation_id(conversation_url) == "abc-123-def-456"

    def test_conversation_id_missing(self, adapter) -> None:
        assert adapter.get_conversation_id("https://chatgpt.com/") is None
        assert adapter.get_conversation_id(None) is None


class TestToDocument:
    """Tests for building transcript documents."""

    def test_one_block_per_message(self, adapter, transcript_html) -> None:
        document = adapter.to_document(transcript_html)

        assert [block.node_id for block in document.root.children] == [
            "message-0",
            "message-1",
            "message-2",
        ]
        assert [block.attrs["role"] for block in document.root.children] == [
            "user",
            "assistant",
            "user",
        ]

    def test_linear_text(self, adapter, transcript_html) -> None:
        document = adapter.to_document(transcript_html)

        assert linearize(document).text == (
            "Hello, ChatGPT! Hello! How can I help you today? What is TypeScript?"
        )

    def test_message_scope(self, adapter, transcript_html) -> None:
        document = adapter.to_document(transcript_html)

        scoped = document.scoped(message_node_id(1))
        assert linearize(scoped).text == "Hello! How can I help you today?"

    def test_fallback_xpath(self, adapter) -> None:
        markup = (
            '<div data-message-author-role="user">'
            '<div data-testid="conversation-turn"><p>Hi</p></div>'
            "</div>"
        )

        document = adapter.to_document(markup)

        assert document.root.children[0].attrs["role"] == "user"
        assert linearize(document).text == "Hi"

    def test_messages_without_role_are_skipped(self, adapter) -> None:
        markup = '<div data-testid="conversation-turn"><p>Hi</p></div>'

        with pytest.raises(ScrapeError, match="author role"):
            adapter.to_document(markup)

    def test_no_messages(self, adapter) -> None:
        with pytest.raises(ScrapeError, match="Could not find any messages"):
            adapter.to_document("<html><body><p>Nothing here</p></body></html>")

    def test_empty_markup(self, adapter) -> None:
        with pytest.raises(ScrapeError):
            adapter.to_document("")


class TestScrape:
    """Tests for scraping conversation data."""

    def test_scrape(self, adapter, transcript_html, conversation_url) -> None:
        conversation = adapter.scrape(transcript_html, conversation_url)

        assert conversation.conversation_id == "abc-123-def-456"
        assert conversation.conversation_url == conversation_url
        assert [message.text for message in conversation.messages] == [
            "Hello, ChatGPT!",
            "Hello! How can I help you today?",
            "What is TypeScript?",
        ]
        assert [message.message_index for message in conversation.messages] == [0, 1, 2]
        assert conversation.messages[1].role == "assistant"
        assert conversation.messages[1].node_id == "message-1"


class TestReRender:
    """Selectors survive a re-render of the transcript."""

    def test_message_scoped_selector(self, adapter, transcript_html) -> None:
        before = linearize(adapter.to_document(transcript_html).scoped("message-1"))
        start = before.text.index("help")
        selector = build_selector(before, start, start + len("help you"))

        rerendered = """
            <div data-message-author-role="user">
              <div class="prose"><p>Hello, ChatGPT!</p></div>
            </div>
            <div data-message-author-role="assistant">
              <div class="prose"><p>Hello!
                <span>How can I</span>   help <em>you</em> today?</p></div>
            </div>
            <div data-message-author-role="user">
              <div class="prose"><p>What is TypeScript?</p></div>
            </div>
            <div data-message-author-role="assistant">
              <div class="prose"><p>TypeScript is a typed superset of JavaScript.</p></div>
            </div>
        """
        after = linearize(adapter.to_document(rerendered).scoped("message-1"))

        result = resolve(after, selector)

        assert result.range.method is MatchMethod.EXACT_POSITION
        assert result.range.matched_text == "help you"
