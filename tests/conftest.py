"""
Pytest configuration and fixtures for anchoring tests
"""

import pytest

from anchoring.document import Document
from anchoring.linearizer import linearize
from anchoring.logging_config import GlobalIndent

QUICK_FOX = "The quick brown fox jumps"


@pytest.fixture(autouse=True)
def reset_indent():
    """Start every test with a clean log tree"""
    GlobalIndent.reset()
    yield
    GlobalIndent.reset()


@pytest.fixture
def quick_fox_text():
    """The reference sentence from the anchoring scenarios"""
    return QUICK_FOX


@pytest.fixture
def quick_fox():
    """Linearized single-node document holding the reference sentence"""
    return linearize(Document.from_text(QUICK_FOX))


@pytest.fixture
def transcript_html():
    """Minimal ChatGPT-style transcript markup"""
    return """
        <html>
          <head><title>ChatGPT</title><style>.prose { color: red; }</style></head>
          <body>
            <div data-message-author-role="user">
              <div class="prose">
                <p>Hello, ChatGPT!</p>
              </div>
            </div>
            <div data-message-author-role="assistant">
              <div class="prose">
                <p>Hello! How can I help you today?</p>
              </div>
            </div>
            <div data-message-author-role="user">
              <div class="prose">
                <p>What is TypeScript?</p>
              </div>
            </div>
          </body>
        </html>
    """


@pytest.fixture
def conversation_url():
    """URL of a ChatGPT conversation"""
    return "https://chatgpt.com/c/abc-123-def-456"
