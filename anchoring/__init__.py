"""
anchoring - Durable text anchors for annotated chat transcripts.

This library provides:
- Linearization of a document tree into normalized text plus an offset map
- Portable selectors (quote, context and position hint)
- Tiered, bounded-cost resolution of selectors against changed documents
- Materialization of resolved ranges back onto document nodes

Import patterns:

    # Primary API (recommended)
    from anchoring import build_selector, linearize, materialize, resolve

    # Full submodule imports (for internal types)
    from anchoring.resolver import Candidate, MatchMethod, quote_near_hint
    from anchoring.linearizer import MapEntry, TagRegistry

Example usage:

    from anchoring import Document, build_selector, linearize, resolve

    before = linearize(Document.from_text("The quick brown fox jumps"))
    selector = build_selector(before, 10, 19)

    after = linearize(Document.from_text("The very quick brown fox jumps today"))
    result = resolve(after, selector)

    if result.found:
        print(result.range.method, result.range.start, result.range.end)
    elif result.orphaned:
        print("annotation is orphaned")
"""

from anchoring.config import ResolverConfig
from anchoring.document import Document, ElementNode, TextNode
from anchoring.errors import (
    AnchoringError,
    InvalidRangeError,
    NotFoundError,
    OutOfBoundsError,
)
from anchoring.linearizer import LinearizedText, linearize
from anchoring.materializer import NativeRange, materialize
from anchoring.resolver import (
    AnchorResult,
    MatchMethod,
    MatchStatus,
    ResolvedRange,
    resolve,
    resolve_many,
)
from anchoring.selectors import PositionHint, Selector, build_selector

__version__ = "0.1.0"

# Primary public API
__all__ = [
    "AnchorResult",
    "AnchoringError",
    "Document",
    "ElementNode",
    "InvalidRangeError",
    "LinearizedText",
    "MatchMethod",
    "MatchStatus",
    "NativeRange",
    "NotFoundError",
    "OutOfBoundsError",
    "PositionHint",
    "ResolvedRange",
    "ResolverConfig",
    "Selector",
    "TextNode",
    "build_selector",
    "linearize",
    "materialize",
    "resolve",
    "resolve_many",
]
