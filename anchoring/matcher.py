"""
Match scoring for selector resolution.

Uses difflib.SequenceMatcher for similarity. A candidate's score is

    quote_score * (QUOTE_WEIGHT + CONTEXT_WEIGHT * context_score)

so the quote itself dominates and matching context adds at most
CONTEXT_WEIGHT on top. A verbatim quote with matching context scores 1.0;
a verbatim quote whose surroundings were rewritten still scores QUOTE_WEIGHT.
"""

from __future__ import annotations

from difflib import SequenceMatcher
from typing import TYPE_CHECKING

from anchoring.config import CONTEXT_WEIGHT, QUOTE_WEIGHT

if TYPE_CHECKING:
    from anchoring.selectors import Selector


def similarity_score(s1: str, s2: str) -> float:
    """
    Calculate similarity score between two strings using SequenceMatcher.

    Returns a float between 0.0 (completely different) and 1.0 (identical).
    """
    if not s1 and not s2:
        return 1.0
    if not s1 or not s2:
        return 0.0
    if s1 == s2:
        return 1.0
    return SequenceMatcher(None, s1, s2, autojunk=False).ratio()


def quote_score(candidate: str, exact: str) -> float:
    """1.0 for a verbatim quote, edit similarity otherwise."""
    if candidate == exact:
        return 1.0
    return similarity_score(candidate, exact)


def context_score(selector: Selector, before: str, after: str) -> float:
    """
    Compare stored context with the text surrounding a candidate.

    The prefix is compared with the text right before the candidate and the
    suffix with the text right after it. Partial overlap earns partial
    credit. A side the selector has no context for counts as a full match.
    """
    if selector.prefix:
        prefix_score = similarity_score(selector.prefix, before)
    else:
        prefix_score = 1.0

    if selector.suffix:
        suffix_score = similarity_score(selector.suffix, after)
    else:
        suffix_score = 1.0

    return (prefix_score + suffix_score) / 2


def score(
    candidate_window: str,
    selector: Selector,
    before: str = "",
    after: str = "",
) -> float:
    """
    Score a candidate window against a selector.

    Context is judged only from ``before`` and ``after``. When the selector
    carries a prefix or suffix and both are left empty, a verbatim window
    scores QUOTE_WEIGHT (0.8), not 1.0; pass the surrounding text, or use
    score_candidate, to credit matching context.

    Args:
        candidate_window: Text of the candidate span
        selector: Selector being resolved
        before: Text immediately preceding the candidate
        after: Text immediately following the candidate

    Returns:
        Confidence between 0.0 and 1.0
    """
    quote = quote_score(candidate_window, selector.exact)
    if quote == 0.0:
        return 0.0
    context = context_score(selector, before, after)
    return min(1.0, quote * (QUOTE_WEIGHT + CONTEXT_WEIGHT * context))


def score_candidate(text: str, start: int, end: int, selector: Selector) -> float:
    """Score the span [start, end) of text, taking context from text itself."""
    before = text[max(0, start - len(selector.prefix)) : start]
    after = text[end : end + len(selector.suffix)]
    return score(text[start:end], selector, before, after)


def context_overlap(text: str, start: int, end: int, selector: Selector) -> int:
    """
    Count context characters matching verbatim around [start, end).

    Walks outward from the candidate: backwards through the prefix and
    forwards through the suffix, stopping at the first mismatch. Cheap
    enough to pre-rank thousands of exact occurrences.
    """
    matched = 0
    prefix = selector.prefix
    for offset in range(1, min(len(prefix), start) + 1):
        if text[start - offset] != prefix[-offset]:
            break
        matched += 1

    suffix = selector.suffix
    for offset in range(min(len(suffix), len(text) - end)):
        if text[end + offset] != suffix[offset]:
            break
        matched += 1

    return matched
