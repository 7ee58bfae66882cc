"""
Selector resolution.

Resolution is a fixed progression of tiers, from most to least precise:

    EXACT_POSITION -> QUOTE_NEAR_HINT -> FUZZY_SEARCH -> orphaned

Each tier is a function returning the best acceptable Candidate or None, so
thresholds and tie-breaking can be exercised tier by tier. Every tier is
bounded: the hint window stops growing at ``max_radius``, and the
whole-document search scores at most ``max_scored_candidates`` exact
occurrences and ``max_scored_candidates`` fuzzy windows.

Ties on score go to the candidate closest to the position hint, or to the
earliest one when there is no hint.
"""

from __future__ import annotations

import heapq
from collections.abc import Callable, Iterator, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from difflib import SequenceMatcher
from enum import Enum
from itertools import islice

from pydantic import BaseModel, Field, computed_field

from anchoring.config import DEFAULT_CONFIG, ResolverConfig
from anchoring.errors import NotFoundError
from anchoring.linearizer import LinearizedText
from anchoring.logging_config import logger
from anchoring.matcher import context_overlap, score_candidate
from anchoring.selectors import Selector

# A fuzzy window must share at least this share of the quote's q-grams
MIN_SHARED_QGRAM_RATIO = 0.5


class MatchMethod(str, Enum):
    """Tier that produced a resolved range."""

    EXACT_POSITION = "exact_position"
    QUOTE_NEAR_HINT = "quote_near_hint"
    FUZZY_SEARCH = "fuzzy_search"


class MatchStatus(str, Enum):
    """Status of a resolution attempt."""

    FOUND = "found"
    ORPHANED = "orphaned"


@dataclass(frozen=True)
class Candidate:
    """A scored span of the current linear text."""

    start: int
    end: int
    score: float


class ResolvedRange(BaseModel):
    """
    A span of the current document that a selector resolved to.

    Attributes:
        start: Linear offset where the match begins
        end: Linear offset where the match ends
        confidence: Match confidence (1.0 for an unchanged document)
        method: Tier that produced the match
        matched_text: The linear text that was matched
    """

    start: int = Field(ge=0)
    end: int = Field(ge=0)
    confidence: float = Field(ge=0.0, le=1.0)
    method: MatchMethod
    matched_text: str = ""


class AnchorResult(BaseModel):
    """
    Result of resolving a selector.

    Use the boolean properties for clean result handling:

        result = resolve(linearized, selector)
        if result.found:
            print(result.range.start, result.range.end)
        elif result.orphaned:
            print("Annotation is orphaned")
    """

    status: MatchStatus
    range: ResolvedRange | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def found(self) -> bool:
        """True if the selector was anchored."""
        return self.status == MatchStatus.FOUND

    @computed_field  # type: ignore[prop-decorator]
    @property
    def orphaned(self) -> bool:
        """True if no tier produced an acceptable match."""
        return self.status == MatchStatus.ORPHANED

    def require(self, exact: str = "") -> ResolvedRange:
        """Return the resolved range, raising NotFoundError when orphaned."""
        if self.range is None:
            raise NotFoundError(exact)
        return self.range


TierFn = Callable[[str, Selector, ResolverConfig], "Candidate | None"]


def resolve(
    linearized: LinearizedText | str,
    selector: Selector,
    config: ResolverConfig | None = None,
) -> AnchorResult:
    """
    Resolve a selector against a (possibly changed) linearized document.

    Never raises for an unresolvable selector; the result is ORPHANED
    instead. The inputs are not modified, so many selectors may be resolved
    against one LinearizedText concurrently.

    Args:
        linearized: Current linearized document (or already-linear text)
        selector: Stored selector
        config: Resolver settings (default: DEFAULT_CONFIG)

    Returns:
        AnchorResult with status and, when found, the resolved range
    """
    config = config or DEFAULT_CONFIG
    text = linearized if isinstance(linearized, str) else linearized.text

    with logger.indent_block(f"Resolving {_preview(selector.exact)}"):
        for method, tier in TIERS:
            candidate = tier(text, selector, config)
            if candidate is None:
                logger.debug(f"{method.value}: no acceptable match")
                continue

            logger.debug(
                f"{method.value}: [{candidate.start}, {candidate.end}) "
                f"confidence {candidate.score:.3f}"
            )
            resolved = ResolvedRange(
                start=candidate.start,
                end=candidate.end,
                confidence=candidate.score,
                method=method,
                matched_text=text[candidate.start : candidate.end],
            )
            return AnchorResult(status=MatchStatus.FOUND, range=resolved)

    logger.info(f"Orphaned annotation {_preview(selector.exact)}")
    return AnchorResult(status=MatchStatus.ORPHANED)


def resolve_many(
    linearized: LinearizedText | str,
    selectors: Mapping[str, Selector],
    config: ResolverConfig | None = None,
    max_workers: int | None = None,
) -> dict[str, AnchorResult]:
    """
    Re-anchor a batch of stored selectors against one linearization.

    Args:
        linearized: Current linearized document
        selectors: Annotation id -> selector
        config: Resolver settings shared by the whole batch
        max_workers: Run on a thread pool with this many workers (default:
            resolve sequentially)

    Returns:
        Annotation id -> AnchorResult, in the input order
    """
    if not max_workers or max_workers <= 1 or len(selectors) <= 1:
        return {key: resolve(linearized, sel, config) for key, sel in selectors.items()}

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            key: executor.submit(resolve, linearized, sel, config)
            for key, sel in selectors.items()
        }
        return {key: future.result() for key, future in futures.items()}


# === Tiers ===


def exact_position(text: str, selector: Selector, config: ResolverConfig) -> Candidate | None:
    """Accept the hinted span if it still holds the quote verbatim."""
    hint = selector.position_hint
    if hint is None:
        return None
    if text[hint.start : hint.end] == selector.exact:
        return Candidate(hint.start, hint.end, 1.0)
    return None


def quote_near_hint(
    text: str, selector: Selector, config: ResolverConfig
) -> Candidate | None:
    """
    Look for the quote verbatim in a window around the position hint.

    The window starts at ``initial_radius`` characters on each side and
    grows by ``radius_growth`` until ``max_radius`` or until it covers the
    whole document. A candidate at or above ``exact_threshold`` stops the
    expansion; otherwise the best candidate at or above ``fuzzy_threshold``
    found within the final window is accepted.
    """
    hint = selector.position_hint
    if hint is None:
        return None

    exact = selector.exact
    scores: dict[int, float] = {}
    best: Candidate | None = None
    radius = config.initial_radius

    while True:
        lo = max(0, hint.start - radius)
        hi = min(len(text), hint.end + radius)

        for pos in _occurrences(text, exact, lo, hi):
            if pos not in scores:
                scores[pos] = score_candidate(text, pos, pos + len(exact), selector)

        best = _best(
            (Candidate(pos, pos + len(exact), value) for pos, value in scores.items()),
            hint.start,
        )
        if best is not None and best.score >= config.exact_threshold:
            return best

        if radius >= config.max_radius or (lo == 0 and hi == len(text)):
            break
        radius = min(radius * config.radius_growth, config.max_radius)

    logger.debug(f"quote_near_hint: scored {len(scores)} occurrences within radius {radius}")
    if best is not None and best.score >= config.fuzzy_threshold:
        return best
    return None


def fuzzy_search(text: str, selector: Selector, config: ResolverConfig) -> Candidate | None:
    """
    Search the whole document for the best-scoring span.

    Verbatim occurrences are collected first (capped at ``max_occurrences``)
    and pre-ranked by how much stored context surrounds them verbatim; only
    the top ``max_scored_candidates`` are fully scored. Quotes of at least
    ``min_fuzzy_length`` characters are additionally matched approximately:
    windows of the quote's length are ranked by shared q-grams in one pass
    over the text, and the top windows are aligned against the quote and
    scored.
    """
    hint = selector.position_hint
    origin = hint.start if hint is not None else None

    candidates = _exact_candidates(text, selector, config, origin)
    best = _best(candidates, origin)
    if best is not None and best.score >= config.exact_threshold:
        return best

    if len(selector.exact) >= config.min_fuzzy_length:
        candidates.extend(_fuzzy_candidates(text, selector, config))
        best = _best(candidates, origin)

    if best is not None and best.score >= config.fuzzy_threshold:
        return best
    return None


TIERS: tuple[tuple[MatchMethod, TierFn], ...] = (
    (MatchMethod.EXACT_POSITION, exact_position),
    (MatchMethod.QUOTE_NEAR_HINT, quote_near_hint),
    (MatchMethod.FUZZY_SEARCH, fuzzy_search),
)


# === Helpers ===


def _occurrences(text: str, exact: str, lo: int, hi: int) -> Iterator[int]:
    """Yield start offsets of (possibly overlapping) occurrences in text[lo:hi]."""
    pos = text.find(exact, lo, hi)
    while pos != -1:
        yield pos
        pos = text.find(exact, pos + 1, hi)


def _best(candidates, origin: int | None) -> Candidate | None:
    """Highest score wins; ties go to the start closest to origin, then earliest."""

    def key(candidate: Candidate) -> tuple[float, int, int]:
        distance = abs(candidate.start - origin) if origin is not None else 0
        return (-candidate.score, distance, candidate.start)

    return min(candidates, key=key, default=None)


def _exact_candidates(
    text: str,
    selector: Selector,
    config: ResolverConfig,
    origin: int | None,
) -> list[Candidate]:
    exact = selector.exact
    positions = list(islice(_occurrences(text, exact, 0, len(text)), config.max_occurrences))
    if not positions:
        return []

    def rank(pos: int) -> tuple[int, int, int]:
        distance = abs(pos - origin) if origin is not None else 0
        return (-context_overlap(text, pos, pos + len(exact), selector), distance, pos)

    shortlist = heapq.nsmallest(config.max_scored_candidates, positions, key=rank)
    logger.debug(
        f"fuzzy_search: {len(positions)} verbatim occurrences, scoring {len(shortlist)}"
    )
    return [
        Candidate(pos, pos + len(exact), score_candidate(text, pos, pos + len(exact), selector))
        for pos in shortlist
    ]


def _fuzzy_candidates(
    text: str,
    selector: Selector,
    config: ResolverConfig,
) -> list[Candidate]:
    exact = selector.exact
    seeds = _qgram_seeds(text, exact, config)
    logger.debug(f"fuzzy_search: refining {len(seeds)} q-gram windows")

    candidates: list[Candidate] = []
    seen: set[tuple[int, int]] = set()
    for start in seeds:
        for span in (_window(text, start, len(exact)), _align(text, exact, start, config)):
            if span is None or span in seen:
                continue
            seen.add(span)
            candidates.append(Candidate(span[0], span[1], score_candidate(text, *span, selector)))
    return candidates


def _qgram_seeds(text: str, exact: str, config: ResolverConfig) -> list[int]:
    """
    Rank window starts by how many of the quote's q-grams they contain.

    Uses a rolling count over a precomputed hit array, so the whole document
    is scanned once regardless of quote length. Overlapping windows are
    suppressed so the returned starts point at distinct regions.
    """
    m = len(exact)
    q = min(config.qgram_size, m)
    n = len(text)
    if n < q:
        return []

    quote_grams = {exact[i : i + q] for i in range(m - q + 1)}
    hits = [1 if text[i : i + q] in quote_grams else 0 for i in range(n - q + 1)]

    width = max(1, min(m, n) - q + 1)
    required = max(1, int(width * MIN_SHARED_QGRAM_RATIO))

    counts: list[tuple[int, int]] = []
    running = sum(hits[:width])
    last_start = len(hits) - width
    for start in range(last_start + 1):
        if start:
            running += hits[start + width - 1] - hits[start - 1]
        if running >= required:
            counts.append((running, start))

    limit = config.max_scored_candidates
    ranked = heapq.nsmallest(limit * 8, counts, key=lambda item: (-item[0], item[1]))

    seeds: list[int] = []
    spacing = max(1, m // 2)
    for _, start in ranked:
        if all(abs(start - seed) >= spacing for seed in seeds):
            seeds.append(start)
            if len(seeds) >= limit:
                break
    return seeds


def _window(text: str, start: int, length: int) -> tuple[int, int] | None:
    end = min(len(text), start + length)
    return (start, end) if end > start else None


def _align(
    text: str, exact: str, start: int, config: ResolverConfig
) -> tuple[int, int] | None:
    """
    Fit the quote into a slack region around a seed window.

    The span runs from the first to the last matching block of a
    SequenceMatcher alignment, ignoring stray blocks shorter than a q-gram
    at either end. This lets the match grow or shrink when text was
    inserted into or removed from the quoted span.
    """
    m = len(exact)
    slack = max(config.qgram_size, m // 4)
    lo = max(0, start - slack)
    hi = min(len(text), start + m + slack)
    region = text[lo:hi]

    matcher = SequenceMatcher(None, exact, region, autojunk=False)
    blocks = [block for block in matcher.get_matching_blocks() if block.size]
    min_size = min(config.qgram_size, m)
    while len(blocks) > 1 and blocks[0].size < min_size:
        blocks.pop(0)
    while len(blocks) > 1 and blocks[-1].size < min_size:
        blocks.pop()
    if not blocks:
        return None

    span_start = lo + blocks[0].b
    span_end = lo + blocks[-1].b + blocks[-1].size
    return (span_start, span_end) if span_end > span_start else None


def _preview(exact: str) -> str:
    return repr(exact if len(exact) <= 40 else f"{exact[:37]}...")
