"""Shared configuration for the anchoring engine."""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from anchoring.errors import InvalidRangeError

# Characters of context stored on each side of a quote
CONTEXT_LENGTH = 32

# Scores at or above this are accepted without widening the search
EXACT_THRESHOLD = 0.98

# Minimum score for a match found away from its position hint
FUZZY_THRESHOLD = 0.75

# Search window around the position hint: starts at INITIAL_RADIUS characters
# on each side and grows by RADIUS_GROWTH until MAX_RADIUS
INITIAL_RADIUS = 64
RADIUS_GROWTH = 4
MAX_RADIUS = 4096

# Whole-document search limits
MAX_OCCURRENCES = 10_000
MAX_SCORED_CANDIDATES = 32
MIN_FUZZY_LENGTH = 8
QGRAM_SIZE = 3

# Score weighting: quote similarity dominates, context adds a bonus
QUOTE_WEIGHT = 0.8
CONTEXT_WEIGHT = 0.2


def validate_range(start: int, end: int, length: int) -> None:
    """Validate a half-open linear range against a text length.

    Args:
        start: Start offset (inclusive)
        end: End offset (exclusive)
        length: Length of the linear text

    Raises:
        InvalidRangeError: Unless 0 <= start < end <= length
    """
    if start < 0:
        raise InvalidRangeError(start, end, length, "start is negative")
    if end <= start:
        raise InvalidRangeError(start, end, length, "range is empty")
    if end > length:
        raise InvalidRangeError(start, end, length, "end is past the text")


class ResolverConfig(BaseModel):
    """
    Tunable constants for selector resolution.

    The defaults are the module-level constants; override individual fields
    for stricter or looser anchoring:

        config = ResolverConfig(fuzzy_threshold=0.9)
        result = resolve(linearized, selector, config)
    """

    model_config = ConfigDict(frozen=True)

    exact_threshold: float = Field(default=EXACT_THRESHOLD, gt=0.0, le=1.0)
    fuzzy_threshold: float = Field(default=FUZZY_THRESHOLD, gt=0.0, le=1.0)
    initial_radius: int = Field(default=INITIAL_RADIUS, ge=1)
    radius_growth: int = Field(default=RADIUS_GROWTH, ge=2)
    max_radius: int = Field(default=MAX_RADIUS, ge=1)
    max_occurrences: int = Field(default=MAX_OCCURRENCES, ge=1)
    max_scored_candidates: int = Field(default=MAX_SCORED_CANDIDATES, ge=1)
    min_fuzzy_length: int = Field(default=MIN_FUZZY_LENGTH, ge=1)
    qgram_size: int = Field(default=QGRAM_SIZE, ge=1)

    @model_validator(mode="after")
    def _check_ordering(self) -> Self:
        if self.fuzzy_threshold > self.exact_threshold:
            raise ValueError("fuzzy_threshold must not exceed exact_threshold")
        if self.initial_radius > self.max_radius:
            raise ValueError("initial_radius must not exceed max_radius")
        return self


DEFAULT_CONFIG = ResolverConfig()
