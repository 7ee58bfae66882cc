"""Project resolved linear ranges back onto document nodes."""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from dataclasses import dataclass, field

from anchoring.document import TextNode
from anchoring.errors import OutOfBoundsError
from anchoring.linearizer import LinearizedText
from anchoring.logging_config import logger
from anchoring.resolver import ResolvedRange


@dataclass(frozen=True)
class NativePoint:
    """A position inside a text node."""

    node: TextNode
    offset: int


@dataclass(frozen=True)
class NativeSegment:
    """The part [start_offset, end_offset) of one text node covered by a range."""

    node: TextNode
    start_offset: int
    end_offset: int

    @property
    def text(self) -> str:
        return self.node.text[self.start_offset : self.end_offset]


@dataclass(frozen=True)
class NativeRange:
    """
    A resolved range in document-native form.

    Attributes:
        start: Node and raw offset where the range begins
        end: Node and raw offset where the range ends
        segments: Per-node pieces in document order, for painting a
            highlight that spans several text nodes
    """

    start: NativePoint
    end: NativePoint
    segments: tuple[NativeSegment, ...] = field(default=())

    @property
    def text(self) -> str:
        """Raw (unnormalized) text covered by the range."""
        return "".join(segment.text for segment in self.segments)


def materialize(
    linearized: LinearizedText,
    resolved: ResolvedRange | tuple[int, int],
) -> NativeRange:
    """
    Translate a linear range into native node/offset endpoints.

    Args:
        linearized: The linearization the range was resolved against
        resolved: Resolved range, or a plain (start, end) pair

    Returns:
        NativeRange with endpoints and covered segments

    Raises:
        OutOfBoundsError: If the range is empty or not covered by the map,
            which means the linearization is stale relative to the range
    """
    if isinstance(resolved, ResolvedRange):
        start, end = resolved.start, resolved.end
    else:
        start, end = resolved

    coverage = linearized.coverage
    if start < 0 or end <= start or end > coverage or coverage != len(linearized.text):
        logger.error(
            f"Range [{start}, {end}) not covered by offset map "
            f"({coverage} of {len(linearized.text)} characters mapped)"
        )
        raise OutOfBoundsError(start, end, coverage)

    first = bisect_right(linearized.starts, start) - 1
    last = bisect_left(linearized.ends, end)
    entries = linearized.map[first : last + 1]

    segments: list[NativeSegment] = []
    for entry in entries:
        seg_start = entry.node_offset(max(start, entry.char_start))
        seg_end = entry.node_offset(min(end, entry.char_end))
        if seg_end <= seg_start:
            continue
        previous = segments[-1] if segments else None
        if previous is not None and previous.node is entry.node and previous.end_offset == seg_start:
            segments[-1] = NativeSegment(entry.node, previous.start_offset, seg_end)
        else:
            segments.append(NativeSegment(entry.node, seg_start, seg_end))

    first_entry, last_entry = entries[0], entries[-1]
    return NativeRange(
        start=NativePoint(first_entry.node, first_entry.node_offset(start)),
        end=NativePoint(last_entry.node, last_entry.node_offset(end)),
        segments=tuple(segments),
    )
