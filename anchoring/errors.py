"""Error types raised by the anchoring engine.

Orphaned annotations are not errors: ``resolve`` reports them through
``AnchorResult``. The exceptions here signal caller bugs (invalid ranges,
malformed selectors) or internal inconsistencies (out-of-bounds ranges).
"""


class AnchoringError(Exception):
    """Base class for all anchoring errors."""


class InvalidRangeError(AnchoringError, ValueError):
    """Raised when a selector is requested for a malformed linear range."""

    def __init__(self, start: int, end: int, length: int, reason: str = "") -> None:
        self.start = start
        self.end = end
        self.length = length
        msg = f"Invalid range [{start}, {end}) for text of length {length}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class OutOfBoundsError(AnchoringError, IndexError):
    """Raised when a resolved range is not covered by the offset map.

    This indicates a mismatch between the linearization a range was
    resolved against and the one it is being materialized against.
    """

    def __init__(self, start: int, end: int, coverage: int) -> None:
        self.start = start
        self.end = end
        self.coverage = coverage
        super().__init__(
            f"Range [{start}, {end}) falls outside mapped text [0, {coverage})"
        )


class NotFoundError(AnchoringError, LookupError):
    """Raised by ``AnchorResult.require()`` for orphaned annotations."""

    def __init__(self, exact: str) -> None:
        self.exact = exact
        preview = exact if len(exact) <= 40 else f"{exact[:37]}..."
        super().__init__(f"Could not anchor quote {preview!r}")


class SelectorFormatError(AnchoringError, ValueError):
    """Raised when an annotation payload does not contain a usable selector."""


class UnknownNodeError(AnchoringError, KeyError):
    """Raised when a node id does not exist in a document."""

    def __init__(self, node_id: str) -> None:
        self.node_id = node_id
        super().__init__(node_id)

    def __str__(self) -> str:
        return f"No node with id '{self.node_id}'"


class ScrapeError(AnchoringError):
    """Raised when an adapter cannot extract a conversation from markup."""
