"""Tests for projecting linear ranges onto document nodes."""

import logging

import pytest

from anchoring.adapters.html import document_from_html
from anchoring.document import Document
from anchoring.errors import OutOfBoundsError
from anchoring.linearizer import linearize
from anchoring.materializer import NativeSegment, materialize
from anchoring.resolver import resolve
from anchoring.selectors import build_selector


class TestMaterialize:
    """Tests for materialize."""

    def test_single_node(self) -> None:
        document = Document.from_text("The quick brown fox jumps")
        linearized = linearize(document)
        node = document.find("text")

        native = materialize(linearized, (10, 19))

        assert native.start.node is node
        assert native.start.offset == 10
        assert native.end.node is node
        assert native.end.offset == 19
        assert native.segments == (NativeSegment(node, 10, 19),)
        assert native.text == "brown fox"

    def test_collapsed_whitespace_maps_to_raw_run(self) -> None:
        document = Document.from_text("Hello   \n world")
        linearized = linearize(document)
        node = document.find("text")

        native = materialize(linearized, (0, 11))

        assert native.end.offset == 15
        assert native.segments == (NativeSegment(node, 0, 15),)
        assert native.text == "Hello   \n world"

    def test_range_ending_on_whitespace(self) -> None:
        document = Document.from_text("Hello   world")
        linearized = linearize(document)

        native = materialize(linearized, (0, 6))

        assert native.end.offset == 8
        assert native.text == "Hello   "

    def test_across_blocks(self) -> None:
        document = Document.from_blocks(["Hello world", "Second block"])
        linearized = linearize(document)
        first = document.find("block-0/text")
        second = document.find("block-1/text")

        native = materialize(linearized, (6, 18))

        assert native.start.node is first
        assert native.start.offset == 6
        assert native.end.node is second
        assert native.end.offset == 6
        # The block separator has no raw text of its own
        assert native.segments == (
            NativeSegment(first, 6, 11),
            NativeSegment(second, 0, 6),
        )

    def test_across_inline_elements(self) -> None:
        document = document_from_html("<p>Hello <b>brave</b> new world</p>")
        linearized = linearize(document)
        assert linearized.text == "Hello brave new world"

        native = materialize(linearized, (6, 15))

        assert native.start.node.text == "brave"
        assert native.start.offset == 0
        assert native.end.node.text == " new world"
        assert native.end.offset == 4
        assert [segment.text for segment in native.segments] == ["brave", " new"]

    def test_resolved_range(self) -> None:
        before = Document.from_text("The quick brown fox jumps")
        selector = build_selector(linearize(before), 10, 19)
        after = Document.from_text("The very   quick brown fox jumps today")
        linearized = linearize(after)

        native = materialize(linearized, resolve(linearized, selector).require())

        assert native.start.node is after.find("text")
        assert native.start.offset == 17
        assert native.text == "brown fox"


class TestOutOfBounds:
    """Tests for ranges the map cannot cover."""

    @pytest.mark.parametrize("span", [(0, 26), (-1, 3), (5, 5), (30, 40)])
    def test_outside_text(self, quick_fox, span) -> None:
        with pytest.raises(OutOfBoundsError) as exc_info:
            materialize(quick_fox, span)

        assert isinstance(exc_info.value, IndexError)
        assert exc_info.value.coverage == 25

    def test_empty_document(self) -> None:
        with pytest.raises(OutOfBoundsError):
            materialize(linearize(Document.from_text("")), (0, 1))

    def test_stale_linearization(self) -> None:
        """A range resolved against a newer, longer document is rejected."""
        longer = linearize(Document.from_text("The quick brown fox jumps over the lazy dog"))
        shorter = linearize(Document.from_text("The quick brown fox"))

        with pytest.raises(OutOfBoundsError):
            materialize(shorter, (35, 43))
        assert materialize(longer, (35, 43)).text == "lazy dog"

    def test_error_is_logged(self, quick_fox, caplog) -> None:
        caplog.set_level(logging.ERROR, logger="anchoring")

        with pytest.raises(OutOfBoundsError):
            materialize(quick_fox, (20, 30))

        assert "not covered by offset map" in caplog.text
