"""Tests for the Selector model and builder."""

import pytest
from pydantic import ValidationError

from anchoring.document import Document
from anchoring.errors import InvalidRangeError, SelectorFormatError
from anchoring.linearizer import linearize
from anchoring.selectors import PositionHint, Selector, build_selector


class TestBuildSelector:
    """Tests for build_selector."""

    def test_quick_fox(self, quick_fox) -> None:
        selector = build_selector(quick_fox, 10, 19)

        assert selector.exact == "brown fox"
        assert selector.prefix == "The quick "
        assert selector.suffix == " jumps"
        assert selector.position_hint == PositionHint(start=10, end=19)

    def test_context_is_truncated_to_32(self) -> None:
        linearized = linearize(Document.from_text("a" * 50 + "TARGET" + "b" * 50))
        selector = build_selector(linearized, 50, 56)

        assert selector.exact == "TARGET"
        assert selector.prefix == "a" * 32
        assert selector.suffix == "b" * 32

    def test_context_is_not_padded_at_edges(self, quick_fox) -> None:
        selector = build_selector(quick_fox, 0, 25)

        assert selector.exact == "The quick brown fox jumps"
        assert selector.prefix == ""
        assert selector.suffix == ""

    def test_shorter_context_length(self, quick_fox) -> None:
        selector = build_selector(quick_fox, 10, 19, context_length=4)

        assert selector.prefix == "ick "
        assert selector.suffix == " jum"

    def test_built_on_linear_text(self) -> None:
        linearized = linearize(Document.from_blocks(["Hello   there", "General Kenobi"]))
        selector = build_selector(linearized, 6, 19)

        assert selector.exact == "there General"
        assert selector.prefix == "Hello "

    @pytest.mark.parametrize(
        "start,end",
        [(-1, 3), (5, 5), (6, 2), (0, 26), (25, 26)],
    )
    def test_invalid_range(self, quick_fox, start: int, end: int) -> None:
        with pytest.raises(InvalidRangeError) as exc_info:
            build_selector(quick_fox, start, end)

        assert isinstance(exc_info.value, ValueError)
        assert exc_info.value.length == 25

    def test_empty_document(self) -> None:
        with pytest.raises(InvalidRangeError, match="length 0"):
            build_selector(linearize(Document.from_text("")), 0, 0)


class TestSelectorModel:
    """Tests for Selector validation."""

    def test_is_immutable(self, quick_fox) -> None:
        selector = build_selector(quick_fox, 10, 19)

        with pytest.raises(ValidationError):
            selector.exact = "changed"

    def test_exact_must_not_be_empty(self) -> None:
        with pytest.raises(ValidationError):
            Selector(exact="")

    def test_hint_length_must_match_quote(self) -> None:
        with pytest.raises(ValidationError, match="quote length"):
            Selector(exact="fox", position_hint=PositionHint(start=0, end=5))

    def test_hint_must_not_be_empty(self) -> None:
        with pytest.raises(ValidationError):
            PositionHint(start=4, end=4)

    def test_long_context_is_clipped(self) -> None:
        selector = Selector(exact="q", prefix="p" * 40 + "END", suffix="START" + "s" * 40)

        assert selector.prefix == ("p" * 40 + "END")[-32:]
        assert selector.prefix.endswith("END")
        assert selector.suffix.startswith("START")
        assert len(selector.suffix) == 32


class TestFromQuote:
    """Tests for hint-less selectors."""

    def test_whitespace_is_normalized(self) -> None:
        selector = Selector.from_quote("  brown\n  fox ", prefix="The   quick ", suffix="\njumps")

        assert selector.exact == "brown fox"
        assert selector.prefix == "The quick "
        assert selector.suffix == " jumps"
        assert selector.position_hint is None

    def test_empty_quote(self) -> None:
        with pytest.raises(InvalidRangeError):
            Selector.from_quote(" \n ")


class TestAnnotationFormat:
    """Tests for W3C annotation serialization."""

    def test_to_annotation(self, quick_fox) -> None:
        selector = build_selector(quick_fox, 10, 19)

        assert selector.to_annotation() == {
            "target": {
                "selector": [
                    {
                        "type": "TextQuoteSelector",
                        "exact": "brown fox",
                        "prefix": "The quick ",
                        "suffix": " jumps",
                    },
                    {"type": "TextPositionSelector", "start": 10, "end": 19},
                ]
            }
        }

    def test_to_annotation_without_hint(self) -> None:
        selector = Selector.from_quote("fox")

        assert len(selector.to_annotation()["target"]["selector"]) == 1

    def test_yaml_round_trip(self, quick_fox) -> None:
        selector = build_selector(quick_fox, 10, 19)

        assert Selector.from_annotation(selector.to_yaml()) == selector

    def test_yaml_keeps_unicode(self) -> None:
        selector = Selector.from_quote("café – ünïcode")

        assert "café – ünïcode" in selector.to_yaml()

    def test_single_selector_mapping(self) -> None:
        selector = Selector.from_annotation(
            """
            target:
              selector:
                type: TextQuoteSelector
                exact: "brown fox"
                prefix: "The quick "
            """
        )

        assert selector.exact == "brown fox"
        assert selector.prefix == "The quick "
        assert selector.suffix == ""
        assert selector.position_hint is None

    def test_bare_selector_mapping(self) -> None:
        selector = Selector.from_annotation('exact: "brown fox"\nsuffix: " jumps"\n')

        assert selector.exact == "brown fox"
        assert selector.suffix == " jumps"

    def test_json_is_accepted(self) -> None:
        selector = Selector.from_annotation(
            '{"target": {"selector": [{"type": "TextQuoteSelector", "exact": "fox"},'
            ' {"type": "TextPositionSelector", "start": 16, "end": 19}]}}'
        )

        assert selector.position_hint == PositionHint(start=16, end=19)

    def test_missing_exact(self) -> None:
        with pytest.raises(SelectorFormatError):
            Selector.from_annotation("target:\n  selector:\n    type: TextQuoteSelector\n")

    def test_only_position_selector(self) -> None:
        with pytest.raises(SelectorFormatError):
            Selector.from_dict(
                {"target": {"selector": [{"type": "TextPositionSelector", "start": 0, "end": 3}]}}
            )

    def test_not_a_mapping(self) -> None:
        with pytest.raises(SelectorFormatError):
            Selector.from_annotation("- just\n- a list\n")

    @pytest.mark.parametrize(
        "position",
        [
            {"type": "TextPositionSelector", "begin": 10, "end": 19},
            {"type": "TextPositionSelector", "start": "ten", "end": 19},
            {"type": "TextPositionSelector", "start": None, "end": 19},
            {"type": "TextPositionSelector", "start": 19, "end": 10},
        ],
    )
    def test_malformed_position_selector(self, position) -> None:
        quote = {"type": "TextQuoteSelector", "exact": "brown fox"}
        data = {"target": {"selector": [quote, position]}}

        with pytest.raises(SelectorFormatError, match="TextPositionSelector"):
            Selector.from_dict(data)


class TestLocate:
    """Tests for the locate shortcut."""

    def test_locate(self, quick_fox) -> None:
        selector = build_selector(quick_fox, 10, 19)

        result = selector.locate(quick_fox)
        assert result.found
        assert result.range.start == 10

    def test_locate_plain_string(self) -> None:
        selector = Selector.from_quote("fox")

        result = selector.locate("a fox and another fox")
        assert result.range.start == 2
