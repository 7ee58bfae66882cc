"""
Selector model and builder.

A Selector combines a W3C Web Annotation TextQuoteSelector (exact quote with
prefix/suffix context) and a TextPositionSelector (linear offsets at creation
time). The quote is authoritative; the position is only a hint for finding
the quote again quickly.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, Self

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from anchoring.config import CONTEXT_LENGTH, validate_range
from anchoring.errors import InvalidRangeError, SelectorFormatError
from anchoring.linearizer import LinearizedText, normalize_whitespace

if TYPE_CHECKING:
    from anchoring.config import ResolverConfig
    from anchoring.resolver import AnchorResult

_WHITESPACE_RE = re.compile(r"\s+")


class PositionHint(BaseModel):
    """Linear offsets of the quote when the selector was built."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=0)
    end: int = Field(ge=0)

    @model_validator(mode="after")
    def _check_order(self) -> Self:
        if self.end <= self.start:
            raise ValueError("position hint end must be greater than start")
        return self


class Selector(BaseModel):
    """
    Portable, storage-durable descriptor of a text span.

    Example:
        linearized = linearize(document)
        selector = build_selector(linearized, 10, 19)
        result = selector.locate(linearize(new_document))
        if result.found:
            print(result.range.start, result.range.confidence)

    Attributes:
        exact: The quoted text (never empty)
        prefix: Up to CONTEXT_LENGTH characters preceding the quote
        suffix: Up to CONTEXT_LENGTH characters following the quote
        position_hint: Linear offsets at creation time, if known
    """

    model_config = ConfigDict(frozen=True)

    exact: str = Field(min_length=1)
    prefix: str = ""
    suffix: str = ""
    position_hint: PositionHint | None = None

    @field_validator("prefix")
    @classmethod
    def _clip_prefix(cls, value: str) -> str:
        return value[-CONTEXT_LENGTH:] if len(value) > CONTEXT_LENGTH else value

    @field_validator("suffix")
    @classmethod
    def _clip_suffix(cls, value: str) -> str:
        return value[:CONTEXT_LENGTH]

    @model_validator(mode="after")
    def _check_hint_length(self) -> Self:
        hint = self.position_hint
        if hint is not None and hint.end - hint.start != len(self.exact):
            raise ValueError("position hint length must equal the quote length")
        return self

    @classmethod
    def from_quote(cls, exact: str, prefix: str = "", suffix: str = "") -> Self:
        """
        Build a hint-less selector from a quote captured elsewhere.

        Quotes reported by an analysis provider or copied from a browser
        selection carry raw whitespace; they are normalized with the same
        rule the linearizer applies so they can match linearized text.
        Context keeps its boundary space (" jumps" stays " jumps").

        Raises:
            InvalidRangeError: If the quote is empty after normalization
        """
        normalized = normalize_whitespace(exact)
        if not normalized:
            raise InvalidRangeError(0, 0, 0, "quote is empty")
        return cls(
            exact=normalized,
            prefix=_WHITESPACE_RE.sub(" ", prefix),
            suffix=_WHITESPACE_RE.sub(" ", suffix),
        )

    @classmethod
    def from_annotation(cls, yaml_text: str) -> Self:
        """
        Load a Selector from W3C Web Annotation YAML (or JSON).

        Accepts ``target.selector`` as a single selector mapping or as a list
        holding a TextQuoteSelector and an optional TextPositionSelector. A
        bare selector mapping without ``target`` is accepted too.

        Example:
            selector = Selector.from_annotation('''
                target:
                  selector:
                    - type: TextQuoteSelector
                      exact: "brown fox"
                      prefix: "The quick "
                      suffix: " jumps"
                    - type: TextPositionSelector
                      start: 10
                      end: 19
            ''')

        Raises:
            SelectorFormatError: If no TextQuoteSelector can be found, or a
                TextPositionSelector lacks integer start and end
        """
        data = yaml.safe_load(yaml_text)
        if not isinstance(data, dict):
            raise SelectorFormatError("Annotation must be a mapping")
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create a Selector from a parsed annotation mapping."""
        target = data.get("target", data)
        if not isinstance(target, dict):
            raise SelectorFormatError("Annotation target must be a mapping")
        raw = target.get("selector", target)
        selectors = raw if isinstance(raw, list) else [raw]

        quote: dict[str, Any] | None = None
        position: dict[str, Any] | None = None
        for item in selectors:
            if not isinstance(item, dict):
                continue
            kind = item.get("type", "TextQuoteSelector")
            if kind == "TextQuoteSelector" and quote is None:
                quote = item
            elif kind == "TextPositionSelector" and position is None:
                position = item

        if quote is None or not quote.get("exact"):
            raise SelectorFormatError("Annotation has no TextQuoteSelector with exact text")

        hint = None
        if position is not None:
            try:
                hint = PositionHint(start=int(position["start"]), end=int(position["end"]))
            except (KeyError, TypeError, ValueError) as e:
                raise SelectorFormatError(
                    f"TextPositionSelector needs integer start and end: {e}"
                ) from e

        return cls(
            exact=quote["exact"],
            prefix=quote.get("prefix") or "",
            suffix=quote.get("suffix") or "",
            position_hint=hint,
        )

    def to_annotation(self) -> dict[str, Any]:
        """Return the W3C Web Annotation ``target`` form of this selector."""
        selectors: list[dict[str, Any]] = [
            {
                "type": "TextQuoteSelector",
                "exact": self.exact,
                "prefix": self.prefix,
                "suffix": self.suffix,
            }
        ]
        if self.position_hint is not None:
            selectors.append(
                {
                    "type": "TextPositionSelector",
                    "start": self.position_hint.start,
                    "end": self.position_hint.end,
                }
            )
        return {"target": {"selector": selectors}}

    def to_yaml(self) -> str:
        """Serialize to annotation YAML (round-trips through from_annotation)."""
        return yaml.safe_dump(
            self.to_annotation(),
            allow_unicode=True,
            sort_keys=False,
            default_flow_style=False,
        )

    def locate(
        self,
        target: LinearizedText | str,
        config: ResolverConfig | None = None,
    ) -> AnchorResult:
        """
        Locate this selector in linearized text.

        Shortcut for ``anchoring.resolver.resolve(target, self, config)``.
        """
        from anchoring.resolver import resolve

        return resolve(target, self, config)


def build_selector(
    linearized: LinearizedText,
    start: int,
    end: int,
    context_length: int = CONTEXT_LENGTH,
) -> Selector:
    """
    Build a selector for the linear range [start, end).

    Context is truncated, never padded, at the document edges.

    Args:
        linearized: Linearized document the range refers to
        start: Start offset (inclusive)
        end: End offset (exclusive)
        context_length: Characters of context to keep on each side

    Returns:
        Selector with quote, context and position hint

    Raises:
        InvalidRangeError: Unless 0 <= start < end <= len(linearized.text)
    """
    text = linearized.text
    validate_range(start, end, len(text))
    context_length = max(0, min(context_length, CONTEXT_LENGTH))

    return Selector(
        exact=text[start:end],
        prefix=text[max(0, start - context_length) : start],
        suffix=text[end : end + context_length],
        position_hint=PositionHint(start=start, end=end),
    )
