"""
Step definitions for anchoring scenarios.

A scenario builds a selector on one version of a document, optionally swaps
in a changed version, and resolves the selector against it.
"""

from behave import given, then, when  # type: ignore[import-untyped]

from anchoring.adapters.html import document_from_html
from anchoring.document import Document
from anchoring.errors import InvalidRangeError
from anchoring.linearizer import linearize
from anchoring.resolver import resolve
from anchoring.selectors import Selector, build_selector

# === Document Setup ===


@given("the document:")  # type: ignore[misc]
def step_given_document(context):
    """Linearize a plain-text document."""
    context.linearized = linearize(Document.from_text(context.text))


@given("the HTML document:")  # type: ignore[misc]
def step_given_html_document(context):
    """Linearize an HTML document."""
    context.linearized = linearize(document_from_html(context.text))


@given("the document changes to:")  # type: ignore[misc]
def step_given_changed_document(context):
    """Replace the current document with a changed plain-text version."""
    context.linearized = linearize(Document.from_text(context.text))


@given("the HTML document changes to:")  # type: ignore[misc]
def step_given_changed_html_document(context):
    """Replace the current document with a changed HTML version."""
    context.linearized = linearize(document_from_html(context.text))


# === Selector Setup ===


@given('a selector for "{quote}"')  # type: ignore[misc]
def step_given_selector(context, quote):
    """Build a selector for the first occurrence of quote."""
    start = context.linearized.text.index(quote)
    context.selector = build_selector(context.linearized, start, start + len(quote))


@given("annotation:")  # type: ignore[misc]
def step_given_annotation(context):
    """Parse a selector from annotation YAML."""
    context.selector = Selector.from_annotation(context.text)


@when("I build a selector from {start:d} to {end:d}")  # type: ignore[misc]
def step_when_build(context, start, end):
    """Build a selector, remembering any error."""
    try:
        context.selector = build_selector(context.linearized, start, end)
    except InvalidRangeError as e:
        context.error = e


# === Resolution Actions ===


@when("I resolve the selector")  # type: ignore[misc]
def step_when_resolve(context):
    context.result = resolve(context.linearized, context.selector)


# === Assertions ===


@then("the result is FOUND with confidence {confidence:f}")  # type: ignore[misc]
def step_then_found_confidence(context, confidence):
    """Assert match was found with expected confidence."""
    assert context.result.found, f"Expected found but got {context.result.status}"
    actual = context.result.range.confidence
    assert abs(actual - confidence) < 0.01, (
        f"Expected confidence {confidence} but got {actual}"
    )


@then("the result is FOUND with confidence above {threshold:f}")  # type: ignore[misc]
def step_then_found_above(context, threshold):
    """Assert match was found with confidence above threshold."""
    assert context.result.found, f"Expected found but got {context.result.status}"
    actual = context.result.range.confidence
    assert actual > threshold, f"Expected confidence above {threshold} but got {actual}"


@then('the method is "{method}"')  # type: ignore[misc]
def step_then_method(context, method):
    actual = context.result.range.method.value
    assert actual == method, f"Expected method {method} but got {actual}"


@then("the range is {start:d} to {end:d}")  # type: ignore[misc]
def step_then_range(context, start, end):
    resolved = context.result.range
    assert (resolved.start, resolved.end) == (start, end), (
        f"Expected [{start}, {end}) but got [{resolved.start}, {resolved.end})"
    )


@then('the matched text is "{expected_text}"')  # type: ignore[misc]
def step_then_matched_text(context, expected_text):
    """Assert the matched linear text."""
    actual = context.result.range.matched_text
    assert actual == expected_text, f"Expected '{expected_text}' but got '{actual}'"


@then("the result is ORPHANED")  # type: ignore[misc]
def step_then_orphaned(context):
    """Assert annotation could not be resolved."""
    assert context.result.orphaned, f"Expected orphaned but got {context.result.status}"


@then("an InvalidRangeError is raised")  # type: ignore[misc]
def step_then_invalid_range(context):
    assert isinstance(getattr(context, "error", None), InvalidRangeError), (
        "Expected InvalidRangeError"
    )
