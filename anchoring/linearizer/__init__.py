"""Document linearization: tree in, normalized text plus offset map out."""

from anchoring.linearizer.config import create_html_registry
from anchoring.linearizer.linearizer import (
    LinearizedText,
    Linearizer,
    MapEntry,
    linearize,
    normalize_whitespace,
)
from anchoring.linearizer.registry import ElementType, TagRegistry

__all__ = [
    "ElementType",
    "LinearizedText",
    "Linearizer",
    "MapEntry",
    "TagRegistry",
    "create_html_registry",
    "linearize",
    "normalize_whitespace",
]
