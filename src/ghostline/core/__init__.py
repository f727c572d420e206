"""Core value types shared by the parser, ranking and prompt layers."""

from .document import DocumentAccessor, TextDocument
from .models import Operation, SuggestionContext, UseCaseType
from .ranges import Position, Range, range_after, range_before, window_around

__all__ = [
    "DocumentAccessor",
    "Operation",
    "Position",
    "Range",
    "SuggestionContext",
    "TextDocument",
    "UseCaseType",
    "range_after",
    "range_before",
    "window_around",
]
