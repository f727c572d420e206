"""Request-scoped data passed from the editor layer into the suggestion core."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from .document import DocumentAccessor
from .ranges import Range


class UseCaseType(str, Enum):
    """Kinds of suggestion requests a prompt strategy can serve."""

    USER_REQUEST = "user_request"
    AUTO_TRIGGER = "auto_trigger"


@dataclass(slots=True, frozen=True)
class Operation:
    """A recent edit recorded by the editor, reusable as prompt context."""

    content: str
    description: str = ""
    filepath: str = ""
    is_global: bool = False

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any], *, is_global: bool = False) -> Operation:
        return cls(
            content=str(payload.get("content") or ""),
            description=str(payload.get("description") or ""),
            filepath=str(payload.get("filepath") or ""),
            is_global=bool(payload.get("is_global", is_global)),
        )


@dataclass(slots=True)
class SuggestionContext:
    """Snapshot of everything a prompt strategy may look at for one request."""

    document: DocumentAccessor | None = None
    range: Range | None = None
    recent_operations: list[Operation] = field(default_factory=list)
    global_recent_operations: list[Operation] = field(default_factory=list)
    use_case: UseCaseType | None = None
    user_input: str | None = None

    @property
    def has_cursor(self) -> bool:
        return self.document is not None and self.range is not None


__all__ = ["Operation", "SuggestionContext", "UseCaseType"]
