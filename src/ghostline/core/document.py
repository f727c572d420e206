"""Document accessor contract and an in-memory implementation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from .ranges import Position, Range


@runtime_checkable
class DocumentAccessor(Protocol):
    """Read-only view of the live editor document."""

    uri: str

    @property
    def line_count(self) -> int:
        ...

    def get_text(self, range: Range | None = None) -> str:
        """Return the whole text, or the text covered by ``range``."""
        ...


@dataclass(slots=True)
class TextDocument:
    """Plain-text document with editor-style position clamping.

    Positions past the last line clamp to the end of the document and columns
    past the end of a line clamp to that line's end.
    """

    text: str = ""
    uri: str = "untitled:document"
    version_id: int = 1
    _line_offsets: list[int] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        self._line_offsets = self._compute_line_offsets(self.text)

    @property
    def line_count(self) -> int:
        return len(self._line_offsets)

    def line_at(self, line: int) -> str:
        """Return the text of ``line`` without its line terminator."""

        if line < 0 or line >= self.line_count:
            raise IndexError(f"line {line} is outside the document")
        start = self._line_offsets[line]
        end = self._line_offsets[line + 1] if line + 1 < self.line_count else len(self.text)
        return self.text[start:end].rstrip("\r\n")

    def offset_at(self, position: Position) -> int:
        """Convert ``position`` to an absolute character offset."""

        if position.line >= self.line_count:
            return len(self.text)
        line_text = self.line_at(position.line)
        return self._line_offsets[position.line] + min(position.column, len(line_text))

    def get_text(self, range: Range | None = None) -> str:
        if range is None:
            return self.text
        start = self.offset_at(range.start)
        end = self.offset_at(range.end)
        return self.text[start:end]

    def update_text(self, new_text: str) -> None:
        """Replace the document text and bump the version."""

        self.text = new_text
        self.version_id += 1
        self._line_offsets = self._compute_line_offsets(new_text)

    @staticmethod
    def _compute_line_offsets(text: str) -> list[int]:
        offsets = [0]
        for index, char in enumerate(text):
            if char == "\n":
                offsets.append(index + 1)
        return offsets


__all__ = ["DocumentAccessor", "TextDocument"]
