"""Line/column positions and ranges used for cursor arithmetic."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Iterator


@dataclass(slots=True, frozen=True, order=True)
class Position:
    """Zero-based ``(line, column)`` location inside a document."""

    line: int
    column: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "line", self._coerce_index(self.line, "line"))
        object.__setattr__(self, "column", self._coerce_index(self.column, "column"))

    @staticmethod
    def _coerce_index(value: Any, label: str) -> int:
        try:
            number = int(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Position {label} must be an integer") from exc
        if number < 0:
            return 0
        return number

    def translate(self, *, line_delta: int = 0, column_delta: int = 0) -> Position:
        """Return a position shifted by the given deltas (clamped at zero)."""

        return Position(self.line + line_delta, self.column + column_delta)

    def with_column(self, column: int) -> Position:
        return Position(self.line, column)

    def line_start(self) -> Position:
        """Return the first column of this position's line."""

        return Position(self.line, 0)

    def to_dict(self) -> dict[str, int]:
        return {"line": self.line, "column": self.column}

    @classmethod
    def from_value(cls, value: Any) -> Position:
        """Coerce ``value`` into a :class:`Position`."""

        if isinstance(value, Position):
            return value
        if isinstance(value, Mapping):
            line = value.get("line")
            column = value.get("column", value.get("character", 0))
            if line is None:
                raise ValueError("Position mappings require a line key")
            return cls(line, column)
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
            seq = list(value)
            if len(seq) != 2:
                raise ValueError("Position sequences must have exactly two entries")
            return cls(seq[0], seq[1])
        line = getattr(value, "line", None)
        if line is not None:
            column = getattr(value, "column", getattr(value, "character", 0))
            return cls(line, column)
        raise TypeError("Unsupported Position input")

    @classmethod
    def zero(cls) -> Position:
        return cls(0, 0)


@dataclass(slots=True, frozen=True)
class Range(Sequence[Position]):
    """Half-open span between two positions; endpoints are kept ordered."""

    start: Position
    end: Position

    def __post_init__(self) -> None:
        start = Position.from_value(self.start)
        end = Position.from_value(self.end)
        if end < start:
            start, end = end, start
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)

    def __len__(self) -> int:
        return 2

    def __getitem__(self, index: int | slice) -> Any:
        if isinstance(index, slice):
            return (self.start, self.end)[index]
        if index == 0:
            return self.start
        if index == 1:
            return self.end
        raise IndexError("Range index out of range")

    def __iter__(self) -> Iterator[Position]:
        yield self.start
        yield self.end

    @property
    def is_empty(self) -> bool:
        """Return ``True`` when the range collapses to a caret."""

        return self.start == self.end

    def contains(self, position: Position) -> bool:
        return self.start <= position <= self.end

    def to_dict(self) -> dict[str, dict[str, int]]:
        return {"start": self.start.to_dict(), "end": self.end.to_dict()}

    @classmethod
    def caret(cls, position: Position) -> Range:
        """Return an empty range sitting at ``position``."""

        return cls(position, position)

    @classmethod
    def from_value(cls, value: Any) -> Range:
        """Coerce ``value`` into a :class:`Range`."""

        if isinstance(value, Range):
            return value
        if isinstance(value, Mapping):
            start = value.get("start")
            end = value.get("end", start)
            if start is None:
                raise ValueError("Range mappings require a start key")
            return cls(Position.from_value(start), Position.from_value(end))
        start = getattr(value, "start", None)
        end = getattr(value, "end", None)
        if start is not None and end is not None:
            return cls(Position.from_value(start), Position.from_value(end))
        raise TypeError("Unsupported Range input")


def range_before(position: Position) -> Range:
    """Range from the start of the document up to ``position``."""

    return Range(Position.zero(), position)


def range_after(position: Position, line_count: int) -> Range:
    """Range from ``position`` through the end of a ``line_count`` line document."""

    return Range(position, Position(line_count, 0))


def window_around(position: Position, line_count: int, *, lines: int) -> tuple[Range, Range]:
    """Return the ``(before, after)`` ranges spanning ``lines`` lines around ``position``."""

    span = max(0, int(lines))
    before = Range(Position(max(0, position.line - span), 0), position)
    after = Range(position, Position(min(position.line + span, max(0, line_count)), 0))
    return before, after


__all__ = ["Position", "Range", "range_after", "range_before", "window_around"]
