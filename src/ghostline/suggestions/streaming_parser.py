"""Incremental parser turning streamed model output into change blocks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from ..constants import strip_cursor_marker
from ..core.models import SuggestionContext
from .change_blocks import ChangeBlock, iter_change_block_matches

LOGGER = logging.getLogger(__name__)


class ParserStatus(str, Enum):
    """Lifecycle of a single streaming session."""

    IDLE = "idle"
    INITIALIZED = "initialized"
    STREAMING = "streaming"
    FINISHED = "finished"


@dataclass(slots=True, frozen=True)
class StreamingParseResult:
    """Outcome of a parser call.

    ``changes`` holds the newly completed blocks for :meth:`process_chunk` and
    the sanitized final set for :meth:`finish_stream`.
    """

    changes: tuple[ChangeBlock, ...] = ()
    is_complete: bool = False
    rejected_stale: int = 0
    rejected_noop: int = 0

    @property
    def has_changes(self) -> bool:
        return bool(self.changes)


class StreamingSuggestionParser:
    """Buffers streamed text and emits each change block once it closes.

    The buffer keeps everything received in the session. Scanning resumes at
    the end of the last complete block, so text that still holds a partially
    streamed block is re-examined on the next chunk. Callers feed chunks
    serially, in the order the model produced them.
    """

    def __init__(self) -> None:
        self._buffer = ""
        self._scan_offset = 0
        self._completed: list[ChangeBlock] = []
        self._seen: set[ChangeBlock] = set()
        self._final: tuple[ChangeBlock, ...] = ()
        self._context: SuggestionContext | None = None
        self._status = ParserStatus.IDLE

    @property
    def status(self) -> ParserStatus:
        return self._status

    @property
    def context(self) -> SuggestionContext | None:
        return self._context

    def initialize(self, context: SuggestionContext | None) -> None:
        """Start a new session bound to ``context``."""

        self._clear()
        self._context = context
        self._status = ParserStatus.INITIALIZED

    def process_chunk(self, chunk: str) -> StreamingParseResult:
        """Append ``chunk`` and return the blocks it completed."""

        if self._status is ParserStatus.FINISHED:
            LOGGER.warning("Ignoring %d chars received after the stream finished", len(chunk or ""))
            return StreamingParseResult()
        self._status = ParserStatus.STREAMING
        if not chunk:
            return StreamingParseResult()
        self._buffer += chunk

        new_changes: list[ChangeBlock] = []
        for block, end in iter_change_block_matches(self._buffer, self._scan_offset):
            self._scan_offset = end
            if block in self._seen:
                LOGGER.debug("Skipping repeated change block ending at offset %d", end)
                continue
            self._seen.add(block)
            self._completed.append(block)
            new_changes.append(block)
        if new_changes:
            LOGGER.debug(
                "Chunk completed %d change block(s); %d total", len(new_changes), len(self._completed)
            )
        return StreamingParseResult(changes=tuple(new_changes))

    def finish_stream(self) -> StreamingParseResult:
        """Close the session and return the sanitized final change set.

        Blocks whose search text no longer exists in the live document, and
        blocks that would not change anything, are dropped. Any unterminated
        trailing fragment in the buffer is ignored.
        """

        self._status = ParserStatus.FINISHED
        document_text = self._document_text()
        kept: list[ChangeBlock] = []
        stale = 0
        noop = 0
        for block in self._completed:
            if block.is_noop:
                noop += 1
                continue
            if document_text is not None and strip_cursor_marker(block.search) not in document_text:
                stale += 1
                continue
            kept.append(block)
        if stale or noop:
            LOGGER.debug("Sanitization dropped %d stale and %d no-op change block(s)", stale, noop)
        trailing = len(self._buffer) - self._scan_offset
        if trailing and "<change>" in self._buffer[self._scan_offset :]:
            LOGGER.debug("Discarding %d chars of unterminated trailing output", trailing)
        self._final = tuple(kept)
        return StreamingParseResult(
            changes=self._final,
            is_complete=True,
            rejected_stale=stale,
            rejected_noop=noop,
        )

    def reset(self) -> None:
        """Drop all session state; safe to call from any state."""

        self._clear()
        self._context = None
        self._status = ParserStatus.IDLE

    def get_buffer(self) -> str:
        return self._buffer

    def get_completed_changes(self) -> tuple[ChangeBlock, ...]:
        return tuple(self._completed)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _clear(self) -> None:
        self._buffer = ""
        self._scan_offset = 0
        self._completed = []
        self._seen = set()
        self._final = ()

    def _document_text(self) -> str | None:
        context = self._context
        if context is None or context.document is None:
            return None
        try:
            return context.document.get_text()
        except Exception:  # pragma: no cover - foreign accessors must not break parsing
            LOGGER.warning("Document text unavailable; skipping staleness check", exc_info=True)
            return None


__all__ = ["ParserStatus", "StreamingParseResult", "StreamingSuggestionParser"]
