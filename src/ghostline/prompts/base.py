"""Shared contract and context-assembly helpers for prompt strategies."""

from __future__ import annotations

import logging
from typing import ClassVar, Protocol, runtime_checkable

from ..constants import CURSOR_MARKER
from ..context.budget import fill_prompt_with_snippets
from ..context.ranking import rank_snippets
from ..context.tokens import TokenEstimator, estimate_token_count
from ..core.models import Operation, SuggestionContext, UseCaseType
from ..core.ranges import range_after, range_before, window_around

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_CONTEXT_SNIPPETS = 3
DEFAULT_CURSOR_WINDOW_LINES = 5
DEFAULT_CONTEXT_TOKEN_BUDGET = 2_048


@runtime_checkable
class PromptStrategy(Protocol):
    """Capabilities every prompt strategy exposes."""

    name: ClassVar[str]
    strategy_id: ClassVar[str]
    use_case: ClassVar[UseCaseType]

    def can_handle(self, context: SuggestionContext) -> bool:
        ...

    def get_system_instructions(self) -> str:
        ...

    def get_user_prompt(self, context: SuggestionContext) -> str:
        ...


def base_system_instructions() -> str:
    """Describe the change-block response format shared by all strategies."""

    return f"""You are an expert programming assistant that proposes precise edits to the user's code.

## Response Format
Answer ONLY with one or more change blocks, each shaped exactly like this:

<change>
  <search><![CDATA[exact existing code to find]]></search>
  <replace><![CDATA[code that replaces it]]></replace>
</change>

Rules for change blocks:
- The <search> text must match the current document character for character, including indentation.
- Always wrap both the search and the replacement text in CDATA sections.
- Keep search blocks short but unique enough to locate a single position.
- The marker {CURSOR_MARKER} shows where the cursor is; it is not part of the file.
- Do not add explanations outside change blocks.

"""


def split_at_cursor(context: SuggestionContext) -> tuple[str, str]:
    """Return the document text before and after the cursor."""

    document = context.document
    cursor = context.range
    if document is None or cursor is None:
        return "", ""
    position = cursor.start
    before = document.get_text(range_before(position))
    after = document.get_text(range_after(position, document.line_count))
    return before, after


def cursor_window(context: SuggestionContext, lines: int = DEFAULT_CURSOR_WINDOW_LINES) -> str:
    """Return ``lines`` lines of text around the cursor for similarity ranking."""

    document = context.document
    cursor = context.range
    if document is None or cursor is None:
        return ""
    before, after = window_around(cursor.start, document.line_count, lines=lines)
    return document.get_text(before) + document.get_text(after)


def collect_operations(context: SuggestionContext) -> list[Operation]:
    """Gather current-file then cross-file operations that carry content."""

    operations: list[Operation] = []
    current_uri = getattr(context.document, "uri", "") if context.document is not None else ""
    for op in context.recent_operations or ():
        if op.content:
            operations.append(
                Operation(content=op.content, description=op.description, filepath=current_uri, is_global=False)
            )
    for op in context.global_recent_operations or ():
        if op.content:
            operations.append(
                Operation(content=op.content, description=op.description, filepath=op.filepath, is_global=True)
            )
    return operations


def format_operation(op: Operation, score: float) -> str:
    relevance = round(score * 100)
    if op.is_global:
        filename = op.filepath.rsplit("/", 1)[-1] or op.filepath
        return f"// Recent in {filename}: {op.description} (relevance: {relevance}%)\n{op.content}"
    return f"// Recent: {op.description} (relevance: {relevance}%)\n{op.content}"


def build_recent_operations_context(
    context: SuggestionContext,
    *,
    max_snippets: int = DEFAULT_MAX_CONTEXT_SNIPPETS,
    window_lines: int = DEFAULT_CURSOR_WINDOW_LINES,
    token_budget: int = DEFAULT_CONTEXT_TOKEN_BUDGET,
    estimate: TokenEstimator = estimate_token_count,
) -> str:
    """Rank recent operations against the cursor window and format the best ones.

    Returns an empty string when there is no cursor or nothing to include;
    otherwise the formatted entries followed by a blank line.
    """

    if not context.has_cursor:
        return ""
    operations = collect_operations(context)
    if not operations:
        return ""

    window = cursor_window(context, window_lines)
    ranked = rank_snippets(operations, window)
    selected = fill_prompt_with_snippets(ranked, token_budget, estimate)[: max(0, max_snippets)]

    by_key: dict[tuple[str, str], Operation] = {}
    for op in operations:
        by_key.setdefault((op.content, op.filepath), op)
    parts = [format_operation(by_key[(item.content, item.filepath)], item.score) for item in selected]
    LOGGER.debug("Selected %d of %d recent operations for prompt context", len(parts), len(operations))
    if not parts:
        return ""
    return "\n\n".join(parts) + "\n\n"


__all__ = [
    "DEFAULT_CONTEXT_TOKEN_BUDGET",
    "DEFAULT_CURSOR_WINDOW_LINES",
    "DEFAULT_MAX_CONTEXT_SNIPPETS",
    "PromptStrategy",
    "base_system_instructions",
    "build_recent_operations_context",
    "collect_operations",
    "cursor_window",
    "format_operation",
    "split_at_cursor",
]
