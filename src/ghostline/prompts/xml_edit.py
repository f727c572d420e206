"""General edit-instruction strategy answering with ``<change>`` blocks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from ..constants import CURSOR_MARKER, NO_CONTEXT_PROMPT
from ..context.tokens import TokenEstimator, estimate_token_count
from ..core.models import SuggestionContext, UseCaseType
from .base import (
    DEFAULT_CONTEXT_TOKEN_BUDGET,
    DEFAULT_CURSOR_WINDOW_LINES,
    DEFAULT_MAX_CONTEXT_SNIPPETS,
    base_system_instructions,
    build_recent_operations_context,
    split_at_cursor,
)

DEFAULT_REQUEST = "Complete or improve the code at the cursor position."


@dataclass(slots=True, frozen=True)
class XmlEditStrategy:
    """Shows the whole document with a cursor marker and asks for edits."""

    name: ClassVar[str] = "XML Edit"
    strategy_id: ClassVar[str] = "xml-default"
    use_case: ClassVar[UseCaseType] = UseCaseType.USER_REQUEST

    max_context_snippets: int = DEFAULT_MAX_CONTEXT_SNIPPETS
    cursor_window_lines: int = DEFAULT_CURSOR_WINDOW_LINES
    context_token_budget: int = DEFAULT_CONTEXT_TOKEN_BUDGET
    estimate: TokenEstimator = field(default=estimate_token_count, compare=False, repr=False)

    def can_handle(self, context: SuggestionContext) -> bool:
        if context.user_input:
            return True
        return context.use_case in (None, UseCaseType.USER_REQUEST)

    def get_system_instructions(self) -> str:
        return base_system_instructions() + """## Your Task
Apply the user's request to the current document.

## Important Rules
1. Only change what the request requires; leave unrelated code untouched.
2. Use several <change> blocks for edits in different places.
3. Preserve the existing code style, naming and indentation.
4. Never include the cursor marker in a <replace> block."""

    def get_user_prompt(self, context: SuggestionContext) -> str:
        if not context.has_cursor:
            return NO_CONTEXT_PROMPT
        before, after = split_at_cursor(context)
        recent = build_recent_operations_context(
            context,
            max_snippets=self.max_context_snippets,
            window_lines=self.cursor_window_lines,
            token_budget=self.context_token_budget,
            estimate=self.estimate,
        )
        request = (context.user_input or "").strip() or DEFAULT_REQUEST
        uri = getattr(context.document, "uri", "") or "untitled"
        sections = []
        if recent:
            sections.append(f"## Recent Changes\n{recent}")
        sections.append(f"## Current Document: {uri}\n<<<\n{before}{CURSOR_MARKER}{after}\n>>>")
        sections.append(f"## Request\n{request}")
        return "\n\n".join(sections)


__all__ = ["DEFAULT_REQUEST", "XmlEditStrategy"]
