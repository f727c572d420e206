"""Fill-in-the-middle strategy using the Codestral ``[SUFFIX]``/``[PREFIX]`` layout."""

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

SUFFIX_MARKER = "[SUFFIX]"
PREFIX_MARKER = "[PREFIX]"


@dataclass(slots=True, frozen=True)
class FimCodestralStrategy:
    """Builds ``[SUFFIX]<after>[PREFIX]<context><before><cursor>`` prompts."""

    name: ClassVar[str] = "FIM Codestral"
    strategy_id: ClassVar[str] = "fim-codestral"
    use_case: ClassVar[UseCaseType] = UseCaseType.AUTO_TRIGGER

    max_context_snippets: int = DEFAULT_MAX_CONTEXT_SNIPPETS
    cursor_window_lines: int = DEFAULT_CURSOR_WINDOW_LINES
    context_token_budget: int = DEFAULT_CONTEXT_TOKEN_BUDGET
    estimate: TokenEstimator = field(default=estimate_token_count, compare=False, repr=False)

    def can_handle(self, context: SuggestionContext) -> bool:
        return context.has_cursor and context.use_case in (None, UseCaseType.AUTO_TRIGGER)

    def get_system_instructions(self) -> str:
        return base_system_instructions() + f"""You are an AI assistant specialized in code completion using Fill-In-the-Middle (FIM) format.

## FIM Format Understanding
The user prompt follows the Codestral FIM format:
- {SUFFIX_MARKER} marker followed by code that comes AFTER the cursor
- {PREFIX_MARKER} marker followed by code that comes BEFORE the cursor
- The {CURSOR_MARKER} marker indicates the exact cursor position

## Your Task
Generate code to fill in at the cursor position. The code should:
1. Fit naturally between the prefix and suffix
2. Follow the existing code style and patterns
3. Be syntactically correct
4. Complete the intended functionality
5. Be minimal - only complete what's necessary

## Important Rules
1. Your <search> block MUST include the {CURSOR_MARKER} marker
2. Include sufficient context around the cursor to uniquely identify the location
3. The <replace> block should contain the complete text including your completion
4. Generate only ONE <change> block
5. Focus on the immediate completion need
6. Consider common code patterns and idioms
7. Maintain consistency with surrounding code"""

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
        return f"{SUFFIX_MARKER}{after}{PREFIX_MARKER}{recent}{before}{CURSOR_MARKER}"


__all__ = ["FimCodestralStrategy", "PREFIX_MARKER", "SUFFIX_MARKER"]
