"""Context ranking and budgeting for outbound prompts."""

from .budget import fill_prompt_with_snippets
from .ranking import RankedSnippet, deduplicate_snippets, get_symbols_for_snippet, rank_snippets, similarity
from .tokens import CHARS_PER_TOKEN, TiktokenCounter, estimate_token_count, resolve_estimator

__all__ = [
    "CHARS_PER_TOKEN",
    "RankedSnippet",
    "TiktokenCounter",
    "deduplicate_snippets",
    "estimate_token_count",
    "fill_prompt_with_snippets",
    "get_symbols_for_snippet",
    "rank_snippets",
    "resolve_estimator",
    "similarity",
]
