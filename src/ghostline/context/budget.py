"""Greedy token-budgeted selection over ranked snippets."""

from __future__ import annotations

import logging
from typing import Sequence, TypeVar

from .ranking import RankedSnippet
from .tokens import TokenEstimator, estimate_token_count

LOGGER = logging.getLogger(__name__)

SnippetT = TypeVar("SnippetT", bound=RankedSnippet)


def fill_prompt_with_snippets(
    snippets: Sequence[SnippetT],
    max_tokens: int,
    estimate: TokenEstimator = estimate_token_count,
) -> list[SnippetT]:
    """Admit snippets in order while they fit in ``max_tokens``.

    A snippet that does not fit is skipped and the walk continues, so a later
    cheaper snippet can still be admitted. The accepted subset keeps the input
    order.
    """

    remaining = int(max_tokens)
    kept: list[SnippetT] = []
    for snippet in snippets:
        cost = estimate(snippet.content)
        if remaining - cost >= 0:
            remaining -= cost
            kept.append(snippet)
        else:
            LOGGER.debug(
                "Skipping %s snippet costing %d tokens (%d left)",
                getattr(snippet, "filepath", None) or "?",
                cost,
                remaining,
            )
    return kept


__all__ = ["fill_prompt_with_snippets"]
