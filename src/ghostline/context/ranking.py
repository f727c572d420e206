"""Jaccard-similarity ranking of candidate context snippets."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Protocol, Sequence

__all__ = [
    "SYMBOL_SPLIT_RE",
    "RankedSnippet",
    "Snippet",
    "deduplicate_snippets",
    "get_symbols_for_snippet",
    "rank_snippets",
    "similarity",
]

SYMBOL_SPLIT_RE = re.compile(r"[\s.,/#!$%^&*;:{}=\-_`~()\[\]]")


class Snippet(Protocol):
    content: str
    filepath: str


@dataclass(slots=True, frozen=True)
class RankedSnippet:
    """Snippet annotated with its similarity to the cursor window."""

    content: str
    filepath: str
    score: float


def get_symbols_for_snippet(snippet: str) -> set[str]:
    """Split ``snippet`` on code delimiters into a case-preserving symbol set."""

    if not snippet:
        return set()
    return {symbol for symbol in SYMBOL_SPLIT_RE.split(snippet) if symbol}


def similarity(a: str, b: str) -> float:
    """Return the Jaccard similarity of the symbol sets of ``a`` and ``b``.

    The score is ``|A & B| / |A | B|`` and defined as ``0.0`` when both sets
    are empty.
    """

    a_symbols = get_symbols_for_snippet(a)
    b_symbols = get_symbols_for_snippet(b)
    union = len(a_symbols | b_symbols)
    if union == 0:
        return 0.0
    return len(a_symbols & b_symbols) / union


def rank_snippets(snippets: Iterable[Snippet], window: str) -> list[RankedSnippet]:
    """Score every snippet against ``window``, highest score first.

    Ties keep their input order.
    """

    ranked = [
        RankedSnippet(content=snippet.content, filepath=snippet.filepath, score=similarity(snippet.content, window))
        for snippet in snippets
    ]
    return sorted(ranked, key=lambda item: item.score, reverse=True)


def deduplicate_snippets(snippets: Sequence[RankedSnippet]) -> list[RankedSnippet]:
    """Keep only the best-scoring snippet for each filepath.

    Files appear in the order they are first seen; on equal scores the earlier
    snippet wins.
    """

    best: dict[str, RankedSnippet] = {}
    for snippet in snippets:
        current = best.get(snippet.filepath)
        if current is None or snippet.score > current.score:
            best[snippet.filepath] = snippet
    return list(best.values())
