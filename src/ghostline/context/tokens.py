"""Token estimation used when budgeting prompt context."""

from __future__ import annotations

import logging
import math
from typing import Any, Callable

import tiktoken

LOGGER = logging.getLogger(__name__)

# Rough characters per token for code and English prose.
CHARS_PER_TOKEN = 4

TokenEstimator = Callable[[str], int]


def estimate_token_count(text: str) -> int:
    """Estimate tokens as ``ceil(len(text) / 4)``; empty text costs nothing."""

    if not text:
        return 0
    return math.ceil(len(text) / CHARS_PER_TOKEN)


class TiktokenCounter:
    """Exact token counter backed by ``tiktoken``.

    Instances are callable so they can be passed anywhere a
    :data:`TokenEstimator` is accepted.
    """

    def __init__(self, model_name: str, *, encoding_name: str | None = None) -> None:
        if not model_name:
            raise ValueError("model_name is required for TiktokenCounter")
        self.model_name = model_name
        self._encoding = self._load_encoding(model_name, encoding_name)

    def __call__(self, text: str) -> int:
        return self.count(text)

    def count(self, text: str) -> int:
        if not text:
            return 0
        return len(self._encoding.encode(text, disallowed_special=()))

    @staticmethod
    def _load_encoding(model_name: str, encoding_name: str | None) -> Any:
        if encoding_name:
            return tiktoken.get_encoding(encoding_name)
        try:
            return tiktoken.encoding_for_model(model_name)
        except KeyError:
            LOGGER.debug("Falling back to cl100k_base encoding for model %s", model_name)
            return tiktoken.get_encoding("cl100k_base")


def resolve_estimator(token_model: str | None = None) -> TokenEstimator:
    """Return a tokenizer-backed estimator for ``token_model`` or the heuristic."""

    if not token_model:
        return estimate_token_count
    return TiktokenCounter(token_model)


__all__ = ["CHARS_PER_TOKEN", "TiktokenCounter", "TokenEstimator", "estimate_token_count", "resolve_estimator"]
