"""Prompt strategies that turn a suggestion context into model prompts."""

from .base import PromptStrategy, base_system_instructions, build_recent_operations_context
from .fim_codestral import FimCodestralStrategy
from .registry import DEFAULT_STRATEGY_ID, create_strategy, default_strategies, select_strategy
from .xml_edit import XmlEditStrategy

__all__ = [
    "DEFAULT_STRATEGY_ID",
    "FimCodestralStrategy",
    "PromptStrategy",
    "XmlEditStrategy",
    "base_system_instructions",
    "build_recent_operations_context",
    "create_strategy",
    "default_strategies",
    "select_strategy",
]
