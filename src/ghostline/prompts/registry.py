"""Lookup and selection of prompt strategies by id or by context."""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Sequence

from ..core.models import SuggestionContext
from ..errors import ConfigurationError
from .base import PromptStrategy
from .fim_codestral import FimCodestralStrategy
from .xml_edit import XmlEditStrategy

LOGGER = logging.getLogger(__name__)

DEFAULT_STRATEGY_ID = XmlEditStrategy.strategy_id

STRATEGY_FACTORIES: Mapping[str, Callable[..., PromptStrategy]] = {
    XmlEditStrategy.strategy_id: XmlEditStrategy,
    FimCodestralStrategy.strategy_id: FimCodestralStrategy,
}


def is_valid_strategy_id(strategy_id: str | None) -> bool:
    return bool(strategy_id) and strategy_id in STRATEGY_FACTORIES


def available_strategy_ids() -> tuple[str, ...]:
    return tuple(STRATEGY_FACTORIES)


def create_strategy(strategy_id: str | None = None, **options: Any) -> PromptStrategy:
    """Instantiate the strategy registered under ``strategy_id``.

    ``None`` selects :data:`DEFAULT_STRATEGY_ID`. Unknown ids raise
    :class:`ConfigurationError`.
    """

    key = strategy_id or DEFAULT_STRATEGY_ID
    factory = STRATEGY_FACTORIES.get(key)
    if factory is None:
        choices = ", ".join(available_strategy_ids())
        raise ConfigurationError(f"Unknown prompt strategy '{key}'. Choose one of: {choices}.")
    return factory(**options)


def default_strategies(**options: Any) -> list[PromptStrategy]:
    """Return one instance of every registered strategy, FIM first."""

    return [FimCodestralStrategy(**options), XmlEditStrategy(**options)]


def select_strategy(context: SuggestionContext, strategies: Sequence[PromptStrategy]) -> PromptStrategy:
    """Return the first strategy whose ``can_handle`` accepts ``context``."""

    for strategy in strategies:
        if strategy.can_handle(context):
            LOGGER.debug("Selected prompt strategy %s", strategy.name)
            return strategy
    raise ConfigurationError(
        "No prompt strategy can handle this request. Check the configured strategy and the suggestion trigger."
    )


__all__ = [
    "DEFAULT_STRATEGY_ID",
    "STRATEGY_FACTORIES",
    "available_strategy_ids",
    "create_strategy",
    "default_strategies",
    "is_valid_strategy_id",
    "select_strategy",
]
