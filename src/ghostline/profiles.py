"""Resolve which API configuration and strategy a suggestion session uses."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from .errors import ConfigurationError
from .prompts.registry import DEFAULT_STRATEGY_ID, is_valid_strategy_id
from .services.settings import SuggestionSettings

LOGGER = logging.getLogger(__name__)

# Providers usable for suggestions, in auto-selection priority order.
SUPPORTED_DEFAULT_PROVIDERS: tuple[str, ...] = ("mistral", "kilocode", "openrouter")

NO_PROFILE_MESSAGE = "No valid API profiles found for suggestions. Please configure an API provider."


@dataclass(slots=True, frozen=True)
class ApiConfig:
    """Summary of a configured model provider profile."""

    id: str
    name: str
    api_provider: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> ApiConfig:
        return cls(
            id=str(payload.get("id") or ""),
            name=str(payload.get("name") or ""),
            api_provider=str(payload.get("api_provider") or payload.get("apiProvider") or ""),
        )


@dataclass(slots=True, frozen=True)
class SuggestionProfile:
    """The API configuration and prompt strategy bound to a session."""

    id: str
    name: str
    api_config_id: str
    strategy_id: str


def resolve_strategy_id(strategy_id: str | None) -> str:
    """Return ``strategy_id`` when registered, otherwise the default id."""

    if not strategy_id:
        return DEFAULT_STRATEGY_ID
    if not is_valid_strategy_id(strategy_id):
        LOGGER.warning("Invalid strategy ID: %s, falling back to default", strategy_id)
        return DEFAULT_STRATEGY_ID
    return strategy_id


def create_profile_from_settings(
    settings: SuggestionSettings | None,
    api_configs: Iterable[ApiConfig | Mapping[str, Any]],
) -> SuggestionProfile:
    """Pick an API configuration for suggestions.

    An explicitly configured ``api_config_id`` wins when it points at a
    supported provider; otherwise the first supported provider in
    :data:`SUPPORTED_DEFAULT_PROVIDERS` order is used.

    Raises:
        ConfigurationError: when no configuration uses a supported provider.
    """

    active = settings or SuggestionSettings()
    strategy_id = resolve_strategy_id(active.strategy_id)
    configs = [cfg if isinstance(cfg, ApiConfig) else ApiConfig.from_payload(cfg) for cfg in api_configs]
    supported = [cfg for cfg in configs if cfg.api_provider in SUPPORTED_DEFAULT_PROVIDERS]

    selected: ApiConfig | None = None
    if active.api_config_id:
        selected = next((cfg for cfg in supported if cfg.id == active.api_config_id), None)
        if selected is None:
            LOGGER.warning("Configured API profile %s is missing or unsupported", active.api_config_id)
    if selected is None:
        for provider in SUPPORTED_DEFAULT_PROVIDERS:
            selected = next((cfg for cfg in supported if cfg.api_provider == provider), None)
            if selected is not None:
                break
    if selected is None:
        raise ConfigurationError(NO_PROFILE_MESSAGE)

    LOGGER.debug("Using API profile %s (%s) with strategy %s", selected.id, selected.api_provider, strategy_id)
    return SuggestionProfile(
        id="default",
        name=f"Auto-Selected ({selected.api_provider})",
        api_config_id=selected.id,
        strategy_id=strategy_id,
    )


__all__ = [
    "ApiConfig",
    "NO_PROFILE_MESSAGE",
    "SUPPORTED_DEFAULT_PROVIDERS",
    "SuggestionProfile",
    "create_profile_from_settings",
    "resolve_strategy_id",
]
