"""Service layer helpers (settings, telemetry)."""

from .settings import SettingsStore, SuggestionSettings
from .telemetry import emit, register_event_listener, unregister_event_listener

__all__ = [
    "SettingsStore",
    "SuggestionSettings",
    "emit",
    "register_event_listener",
    "unregister_event_listener",
]
