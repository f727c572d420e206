"""Suggestion settings and their JSON store."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Callable, Dict, Mapping

__all__ = ["SuggestionSettings", "SettingsStore", "default_settings_path"]

LOGGER = logging.getLogger(__name__)

_SETTINGS_FILE = Path.home() / ".ghostline" / "settings.json"
_SETTINGS_VERSION = 1
_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}


def _env_text(raw: str) -> str:
    return raw.strip()


def _env_flag(raw: str) -> bool:
    return raw.strip().lower() in _TRUE_VALUES


def _env_count(raw: str) -> int:
    return int(raw.strip(), 10)


def _stored_text(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"expected text, got {type(value).__name__}")
    return value


def _stored_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return _env_flag(value)
    raise ValueError(f"expected a boolean, got {type(value).__name__}")


def _stored_count(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("expected an integer, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        return _env_count(value)
    raise ValueError(f"expected an integer, got {type(value).__name__}")


# Environment variable -> (settings field, parser). Parsers raise ValueError on bad input.
_ENV_OVERRIDES: Mapping[str, tuple[str, Callable[[str], Any]]] = {
    "GHOSTLINE_STRATEGY": ("strategy_id", _env_text),
    "GHOSTLINE_API_CONFIG": ("api_config_id", _env_text),
    "GHOSTLINE_TOKEN_MODEL": ("token_model", _env_text),
    "GHOSTLINE_DEBUG_LOGGING": ("debug_logging", _env_flag),
    "GHOSTLINE_MAX_CONTEXT_SNIPPETS": ("max_context_snippets", _env_count),
    "GHOSTLINE_CURSOR_WINDOW_LINES": ("cursor_window_lines", _env_count),
    "GHOSTLINE_CONTEXT_TOKEN_BUDGET": ("context_token_budget", _env_count),
}

# Settings field -> coercer for values read from the file or passed at runtime.
_FIELD_COERCERS: Mapping[str, Callable[[Any], Any]] = {
    "strategy_id": _stored_text,
    "api_config_id": _stored_text,
    "token_model": _stored_text,
    "debug_logging": _stored_flag,
    "max_context_snippets": _stored_count,
    "cursor_window_lines": _stored_count,
    "context_token_budget": _stored_count,
}
_NULLABLE_FIELDS = frozenset({"api_config_id", "token_model"})


@dataclass(slots=True)
class SuggestionSettings:
    """User-configurable knobs for prompt building and parsing."""

    strategy_id: str = "xml-default"
    api_config_id: str | None = None
    max_context_snippets: int = 3
    cursor_window_lines: int = 5
    context_token_budget: int = 2_048
    token_model: str | None = None
    debug_logging: bool = False

    def strategy_options(self) -> dict[str, int]:
        """Return the keyword arguments shared by every prompt strategy."""

        return {
            "max_context_snippets": max(0, int(self.max_context_snippets)),
            "cursor_window_lines": max(0, int(self.cursor_window_lines)),
            "context_token_budget": max(0, int(self.context_token_budget)),
        }


def default_settings_path() -> Path:
    return _SETTINGS_FILE


class SettingsStore:
    """Reads and writes :class:`SuggestionSettings` as a JSON document.

    Precedence on load is file, then ``GHOSTLINE_*`` environment variables,
    then the runtime overrides passed to :meth:`load`.
    """

    def __init__(self, path: Path | str | None = None) -> None:
        self._path = Path(path) if path is not None else _SETTINGS_FILE

    @property
    def path(self) -> Path:
        return self._path

    def load(self, *, overrides: Mapping[str, Any] | None = None) -> SuggestionSettings:
        settings = self._from_payload(self._read_payload())
        LOGGER.debug("Settings loaded from %s (strategy=%s)", self._path, settings.strategy_id)
        settings = self._merge(settings, self._environment_overrides(), source="environment")
        if overrides:
            settings = self._merge(settings, overrides, source="runtime")
        return settings

    def save(self, settings: SuggestionSettings) -> Path:
        """Write ``settings`` through a temporary file so readers never see a partial file."""

        document = {**asdict(settings), "version": _SETTINGS_VERSION}
        self._path.parent.mkdir(parents=True, exist_ok=True)
        staging = self._path.with_suffix(".tmp")
        staging.write_text(json.dumps(document, indent=2, sort_keys=True), encoding="utf-8")
        staging.replace(self._path)
        LOGGER.debug("Settings saved to %s", self._path)
        return self._path

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _read_payload(self) -> Dict[str, Any]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            LOGGER.warning("Ignoring settings file %s: invalid JSON (%s)", self._path, exc)
            return {}
        if not isinstance(payload, dict):
            LOGGER.warning("Ignoring settings file %s: expected a JSON object", self._path)
            return {}
        return payload

    def _from_payload(self, payload: Mapping[str, Any]) -> SuggestionSettings:
        known = _typed_fields(_known_fields(payload), source=str(self._path))
        return SuggestionSettings(**known)

    @staticmethod
    def _merge(settings: SuggestionSettings, overrides: Mapping[str, Any], *, source: str) -> SuggestionSettings:
        present = {key: value for key, value in _known_fields(overrides).items() if value is not None}
        changes = _typed_fields(present, source=source)
        if not changes:
            return settings
        LOGGER.debug("Applying %s settings overrides: %s", source, sorted(changes))
        return replace(settings, **changes)

    @staticmethod
    def _environment_overrides() -> Dict[str, Any]:
        found: Dict[str, Any] = {}
        for env_name, (field_name, parse) in _ENV_OVERRIDES.items():
            raw = os.environ.get(env_name)
            if raw is None:
                continue
            try:
                found[field_name] = parse(raw)
            except ValueError:
                LOGGER.warning("Ignoring environment override %s=%r: not a valid value", env_name, raw)
        return found


def _known_fields(payload: Mapping[str, Any]) -> Dict[str, Any]:
    allowed = {field.name for field in fields(SuggestionSettings)}
    return {key: value for key, value in payload.items() if key in allowed}


def _typed_fields(values: Mapping[str, Any], *, source: str) -> Dict[str, Any]:
    """Coerce each value to its field type, dropping the ones that do not fit."""

    typed: Dict[str, Any] = {}
    for key, value in values.items():
        if value is None:
            if key in _NULLABLE_FIELDS:
                typed[key] = None
            continue
        try:
            typed[key] = _FIELD_COERCERS[key](value)
        except ValueError as exc:
            LOGGER.warning("Ignoring setting %s=%r from %s: %s", key, value, source, exc)
    return typed
