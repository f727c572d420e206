"""Exceptions surfaced to callers of the suggestion core."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when no usable strategy or API profile is configured.

    These failures need user action, so they are never recovered from inside
    the core.
    """


__all__ = ["ConfigurationError"]
