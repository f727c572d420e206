"""In-process telemetry for suggestion sessions.

Events are plain dictionaries delivered synchronously to registered
listeners. Nothing is persisted or sent over the network; hosts that want
that register a listener and forward the payloads themselves.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Mapping

LOGGER = logging.getLogger(__name__)

STREAM_FINISHED_EVENT = "suggestion_stream_finished"

TelemetryListener = Callable[[dict[str, Any]], None]

_LISTENERS: dict[str, list[TelemetryListener]] = {}


def register_event_listener(event_name: str, callback: TelemetryListener) -> None:
    """Subscribe ``callback`` to ``event_name``; registering twice is a no-op."""

    if not event_name or callback is None:
        return
    subscribers = _LISTENERS.setdefault(event_name, [])
    if callback not in subscribers:
        subscribers.append(callback)


def unregister_event_listener(event_name: str, callback: TelemetryListener) -> None:
    subscribers = _LISTENERS.get(event_name, [])
    if callback in subscribers:
        subscribers.remove(callback)
    if not subscribers:
        _LISTENERS.pop(event_name, None)


@contextmanager
def listening(event_name: str, callback: TelemetryListener) -> Iterator[TelemetryListener]:
    """Keep ``callback`` subscribed for the duration of a ``with`` block."""

    register_event_listener(event_name, callback)
    try:
        yield callback
    finally:
        unregister_event_listener(event_name, callback)


def stream_finished_payload(
    strategy_id: str,
    *,
    emitted: int,
    accepted: int,
    rejected_stale: int,
    rejected_noop: int,
    buffer_chars: int,
) -> dict[str, Any]:
    """Build the payload of :data:`STREAM_FINISHED_EVENT`."""

    return {
        "strategy": strategy_id,
        "emitted": emitted,
        "accepted": accepted,
        "rejected_stale": rejected_stale,
        "rejected_noop": rejected_noop,
        "buffer_chars": buffer_chars,
    }


def emit(event_name: str, payload: Mapping[str, Any] | None = None) -> None:
    """Deliver ``payload`` to every listener of ``event_name``.

    Each listener receives its own copy with an ``event`` key added. A failing
    listener is logged and skipped so the session that emitted keeps going.
    """

    if not event_name:
        return
    event = {"event": event_name, **(payload or {})}
    LOGGER.debug("Telemetry %s: %s", event_name, event)
    for callback in tuple(_LISTENERS.get(event_name, ())):
        try:
            callback(dict(event))
        except Exception:  # pragma: no cover - listeners must not break emitters
            LOGGER.warning("Telemetry listener %r failed for %s", callback, event_name, exc_info=True)


__all__ = [
    "STREAM_FINISHED_EVENT",
    "TelemetryListener",
    "emit",
    "listening",
    "register_event_listener",
    "stream_finished_payload",
    "unregister_event_listener",
]
