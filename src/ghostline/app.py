"""Command line entry point for replaying recorded model output and inspecting prompts."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Mapping, Sequence, TextIO, get_args, get_type_hints

from .core.document import TextDocument
from .core.models import SuggestionContext
from .core.ranges import Position, Range
from .errors import ConfigurationError
from .orchestrator import SuggestionOrchestrator
from .profiles import SuggestionProfile, create_profile_from_settings
from .services.settings import SettingsStore, SuggestionSettings
from .utils import logging as logging_utils

_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}
_FALSE_VALUES = {"0", "false", "no", "off", "disabled"}
_LOGGER = logging.getLogger(__name__)


def configure_logging(debug: bool = False, *, force: bool = False) -> None:
    """Configure structured logging for the CLI."""

    level = logging.DEBUG if debug else logging.WARNING
    logging_utils.setup_logging(level, force=force)
    _LOGGER.debug("Logging configured (level=%s)", logging.getLevelName(level))


def load_settings(
    path: Path | None = None,
    *,
    store: SettingsStore | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> SuggestionSettings:
    """Load persisted settings or fall back to defaults."""

    active_store = store or SettingsStore(path)
    return active_store.load(overrides=overrides)


def main(argv: Sequence[str] | None = None, *, stdout: TextIO | None = None) -> int:
    """Entry point invoked by the `ghostline` console script."""

    out = stdout or sys.stdout
    args = _parse_cli_args(argv)
    if args.debug:
        configure_logging(True)

    settings_path = args.settings_path or os.environ.get("GHOSTLINE_SETTINGS_PATH")
    resolved_path = Path(settings_path).expanduser() if settings_path else None
    try:
        overrides: Dict[str, Any] = _coerce_cli_overrides(args.overrides or [])
    except ValueError as exc:
        print(f"Invalid --set override: {exc}", file=sys.stderr)
        return 2
    if args.strategy:
        overrides["strategy_id"] = args.strategy
    settings = load_settings(resolved_path, overrides=overrides or None)
    if settings.debug_logging and not args.debug:
        configure_logging(True)

    try:
        profile = _resolve_profile(settings, args.api_configs)
        orchestrator = SuggestionOrchestrator.from_settings(settings, profile=profile)
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    document_path = Path(args.document).expanduser()
    try:
        document_text = document_path.read_text(encoding="utf-8")
        response = Path(args.response).expanduser().read_text(encoding="utf-8") if args.command == "replay" else ""
    except OSError as exc:
        print(f"Cannot read input: {exc}", file=sys.stderr)
        return 2
    document = TextDocument(text=document_text, uri=str(document_path))
    cursor = Range.caret(Position(args.line, args.column))
    context = SuggestionContext(
        document=document,
        range=cursor,
        use_case=orchestrator.strategy.use_case,
        user_input=args.request,
    )

    if args.command == "prompt":
        payload: dict[str, Any] = {
            "strategy": orchestrator.strategy.strategy_id,
            "system": orchestrator.get_system_prompt(),
            "user": orchestrator.get_user_prompt(context),
        }
    else:
        payload = replay_response(orchestrator, context, response, chunk_size=args.chunk_size)
    json.dump(payload, out, indent=2, ensure_ascii=False)
    out.write("\n")
    return 0


def replay_response(
    orchestrator: SuggestionOrchestrator,
    context: SuggestionContext,
    response: str,
    *,
    chunk_size: int = 16,
) -> dict[str, Any]:
    """Stream ``response`` through ``orchestrator`` in ``chunk_size`` pieces."""

    size = max(1, int(chunk_size))
    orchestrator.initialize_streaming_parser(context)
    streamed: list[dict[str, Any]] = []
    for index, offset in enumerate(range(0, len(response), size)):
        result = orchestrator.process_streaming_chunk(response[offset : offset + size])
        for change in result.changes:
            streamed.append({"chunk": index, **change.as_payload()})
    final = orchestrator.finish_streaming_parser()
    return {
        "strategy": orchestrator.strategy.strategy_id,
        "streamed": streamed,
        "changes": [change.as_payload() for change in final.changes],
        "rejected_stale": final.rejected_stale,
        "rejected_noop": final.rejected_noop,
    }


def _parse_cli_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="ghostline",
        description="Replay recorded model output through the suggestion parser or print prompts.",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    parser.add_argument(
        "--settings-path",
        metavar="PATH",
        help="Override the default ~/.ghostline/settings.json path.",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        metavar="KEY=VALUE",
        action="append",
        default=[],
        help="Override persisted settings (repeatable).",
    )
    parser.add_argument("--strategy", metavar="ID", help="Prompt strategy id to use.")
    parser.add_argument(
        "--api-configs",
        metavar="PATH",
        help="JSON list of API profiles; when given, the suggestion profile is resolved from it.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def _add_document_args(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("document", help="Path of the document the suggestion targets.")
        sub.add_argument("--line", type=int, default=0, help="Zero-based cursor line.")
        sub.add_argument("--column", type=int, default=0, help="Zero-based cursor column.")
        sub.add_argument("--request", default=None, help="Instruction for explicit edit requests.")

    replay = subparsers.add_parser("replay", help="Feed a recorded model response through the parser.")
    _add_document_args(replay)
    replay.add_argument("response", help="Path of the recorded model response.")
    replay.add_argument("--chunk-size", type=int, default=16, help="Characters per streamed chunk.")

    prompt = subparsers.add_parser("prompt", help="Print the system and user prompts.")
    _add_document_args(prompt)
    return parser.parse_args(argv)


def _resolve_profile(settings: SuggestionSettings, api_configs_path: str | None) -> SuggestionProfile | None:
    """Resolve the suggestion profile from an API profile list, if one was supplied."""

    if not api_configs_path:
        return None
    path = Path(api_configs_path).expanduser()
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Cannot load API profiles from {path}: {exc}") from exc
    if not isinstance(payload, list) or not all(isinstance(item, dict) for item in payload):
        raise ConfigurationError(f"API profiles in {path} must be a JSON list of objects.")
    return create_profile_from_settings(settings, payload)


def _coerce_cli_overrides(items: Sequence[str]) -> Dict[str, Any]:
    """Parse repeated ``--set KEY=VALUE`` options into typed settings values."""

    hints = get_type_hints(SuggestionSettings)
    overrides: Dict[str, Any] = {}
    for entry in items:
        key, sep, raw_value = entry.partition("=")
        key = key.strip()
        if not sep:
            raise ValueError(f"Override '{entry}' must use KEY=VALUE syntax.")
        if not key:
            raise ValueError("Override is missing a field name.")
        if key not in hints:
            raise ValueError(f"Unknown setting '{key}'.")
        overrides[key] = _coerce_value(hints[key], raw_value.strip())
    return overrides


def _coerce_value(annotation: Any, raw_value: str) -> Any:
    accepted = set(get_args(annotation)) or {annotation}
    if type(None) in accepted and raw_value.lower() in {"", "none", "null"}:
        return None
    if bool in accepted:
        return _parse_bool(raw_value)
    if int in accepted:
        return int(raw_value, 10)
    return raw_value


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"Cannot coerce '{value}' to a boolean.")


if __name__ == "__main__":  # pragma: no cover - manual invocation
    raise SystemExit(main())
