"""Single integration surface between the editor layer and the suggestion core."""

from __future__ import annotations

import logging

from .context.tokens import resolve_estimator
from .core.models import SuggestionContext
from .profiles import SuggestionProfile
from .prompts.base import PromptStrategy
from .prompts.registry import create_strategy
from .services import telemetry as telemetry_service
from .services.settings import SuggestionSettings
from .suggestions.change_blocks import ChangeBlock
from .suggestions.streaming_parser import StreamingParseResult, StreamingSuggestionParser

LOGGER = logging.getLogger(__name__)


class SuggestionOrchestrator:
    """Binds one prompt strategy to one streaming parser session.

    The orchestrator owns its parser exclusively. Callers drive a request by
    building prompts, initializing the parser with the same context, feeding
    model chunks in order and finishing (or resetting on cancellation).
    """

    def __init__(self, strategy: PromptStrategy | None = None, *, parser: StreamingSuggestionParser | None = None) -> None:
        self._strategy = strategy if strategy is not None else create_strategy()
        self._parser = parser if parser is not None else StreamingSuggestionParser()

    @classmethod
    def from_settings(
        cls,
        settings: SuggestionSettings | None = None,
        *,
        profile: SuggestionProfile | None = None,
    ) -> SuggestionOrchestrator:
        """Build an orchestrator for the strategy named by ``profile`` or ``settings``.

        ``profile`` comes from :func:`ghostline.profiles.create_profile_from_settings`
        and already carries a validated strategy id. Without one, the settings
        id is used as is.

        Raises:
            ConfigurationError: when the strategy id is not registered.
        """

        active = settings or SuggestionSettings()
        strategy_id = profile.strategy_id if profile is not None else active.strategy_id
        strategy = create_strategy(
            strategy_id,
            estimate=resolve_estimator(active.token_model),
            **active.strategy_options(),
        )
        LOGGER.debug("Orchestrator configured with strategy %s", strategy.name)
        return cls(strategy)

    @property
    def strategy(self) -> PromptStrategy:
        return self._strategy

    @property
    def parser(self) -> StreamingSuggestionParser:
        return self._parser

    def get_system_prompt(self) -> str:
        return self._strategy.get_system_instructions()

    def get_user_prompt(self, context: SuggestionContext) -> str:
        return self._strategy.get_user_prompt(context)

    def initialize_streaming_parser(self, context: SuggestionContext) -> None:
        self._parser.initialize(context)

    def process_streaming_chunk(self, chunk: str) -> StreamingParseResult:
        """Feed one model chunk and return the change blocks it completed."""

        return self._parser.process_chunk(chunk)

    def finish_streaming_parser(self) -> StreamingParseResult:
        """Finish the session and return the sanitized change set."""

        emitted = len(self._parser.get_completed_changes())
        result = self._parser.finish_stream()
        telemetry_service.emit(
            telemetry_service.STREAM_FINISHED_EVENT,
            telemetry_service.stream_finished_payload(
                self._strategy.strategy_id,
                emitted=emitted,
                accepted=len(result.changes),
                rejected_stale=result.rejected_stale,
                rejected_noop=result.rejected_noop,
                buffer_chars=len(self._parser.get_buffer()),
            ),
        )
        return result

    def reset_streaming_parser(self) -> None:
        self._parser.reset()

    def get_streaming_buffer(self) -> str:
        """Return the raw text received so far (diagnostics only)."""

        return self._parser.get_buffer()

    def get_streaming_completed_changes(self) -> tuple[ChangeBlock, ...]:
        return self._parser.get_completed_changes()


__all__ = ["SuggestionOrchestrator"]
