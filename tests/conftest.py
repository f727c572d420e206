"""Shared pytest fixtures."""

from __future__ import annotations

import os

import pytest

from ghostline.core.document import TextDocument
from ghostline.core.models import Operation, SuggestionContext, UseCaseType
from ghostline.core.ranges import Position, Range
from ghostline.services import telemetry as telemetry_service

SAMPLE_SOURCE = """import math

def area(radius):
    return math.pi * radius ** 2

def circumference(radius):
    return 2 * math.pi * radius
"""


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path):
    for name in list(os.environ):
        if name.startswith("GHOSTLINE_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("GHOSTLINE_LOG_DIR", str(tmp_path / "logs"))


@pytest.fixture
def sample_document() -> TextDocument:
    return TextDocument(text=SAMPLE_SOURCE, uri="file:///project/geometry.py")


@pytest.fixture
def make_context(sample_document: TextDocument):
    def _factory(
        *,
        line: int = 3,
        column: int = 4,
        recent: list[Operation] | None = None,
        global_recent: list[Operation] | None = None,
        use_case: UseCaseType | None = None,
        user_input: str | None = None,
        document: TextDocument | None = None,
    ) -> SuggestionContext:
        return SuggestionContext(
            document=document or sample_document,
            range=Range.caret(Position(line, column)),
            recent_operations=list(recent or []),
            global_recent_operations=list(global_recent or []),
            use_case=use_case,
            user_input=user_input,
        )

    return _factory


@pytest.fixture
def telemetry_events():
    events: list[dict] = []
    with telemetry_service.listening(telemetry_service.STREAM_FINISHED_EVENT, events.append):
        yield events
