"""Tests for the incremental streaming suggestion parser."""

from __future__ import annotations

import logging

import pytest

from ghostline.constants import CURSOR_MARKER
from ghostline.core.document import TextDocument
from ghostline.core.models import SuggestionContext
from ghostline.suggestions.change_blocks import ChangeBlock, extract_change_blocks
from ghostline.suggestions.streaming_parser import ParserStatus, StreamingSuggestionParser


def _block(search: str, replace: str, *, spaced: bool = False) -> str:
    if spaced:
        return (
            "<change>\n  <search>\n    <![CDATA["
            + search
            + "]]>\n  </search>\n  <replace>\n    <![CDATA["
            + replace
            + "]]>\n  </replace>\n</change>"
        )
    return f"<change><search><![CDATA[{search}]]></search><replace><![CDATA[{replace}]]></replace></change>"


RESPONSE = (
    "Sure, here are the edits.\n"
    + _block("alpha = 1", "alpha = 2")
    + "\nand another one:\n"
    + _block("beta()", "beta(x)", spaced=True)
    + _block("gamma ]]> delta", "gamma")
    + "\nDone. <change><search><![CDATA[dangling"
)


def _feed(chunks: list[str], context: SuggestionContext | None = None) -> tuple[list[ChangeBlock], tuple[ChangeBlock, ...]]:
    parser = StreamingSuggestionParser()
    parser.initialize(context)
    streamed: list[ChangeBlock] = []
    for chunk in chunks:
        streamed.extend(parser.process_chunk(chunk).changes)
    return streamed, parser.finish_stream().changes


def test_two_chunk_example_emits_only_after_block_closes() -> None:
    parser = StreamingSuggestionParser()
    parser.initialize(SuggestionContext())

    first = parser.process_chunk("<change><search><![CDATA[foo]")
    second = parser.process_chunk("]]></search><replace><![CDATA[bar]]></replace></change>")

    assert first.changes == ()
    assert second.changes == (ChangeBlock(search="foo", replace="bar"),)
    assert parser.get_completed_changes() == (ChangeBlock("foo", "bar"),)


def test_status_transitions_through_session() -> None:
    parser = StreamingSuggestionParser()
    assert parser.status is ParserStatus.IDLE

    parser.initialize(SuggestionContext())
    assert parser.status is ParserStatus.INITIALIZED

    parser.process_chunk("text")
    assert parser.status is ParserStatus.STREAMING

    result = parser.finish_stream()
    assert parser.status is ParserStatus.FINISHED
    assert result.is_complete is True


def test_whole_response_matches_extractor_minus_noops() -> None:
    expected = tuple(block for block in extract_change_blocks(RESPONSE) if not block.is_noop)

    _, final = _feed([RESPONSE])

    assert final == expected
    assert [block.search for block in final] == ["alpha = 1", "beta()", "gamma ]]> delta"]


@pytest.mark.parametrize("split", range(0, len(RESPONSE) + 1, 7))
def test_any_two_way_split_gives_same_final_set(split: int) -> None:
    _, whole = _feed([RESPONSE])
    _, chunked = _feed([RESPONSE[:split], RESPONSE[split:]])

    assert chunked == whole


def test_character_by_character_stream_gives_same_final_set() -> None:
    _, whole = _feed([RESPONSE])
    streamed, chunked = _feed(list(RESPONSE))

    assert chunked == whole
    assert tuple(streamed) == whole


def test_uneven_three_way_splits_give_same_final_set() -> None:
    _, whole = _feed([RESPONSE])
    for first in range(0, len(RESPONSE), 23):
        for second in range(first, len(RESPONSE), 31):
            chunks = [RESPONSE[:first], RESPONSE[first:second], RESPONSE[second:]]
            assert _feed(chunks)[1] == whole


def test_empty_chunk_yields_nothing() -> None:
    parser = StreamingSuggestionParser()
    parser.initialize(SuggestionContext())

    result = parser.process_chunk("")

    assert result.changes == ()
    assert result.has_changes is False
    assert parser.get_buffer() == ""


def test_replaying_chunks_never_re_emits_changes() -> None:
    parser = StreamingSuggestionParser()
    parser.initialize(SuggestionContext())
    clean = RESPONSE[: RESPONSE.index("\nDone.")]
    chunks = [clean[:40], clean[40:120], clean[120:]]

    first_pass: list[ChangeBlock] = []
    for chunk in chunks:
        first_pass.extend(parser.process_chunk(chunk).changes)
    second_pass: list[ChangeBlock] = []
    for chunk in chunks:
        second_pass.extend(parser.process_chunk(chunk).changes)

    assert len(first_pass) == 3
    assert second_pass == []
    assert len(parser.get_completed_changes()) == 3


def test_buffer_keeps_all_received_text() -> None:
    parser = StreamingSuggestionParser()
    parser.initialize(SuggestionContext())
    parser.process_chunk(RESPONSE[:50])
    parser.process_chunk(RESPONSE[50:])

    assert parser.get_buffer() == RESPONSE


def test_finish_drops_stale_and_noop_changes() -> None:
    document = TextDocument(text="value = compute(a)\nprint(value)\n")
    text = (
        _block("value = compute(a)", "value = compute(a, b)")
        + _block("missing_call()", "other_call()")
        + _block("print(value)", "print(value)")
    )
    parser = StreamingSuggestionParser()
    parser.initialize(SuggestionContext(document=document))
    parser.process_chunk(text)

    result = parser.finish_stream()

    assert result.changes == (ChangeBlock("value = compute(a)", "value = compute(a, b)"),)
    assert result.rejected_stale == 1
    assert result.rejected_noop == 1
    assert len(parser.get_completed_changes()) == 3


def test_finish_ignores_cursor_marker_when_checking_document() -> None:
    document = TextDocument(text="def area(radius):\n    return \n")
    search = f"    return {CURSOR_MARKER}\n"
    parser = StreamingSuggestionParser()
    parser.initialize(SuggestionContext(document=document))
    parser.process_chunk(_block(search, "    return radius * radius\n"))

    result = parser.finish_stream()

    assert [block.search for block in result.changes] == [search]


def test_finish_uses_live_document_text() -> None:
    document = TextDocument(text="old_name = 1\n")
    parser = StreamingSuggestionParser()
    parser.initialize(SuggestionContext(document=document))
    parser.process_chunk(_block("old_name = 1", "new_name = 1"))

    document.update_text("renamed_elsewhere = 1\n")

    assert parser.finish_stream().changes == ()


def test_trailing_unterminated_fragment_is_silently_dropped() -> None:
    streamed, final = _feed([_block("a", "b") + "<change><search><![CDATA[never closed"])

    assert streamed == [ChangeBlock("a", "b")]
    assert final == (ChangeBlock("a", "b"),)


@pytest.mark.parametrize("stage", ["idle", "initialized", "streaming", "finished"])
def test_reset_returns_to_idle_from_any_state(stage: str) -> None:
    parser = StreamingSuggestionParser()
    if stage != "idle":
        parser.initialize(SuggestionContext())
    if stage in {"streaming", "finished"}:
        parser.process_chunk(_block("a", "b"))
    if stage == "finished":
        parser.finish_stream()

    parser.reset()

    assert parser.status is ParserStatus.IDLE
    assert parser.get_buffer() == ""
    assert parser.get_completed_changes() == ()
    assert parser.context is None


def test_initialize_clears_previous_session() -> None:
    parser = StreamingSuggestionParser()
    parser.initialize(SuggestionContext())
    parser.process_chunk(_block("a", "b"))

    parser.initialize(SuggestionContext())

    assert parser.get_buffer() == ""
    assert parser.get_completed_changes() == ()
    assert parser.process_chunk(_block("a", "b")).changes == (ChangeBlock("a", "b"),)


def test_chunks_after_finish_are_ignored(caplog: pytest.LogCaptureFixture) -> None:
    parser = StreamingSuggestionParser()
    parser.initialize(SuggestionContext())
    parser.finish_stream()

    with caplog.at_level(logging.WARNING, logger="ghostline.suggestions.streaming_parser"):
        result = parser.process_chunk(_block("a", "b"))

    assert result.changes == ()
    assert parser.get_buffer() == ""
    assert "after the stream finished" in caplog.text


def test_accessors_have_no_side_effects() -> None:
    parser = StreamingSuggestionParser()
    parser.initialize(SuggestionContext())
    parser.process_chunk(_block("a", "b"))

    snapshot = parser.get_completed_changes()
    parser.get_buffer()
    parser.get_completed_changes()

    assert parser.get_completed_changes() == snapshot
    assert parser.status is ParserStatus.STREAMING
