"""Tests for the change-block grammar."""

from __future__ import annotations

import pytest

from ghostline.constants import CURSOR_MARKER
from ghostline.suggestions.change_blocks import (
    CHANGE_BLOCK_RE,
    ChangeBlock,
    extract_change_blocks,
    iter_change_block_matches,
)


def _block(search: str, replace: str) -> str:
    return f"<change><search><![CDATA[{search}]]></search><replace><![CDATA[{replace}]]></replace></change>"


def test_single_line_block_captures_search_and_replace() -> None:
    blocks = extract_change_blocks(_block("old code", "new code"))

    assert blocks == [ChangeBlock(search="old code", replace="new code")]


def test_multiline_layout_with_whitespace_between_tags() -> None:
    text = """<change>
\t<search>
\t\t<![CDATA[old code]]>
\t</search>
\t<replace>
\t\t<![CDATA[new code]]>
\t</replace>
</change>"""

    assert extract_change_blocks(text) == [ChangeBlock("old code", "new code")]


def test_captures_are_verbatim_without_trimming() -> None:
    search = "\t\tindented\r\n\tcode  "
    replace = "   \n   "
    blocks = extract_change_blocks(_block(search, replace))

    assert blocks[0].search == search
    assert blocks[0].replace == replace


def test_markup_inside_cdata_is_not_decoded() -> None:
    blocks = extract_change_blocks(_block("<div>&amp;</div>", 'const y = "[]"'))

    assert blocks[0].search == "<div>&amp;</div>"
    assert blocks[0].replace == 'const y = "[]"'


def test_empty_cdata_sections_match() -> None:
    assert extract_change_blocks(_block("", "")) == [ChangeBlock("", "")]


def test_cursor_marker_is_kept_in_search_text() -> None:
    search = f"import math\n{CURSOR_MARKER}\ndef area(radius):\n"
    blocks = extract_change_blocks(_block(search, "import math\n\ndef area(radius):\n"))

    assert CURSOR_MARKER in blocks[0].search


def test_multiple_blocks_with_prose_between_them() -> None:
    text = _block("x", "X") + "\nSome explanatory text here\n\n" + _block("y", "Y")

    blocks = extract_change_blocks(text)

    assert [b.search for b in blocks] == ["x", "y"]
    assert [b.replace for b in blocks] == ["X", "Y"]


def test_non_greedy_capture_uses_first_usable_terminator() -> None:
    text = "<change><search><![CDATA[]]>]]></search><replace><![CDATA[new]]></replace></change>"

    blocks = extract_change_blocks(text)

    assert len(blocks) == 1
    assert blocks[0].search == "]]>"


def test_literal_cdata_opener_inside_body_is_cut_at_inner_terminator() -> None:
    text = "<change><search><![CDATA[test <![CDATA[ nested ]]></search><replace><![CDATA[new]]></replace></change>"

    blocks = extract_change_blocks(text)

    assert blocks[0].search == "test <![CDATA[ nested "


def test_unicode_and_large_content() -> None:
    large = "x" * 10_000
    blocks = extract_change_blocks(_block(large, "✨ new 日本語"))

    assert blocks[0].search == large
    assert blocks[0].replace == "✨ new 日本語"


@pytest.mark.parametrize(
    "text",
    [
        "<change><search><![CDATA[test]]></search>",
        "<change><search>test</search><replace><![CDATA[new]]></replace></change>",
        "<change><search><![CDATA[old]]></search><replace>new</replace></change>",
        "<change><search><![CDATA[test]></search><replace><![CDATA[new]]></replace></change>",
        "<change><search><![CDATA[old]]></search><replace><![CDATA[new]]></replace>",
        "<change><replace><![CDATA[new]]></replace><search><![CDATA[old]]></search></change>",
        "<change>",
        "",
    ],
)
def test_malformed_blocks_are_rejected(text: str) -> None:
    assert extract_change_blocks(text) == []


def test_iter_matches_reports_end_offsets_and_honours_start_position() -> None:
    first = _block("a", "A")
    second = _block("b", "B")
    text = first + " " + second

    matches = list(iter_change_block_matches(text))
    assert [end for _, end in matches] == [len(first), len(text)]

    resumed = list(iter_change_block_matches(text, len(first)))
    assert [block.search for block, _ in resumed] == ["b"]


def test_pattern_exposes_named_groups() -> None:
    match = CHANGE_BLOCK_RE.search(_block("search content", "replace content"))

    assert match is not None
    assert match.group("search") == "search content"
    assert match.group("replace") == "replace content"


def test_change_block_helpers() -> None:
    block = ChangeBlock(search="same", replace="same")

    assert block.is_noop is True
    assert block.as_payload() == {"search": "same", "replace": "same"}
