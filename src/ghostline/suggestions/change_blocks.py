"""Extraction of ``<change>`` search/replace blocks from model output.

The grammar is fixed::

    <change>
      <search><![CDATA[ ...search text... ]]></search>
      <replace><![CDATA[ ...replacement... ]]></replace>
    </change>

Whitespace between tags is ignored, tag order and both CDATA wrappers are
required. CDATA bodies are matched lazily, so a body ends at the first ``]]>``
that lets the remaining tags match. A literal ``<![CDATA[`` inside a body is
therefore not treated as nesting and the body is cut at the inner terminator.
Captured text is returned verbatim: nothing is trimmed or entity-decoded.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator

__all__ = [
    "CHANGE_BLOCK_RE",
    "ChangeBlock",
    "extract_change_blocks",
    "iter_change_block_matches",
]

CHANGE_BLOCK_RE = re.compile(
    r"<change>\s*"
    r"<search>\s*<!\[CDATA\[(?P<search>.*?)\]\]>\s*</search>\s*"
    r"<replace>\s*<!\[CDATA\[(?P<replace>.*?)\]\]>\s*</replace>\s*"
    r"</change>",
    re.DOTALL,
)


@dataclass(slots=True, frozen=True)
class ChangeBlock:
    """A single proposed edit: replace ``search`` with ``replace``."""

    search: str
    replace: str

    @property
    def is_noop(self) -> bool:
        return self.search == self.replace

    def as_payload(self) -> dict[str, str]:
        return {"search": self.search, "replace": self.replace}


def iter_change_block_matches(text: str, pos: int = 0) -> Iterator[tuple[ChangeBlock, int]]:
    """Yield ``(block, end_offset)`` for each complete block at or after ``pos``."""

    if not text:
        return
    for match in CHANGE_BLOCK_RE.finditer(text, pos):
        yield ChangeBlock(search=match.group("search"), replace=match.group("replace")), match.end()


def extract_change_blocks(text: str) -> list[ChangeBlock]:
    """Return every complete change block in ``text``, in order of appearance."""

    if not text or not isinstance(text, str):
        return []
    return [block for block, _ in iter_change_block_matches(text)]
