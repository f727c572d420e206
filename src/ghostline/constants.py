"""Sentinels shared by prompt builders and the streaming parser."""

from __future__ import annotations

# Marks the exact cursor position inside prompts; models echo it inside <search>.
CURSOR_MARKER = "<<<AUTOCOMPLETE_HERE>>>"

NO_CONTEXT_PROMPT = "No context available for completion."


def strip_cursor_marker(text: str) -> str:
    """Remove every cursor marker occurrence from ``text``."""

    return text.replace(CURSOR_MARKER, "")


__all__ = ["CURSOR_MARKER", "NO_CONTEXT_PROMPT", "strip_cursor_marker"]
