"""Change-block grammar and the streaming parser built on it."""

from .change_blocks import CHANGE_BLOCK_RE, ChangeBlock, extract_change_blocks, iter_change_block_matches
from .streaming_parser import ParserStatus, StreamingParseResult, StreamingSuggestionParser

__all__ = [
    "CHANGE_BLOCK_RE",
    "ChangeBlock",
    "ParserStatus",
    "StreamingParseResult",
    "StreamingSuggestionParser",
    "extract_change_blocks",
    "iter_change_block_matches",
]
