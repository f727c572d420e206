"""Streaming change-block parsing and context assembly for inline code suggestions."""

from .orchestrator import SuggestionOrchestrator

__version__ = "0.1.0"

__all__ = ["SuggestionOrchestrator", "__version__"]
