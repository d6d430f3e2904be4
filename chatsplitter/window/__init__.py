"""Conversation windowing."""

from chatsplitter.window.search import partition_point
from chatsplitter.window.policy import (
    ABSOLUTE_TURN_LIMIT,
    DEFAULT_MAX_TURNS,
    DEFAULT_MODEL,
    RECOMMENDED_MIN_OUTPUT_TOKENS,
    Split,
    WindowPolicy,
    WindowReport,
)
from chatsplitter.window.memory import ConversationMemory

__all__ = [
    "partition_point",
    "ABSOLUTE_TURN_LIMIT",
    "DEFAULT_MAX_TURNS",
    "DEFAULT_MODEL",
    "RECOMMENDED_MIN_OUTPUT_TOKENS",
    "Split",
    "WindowPolicy",
    "WindowReport",
    "ConversationMemory",
]
