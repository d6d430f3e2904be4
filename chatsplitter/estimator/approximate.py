"""Offline cost estimator using a characters-per-token heuristic."""

from __future__ import annotations

from typing import Mapping, Optional, Sequence

from chatsplitter.estimator.base import CostEstimator
from chatsplitter.messages.types import CanonicalMessage


def count_tokens_approximate(text: Optional[str]) -> int:
    """Approximate token count using chars/4 heuristic."""
    if not text:
        return 0
    return len(text) // 4


class ApproximateEstimator(CostEstimator):
    """Estimates tokens without downloading a tokenizer.

    Uses the same per-message framing as the chat format (3 tokens per
    message plus 3 to prime the reply), with every field costed at roughly
    four characters per token.
    """

    tokens_per_message = 3
    tokens_per_name = 1
    reply_priming = 3

    def __init__(self, context_sizes: Optional[Mapping[str, int]] = None) -> None:
        super().__init__(context_sizes)

    def message_tokens(self, message: CanonicalMessage) -> int:
        tokens = self.tokens_per_message
        tokens += max(1, count_tokens_approximate(message.role))
        tokens += count_tokens_approximate(message.content)
        if message.name:
            tokens += self.tokens_per_name + count_tokens_approximate(message.name)
        if message.function_call is not None:
            tokens += count_tokens_approximate(message.function_call.name)
            tokens += count_tokens_approximate(message.function_call.arguments)
        return tokens

    def prompt_tokens(
        self, model: str, messages: Sequence[CanonicalMessage]
    ) -> int:
        self.context_size(model)  # rejects unknown models even for empty input
        return self.reply_priming + sum(self.message_tokens(m) for m in messages)
