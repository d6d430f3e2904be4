"""Cost estimator backed by OpenAI's tiktoken tokenizer."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Mapping, Optional, Sequence

import tiktoken

from chatsplitter.errors import UnsupportedModelError
from chatsplitter.estimator.base import CostEstimator
from chatsplitter.messages.types import CanonicalMessage

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def _encoding_for(model: str) -> tiktoken.Encoding:
    try:
        return tiktoken.encoding_for_model(model)
    except KeyError as exc:
        raise UnsupportedModelError(model, "no tiktoken encoding") from exc


def _count(enc: tiktoken.Encoding, text: str) -> int:
    # Special-token text in a message is counted as ordinary tokens.
    return len(enc.encode(text, disallowed_special=()))


class TiktokenEstimator(CostEstimator):
    """Counts prompt tokens the way the chat-completions format does."""

    def __init__(self, context_sizes: Optional[Mapping[str, int]] = None) -> None:
        super().__init__(context_sizes)

    def encoding(self, model: str) -> tiktoken.Encoding:
        return _encoding_for(model)

    @staticmethod
    def _framing(model: str) -> tuple[int, int]:
        """Return (tokens_per_message, tokens_per_name) for ``model``."""
        if model.startswith("gpt-3.5-turbo-0301"):
            return 4, -1
        return 3, 1

    def prompt_tokens(
        self, model: str, messages: Sequence[CanonicalMessage]
    ) -> int:
        # Resolve the context size first so unknown models fail before encoding.
        self.context_size(model)
        enc = self.encoding(model)
        per_message, per_name = self._framing(model)

        total = 3  # every reply is primed with <|start|>assistant<|message|>
        for message in messages:
            total += per_message
            total += _count(enc, message.role)
            if message.content:
                total += _count(enc, message.content)
            if message.name:
                total += per_name + _count(enc, message.name)
            if message.function_call is not None:
                total += _count(enc, message.function_call.name)
                total += _count(enc, message.function_call.arguments)
        logger.debug("%s: %d prompt tokens for %d messages", model, total, len(messages))
        return total
