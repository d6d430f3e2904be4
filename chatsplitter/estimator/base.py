"""Cost estimator interface and the known-model context table."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Mapping, Optional, Sequence

from chatsplitter.errors import UnsupportedModelError
from chatsplitter.messages.types import CanonicalMessage

# Longest matching prefix wins, so "gpt-4-32k-0613" resolves to gpt-4-32k.
CONTEXT_SIZES: dict[str, int] = {
    "gpt-4o": 128_000,
    "gpt-4-turbo": 128_000,
    "gpt-4-1106": 128_000,
    "gpt-4-0125": 128_000,
    "gpt-4-32k": 32_768,
    "gpt-4": 8_192,
    "gpt-3.5-turbo-16k": 16_384,
    "gpt-3.5-turbo-1106": 16_385,
    "gpt-3.5-turbo-0125": 16_385,
    "gpt-3.5-turbo": 4_096,
}


def context_size_for(
    model: str, table: Optional[Mapping[str, int]] = None
) -> int:
    """Resolve the context size of ``model`` by longest prefix match."""
    table = CONTEXT_SIZES if table is None else table
    best: Optional[str] = None
    for prefix in table:
        if model.startswith(prefix) and (best is None or len(prefix) > len(best)):
            best = prefix
    if best is None:
        raise UnsupportedModelError(model, "no known context size")
    return table[best]


class CostEstimator(ABC):
    """Maps (model, message window) to the tokens left for completion.

    Implementations must be deterministic, and dropping a message from the
    front of the window must never lower the returned value.
    """

    def __init__(self, context_sizes: Optional[Mapping[str, int]] = None) -> None:
        self._context_sizes = dict(context_sizes) if context_sizes else None

    def context_size(self, model: str) -> int:
        """Total tokens (prompt + completion) the model accepts."""
        return context_size_for(model, self._context_sizes)

    @abstractmethod
    def prompt_tokens(
        self, model: str, messages: Sequence[CanonicalMessage]
    ) -> int:
        """Tokens consumed by sending ``messages`` as the prompt."""
        ...

    def estimate(self, model: str, messages: Sequence[CanonicalMessage]) -> int:
        """Tokens still available for the completion."""
        return max(0, self.context_size(model) - self.prompt_tokens(model, messages))


class CountingEstimator(CostEstimator):
    """Wraps another estimator and counts calls to ``estimate``."""

    def __init__(self, inner: CostEstimator) -> None:
        super().__init__()
        self.inner = inner
        self.calls = 0

    def context_size(self, model: str) -> int:
        return self.inner.context_size(model)

    def prompt_tokens(
        self, model: str, messages: Sequence[CanonicalMessage]
    ) -> int:
        return self.inner.prompt_tokens(model, messages)

    def estimate(self, model: str, messages: Sequence[CanonicalMessage]) -> int:
        self.calls += 1
        return self.inner.estimate(model, messages)
