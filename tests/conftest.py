"""Shared fixtures: deterministic estimators with easy arithmetic."""

from typing import Sequence

import pytest

from chatsplitter.estimator.base import CostEstimator, CountingEstimator
from chatsplitter.messages.types import CanonicalMessage, Message


class CharCostEstimator(CostEstimator):
    """One token per content character; the "unit" model has 100 tokens."""

    def __init__(self):
        super().__init__({"unit": 100})

    def prompt_tokens(self, model: str, messages: Sequence[CanonicalMessage]) -> int:
        self.context_size(model)
        return sum(len(m.content or "") for m in messages)


def turns(*costs: int) -> list[Message]:
    """Alternating user/assistant messages with the given token costs."""
    return [
        Message.user("x" * cost) if i % 2 == 0 else Message.assistant("y" * cost)
        for i, cost in enumerate(costs)
    ]


@pytest.fixture
def char_estimator():
    return CharCostEstimator()


@pytest.fixture
def counting_estimator():
    return CountingEstimator(CharCostEstimator())
