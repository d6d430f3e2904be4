"""Token cost estimators."""

from chatsplitter.estimator.base import (
    CONTEXT_SIZES,
    CostEstimator,
    CountingEstimator,
    context_size_for,
)
from chatsplitter.estimator.approximate import (
    ApproximateEstimator,
    count_tokens_approximate,
)
from chatsplitter.estimator.tiktoken_estimator import TiktokenEstimator

__all__ = [
    "CONTEXT_SIZES",
    "CostEstimator",
    "CountingEstimator",
    "context_size_for",
    "ApproximateEstimator",
    "count_tokens_approximate",
    "TiktokenEstimator",
]
