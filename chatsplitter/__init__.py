"""Split chat conversations so requests never exceed a model's context.

Usage::

    from chatsplitter import WindowPolicy

    outdated, recent = WindowPolicy("gpt-3.5-turbo").split(stored_messages)
"""

from chatsplitter.errors import (
    EstimatorContractError,
    InvalidMessageError,
    SplitterError,
    UnsupportedModelError,
)
from chatsplitter.estimator import (
    ApproximateEstimator,
    CostEstimator,
    CountingEstimator,
    TiktokenEstimator,
)
from chatsplitter.messages import (
    CanonicalMessage,
    FunctionCall,
    Message,
    MessageAdapter,
    Role,
    to_client_form,
    to_estimator_form,
)
from chatsplitter.window import (
    ABSOLUTE_TURN_LIMIT,
    ConversationMemory,
    Split,
    WindowPolicy,
    WindowReport,
)

__version__ = "0.1.0"

__all__ = [
    # Errors
    "EstimatorContractError",
    "InvalidMessageError",
    "SplitterError",
    "UnsupportedModelError",
    # Estimators
    "ApproximateEstimator",
    "CostEstimator",
    "CountingEstimator",
    "TiktokenEstimator",
    # Messages
    "CanonicalMessage",
    "FunctionCall",
    "Message",
    "MessageAdapter",
    "Role",
    "to_client_form",
    "to_estimator_form",
    # Window
    "ABSOLUTE_TURN_LIMIT",
    "ConversationMemory",
    "Split",
    "WindowPolicy",
    "WindowReport",
]
