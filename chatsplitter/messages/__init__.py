"""Message data model and conversions between representations."""

from chatsplitter.messages.types import (
    CanonicalMessage,
    FunctionCall,
    Message,
    Role,
    ROLE_BY_NAME,
    parse_role,
)
from chatsplitter.messages.adapters import (
    ClientMessage,
    MessageAdapter,
    as_message,
    to_client_form,
    to_client_messages,
    to_estimator_form,
    to_estimator_messages,
)

__all__ = [
    # Types
    "CanonicalMessage",
    "FunctionCall",
    "Message",
    "Role",
    "ROLE_BY_NAME",
    "parse_role",
    # Adapters
    "ClientMessage",
    "MessageAdapter",
    "as_message",
    "to_client_form",
    "to_client_messages",
    "to_estimator_form",
    "to_estimator_messages",
]
