"""Conversions between message representations.

Every supported representation is first read into a validated ``Message``,
then written out as either the estimator form (``CanonicalMessage``) or the
client form (an OpenAI chat-completions request dict). Objects that are not
one of the built-in types can take part by implementing ``MessageAdapter``.
"""

from __future__ import annotations

from functools import singledispatch
from typing import Any, Iterable, Protocol, runtime_checkable

from openai.types.chat import ChatCompletionMessage

from chatsplitter.errors import InvalidMessageError
from chatsplitter.messages.types import (
    CanonicalMessage,
    FunctionCall,
    Message,
    Role,
    parse_role,
)

ClientMessage = dict[str, Any]


@runtime_checkable
class MessageAdapter(Protocol):
    """Capability required of custom message types."""

    def to_estimator_form(self) -> CanonicalMessage:
        ...

    def to_client_form(self) -> ClientMessage:
        ...


@singledispatch
def as_message(obj: Any) -> Message:
    """Read any supported representation into a validated Message."""
    raise InvalidMessageError(
        f"unsupported message type {type(obj).__name__}", obj
    )


@as_message.register
def _(obj: Message) -> Message:
    return obj.validate()


@as_message.register
def _(obj: CanonicalMessage) -> Message:
    return Message(
        role=parse_role(obj.role),
        content=obj.content,
        name=obj.name,
        function_call=obj.function_call,
        tool_call_id=obj.tool_call_id,
    ).validate()


@as_message.register
def _(obj: dict) -> Message:
    if "role" not in obj:
        raise InvalidMessageError("missing role", obj)
    content = obj.get("content")
    if content is not None and not isinstance(content, str):
        raise InvalidMessageError("content must be a string", obj)
    return Message(
        role=parse_role(obj["role"]),
        content=content,
        name=obj.get("name"),
        function_call=_function_call_from(obj.get("function_call"), obj),
        tool_call_id=obj.get("tool_call_id"),
    ).validate()


@as_message.register
def _(obj: ChatCompletionMessage) -> Message:
    if obj.tool_calls:
        raise InvalidMessageError(
            "responses carrying tool_calls are not supported", obj
        )
    function_call = None
    if obj.function_call is not None:
        function_call = FunctionCall(
            name=obj.function_call.name,
            arguments=obj.function_call.arguments,
        )
    # Response messages never carry a name.
    return Message(
        role=parse_role(obj.role),
        content=obj.content,
        function_call=function_call,
    ).validate()


def _function_call_from(raw: Any, owner: Any) -> FunctionCall | None:
    if raw is None:
        return None
    if isinstance(raw, FunctionCall):
        return raw
    if isinstance(raw, dict) and "name" in raw:
        return FunctionCall(name=raw["name"], arguments=raw.get("arguments", ""))
    raise InvalidMessageError("malformed function_call", owner)


def message_to_canonical(message: Message) -> CanonicalMessage:
    return CanonicalMessage(
        role=Role(message.role).value,
        content=message.content,
        name=message.name,
        function_call=message.function_call,
        tool_call_id=message.tool_call_id,
    )


def message_to_client(message: Message) -> ClientMessage:
    payload: ClientMessage = {
        "role": Role(message.role).value,
        "content": message.content,
    }
    if message.name is not None:
        payload["name"] = message.name
    if message.function_call is not None:
        payload["function_call"] = message.function_call.to_dict()
    if message.tool_call_id is not None:
        payload["tool_call_id"] = message.tool_call_id
    return payload


def to_estimator_form(obj: Any) -> CanonicalMessage:
    """Convert one message of any supported type to the estimator form."""
    if isinstance(obj, MessageAdapter):
        return obj.to_estimator_form()
    return message_to_canonical(as_message(obj))


def to_client_form(obj: Any) -> ClientMessage:
    """Convert one message of any supported type to the client form."""
    if isinstance(obj, MessageAdapter):
        return obj.to_client_form()
    return message_to_client(as_message(obj))


def to_estimator_messages(messages: Iterable[Any]) -> list[CanonicalMessage]:
    """Convert a sequence, tagging conversion errors with their position."""
    converted: list[CanonicalMessage] = []
    for position, obj in enumerate(messages):
        try:
            converted.append(to_estimator_form(obj))
        except InvalidMessageError as exc:
            raise exc.at(position) from exc
    return converted


def to_client_messages(messages: Iterable[Any]) -> list[ClientMessage]:
    """Convert a sequence, tagging conversion errors with their position."""
    converted: list[ClientMessage] = []
    for position, obj in enumerate(messages):
        try:
            converted.append(to_client_form(obj))
        except InvalidMessageError as exc:
            raise exc.at(position) from exc
    return converted
