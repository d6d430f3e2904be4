"""Conversation message types and the role table shared by all adapters."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from chatsplitter.errors import InvalidMessageError


class Role(str, Enum):
    """Speaker of a conversation turn."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    FUNCTION = "function"
    TOOL = "tool"


# Every wire name maps to exactly one Role and back.
ROLE_BY_NAME: dict[str, Role] = {role.value: role for role in Role}


def parse_role(value: Any) -> Role:
    """Map a role name (or Role) to a Role, rejecting anything unknown."""
    if isinstance(value, Role):
        return value
    role = ROLE_BY_NAME.get(value) if isinstance(value, str) else None
    if role is None:
        raise InvalidMessageError(f"unknown role {value!r}")
    return role


@dataclass(frozen=True)
class FunctionCall:
    """A function invocation requested by the assistant."""

    name: str
    arguments: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "arguments": self.arguments}


@dataclass(frozen=True)
class CanonicalMessage:
    """Message in the form cost estimators consume.

    Roles are plain strings here, mirroring what tokenizers see on the wire.
    """

    role: str
    content: Optional[str] = None
    name: Optional[str] = None
    function_call: Optional[FunctionCall] = None
    tool_call_id: Optional[str] = None


@dataclass(frozen=True)
class Message:
    """One turn of a conversation."""

    role: Role
    content: Optional[str] = None
    name: Optional[str] = None
    function_call: Optional[FunctionCall] = None
    tool_call_id: Optional[str] = None

    @classmethod
    def system(cls, content: str) -> Message:
        return cls(Role.SYSTEM, content)

    @classmethod
    def user(cls, content: str, name: Optional[str] = None) -> Message:
        return cls(Role.USER, content, name=name)

    @classmethod
    def assistant(
        cls,
        content: Optional[str] = None,
        function_call: Optional[FunctionCall] = None,
    ) -> Message:
        return cls(Role.ASSISTANT, content, function_call=function_call)

    @classmethod
    def function(cls, name: str, content: str) -> Message:
        return cls(Role.FUNCTION, content, name=name)

    def validate(self) -> Message:
        """Check the fields this message's role requires.

        Raises InvalidMessageError; returns self so calls can be chained.
        """
        role = parse_role(self.role)
        if role is Role.SYSTEM and self.content is None:
            raise InvalidMessageError("system message requires content", self)
        if role is Role.FUNCTION and not self.name:
            raise InvalidMessageError("function message requires a name", self)
        if role is Role.TOOL and not self.tool_call_id:
            raise InvalidMessageError(
                "tool message requires a tool_call_id", self
            )
        if self.function_call is not None and role is not Role.ASSISTANT:
            raise InvalidMessageError(
                f"function_call is only valid on assistant messages, not {role.value}",
                self,
            )
        return self
