"""Tests for message validation and representation conversions."""

import pytest
from openai.types.chat import ChatCompletionMessage

from chatsplitter.errors import InvalidMessageError
from chatsplitter.messages.adapters import (
    as_message,
    to_client_form,
    to_client_messages,
    to_estimator_form,
    to_estimator_messages,
)
from chatsplitter.messages.types import (
    ROLE_BY_NAME,
    CanonicalMessage,
    FunctionCall,
    Message,
    Role,
    parse_role,
)


class TestRoles:
    def test_role_table_is_total(self):
        assert set(ROLE_BY_NAME.values()) == set(Role)
        for name, role in ROLE_BY_NAME.items():
            assert role.value == name

    def test_parse_known(self):
        assert parse_role("assistant") is Role.ASSISTANT
        assert parse_role(Role.TOOL) is Role.TOOL

    @pytest.mark.parametrize("value", ["robot", "User", "", None, 3])
    def test_parse_unknown(self, value):
        with pytest.raises(InvalidMessageError, match="unknown role"):
            parse_role(value)


class TestValidation:
    def test_system_requires_content(self):
        with pytest.raises(InvalidMessageError, match="system message requires content"):
            Message(Role.SYSTEM).validate()

    def test_function_requires_name(self):
        with pytest.raises(InvalidMessageError, match="requires a name"):
            Message(Role.FUNCTION, "{}").validate()

    def test_tool_requires_call_id(self):
        with pytest.raises(InvalidMessageError, match="tool_call_id"):
            Message(Role.TOOL, "ok").validate()

    def test_function_call_only_on_assistant(self):
        with pytest.raises(InvalidMessageError, match="only valid on assistant"):
            Message(Role.USER, "hi", function_call=FunctionCall("f")).validate()

    def test_optional_content(self):
        message = Message.assistant(function_call=FunctionCall("lookup", '{"q": 1}'))
        assert message.validate() is message


class TestEstimatorForm:
    def test_from_message(self):
        message = Message.function("lookup", "42")
        assert to_estimator_form(message) == CanonicalMessage(
            role="function", content="42", name="lookup"
        )

    def test_from_dict(self):
        canonical = to_estimator_form(
            {
                "role": "assistant",
                "content": None,
                "function_call": {"name": "f", "arguments": "{}"},
            }
        )
        assert canonical.role == "assistant"
        assert canonical.function_call == FunctionCall("f", "{}")

    def test_from_response_message(self):
        response = ChatCompletionMessage(role="assistant", content="Hello!")
        assert to_estimator_form(response) == CanonicalMessage(
            role="assistant", content="Hello!"
        )

    def test_canonical_with_unknown_role(self):
        with pytest.raises(InvalidMessageError, match="unknown role"):
            to_estimator_form(CanonicalMessage(role="narrator", content="..."))

    def test_unsupported_type(self):
        with pytest.raises(InvalidMessageError, match="unsupported message type"):
            to_estimator_form("just a string")


class TestClientForm:
    def test_from_message(self):
        assert to_client_form(Message.user("hi", name="ana")) == {
            "role": "user",
            "content": "hi",
            "name": "ana",
        }

    def test_from_canonical(self):
        canonical = CanonicalMessage(
            role="assistant", function_call=FunctionCall("f", "{}")
        )
        assert to_client_form(canonical) == {
            "role": "assistant",
            "content": None,
            "function_call": {"name": "f", "arguments": "{}"},
        }

    def test_tool_message(self):
        message = {"role": "tool", "content": "sunny", "tool_call_id": "call_1"}
        assert to_client_form(message) == message

    def test_tool_message_survives_estimator_form(self):
        raw = {"role": "tool", "content": "42", "tool_call_id": "c1"}
        canonical = to_estimator_form(raw)
        assert canonical.tool_call_id == "c1"
        assert to_estimator_form(canonical) == canonical
        assert to_client_form(canonical) == raw

    def test_response_message_drops_name(self):
        response = ChatCompletionMessage(
            role="assistant",
            content=None,
            function_call={"name": "lookup", "arguments": "{}"},
        )
        assert to_client_form(response) == {
            "role": "assistant",
            "content": None,
            "function_call": {"name": "lookup", "arguments": "{}"},
        }

    def test_dict_round_trip_through_message(self):
        raw = {"role": "system", "content": "Be brief."}
        assert to_client_form(as_message(raw)) == raw

    def test_non_string_content_rejected(self):
        with pytest.raises(InvalidMessageError, match="content must be a string"):
            to_client_form({"role": "user", "content": [{"type": "text"}]})

    def test_missing_role(self):
        with pytest.raises(InvalidMessageError, match="missing role"):
            to_client_form({"content": "hi"})


class TestCustomAdapter:
    class Note:
        def __init__(self, text):
            self.text = text

        def to_estimator_form(self):
            return CanonicalMessage(role="user", content=self.text)

        def to_client_form(self):
            return {"role": "user", "content": self.text}

    def test_protocol_objects_are_used_directly(self):
        note = self.Note("remember this")
        assert to_estimator_form(note).content == "remember this"
        assert to_client_form(note) == {"role": "user", "content": "remember this"}


class TestSequences:
    def test_positions_in_errors(self):
        messages = [Message.user("a"), {"role": "user"}, {"role": "wizard"}]
        with pytest.raises(InvalidMessageError) as exc_info:
            to_estimator_messages(messages)
        assert exc_info.value.position == 2
        assert "position 2" in str(exc_info.value)

    def test_mixed_representations(self):
        messages = [
            Message.system("Be brief."),
            {"role": "user", "content": "Hi"},
            ChatCompletionMessage(role="assistant", content="Hello"),
        ]
        assert [m["role"] for m in to_client_messages(messages)] == [
            "system",
            "user",
            "assistant",
        ]
