"""Chat session that keeps every request inside the model's context."""

from __future__ import annotations

import logging
from typing import Any, Optional

from openai import AsyncOpenAI

from chatsplitter.messages.adapters import ClientMessage, as_message, to_client_messages
from chatsplitter.messages.types import Message
from chatsplitter.utils.retry import completion_retry
from chatsplitter.window.memory import ConversationMemory
from chatsplitter.window.policy import WindowPolicy

logger = logging.getLogger(__name__)


class ChatSession:
    """Sends the recent window of a growing conversation to OpenAI.

    The system prompt is prepended to every request and is not part of the
    stored log.
    """

    def __init__(
        self,
        client: Optional[AsyncOpenAI] = None,
        policy: Optional[WindowPolicy] = None,
        system_prompt: Optional[str] = None,
        memory: Optional[ConversationMemory] = None,
        temperature: Optional[float] = None,
    ) -> None:
        self.client = client or AsyncOpenAI()
        if memory is None:
            memory = ConversationMemory(policy or WindowPolicy())
        elif policy is not None and policy != memory.policy:
            logger.warning(
                "ignoring session policy for %s; the memory splits with %s",
                policy.model, memory.policy.model,
            )
        self.memory = memory
        # Requests use the policy the memory splits with.
        self.policy = memory.policy
        self.system_prompt = system_prompt
        self.temperature = temperature

    def build_request(self) -> list[ClientMessage]:
        """Messages for the next request: system prompt plus recent window."""
        recent = to_client_messages(self.memory.recent)
        if self.system_prompt is None:
            return recent
        return [{"role": "system", "content": self.system_prompt}, *recent]

    async def ask(self, content: str) -> Message:
        """Append a user turn, request a completion and record the reply.

        If the request fails the user turn is taken back out of the log, so a
        retried ``ask`` does not leave two copies of it behind.
        """
        self.memory.append(Message.user(content))
        try:
            reply = await self.complete()
        except BaseException:
            self.memory.pop()
            raise
        self.memory.append(reply)
        return reply

    async def complete(self) -> Message:
        """Request a completion for the current log without appending."""
        messages = self.build_request()
        report = self.memory.report
        logger.info(
            "sending %d of %d messages to %s (%s tokens free)",
            len(report.recent), len(self.memory), self.policy.model,
            report.remaining_tokens,
        )
        response = await self._create(
            messages=messages, max_tokens=self.policy.output_reservation
        )
        return as_message(response.choices[0].message)

    @completion_retry
    async def _create(self, **kwargs: Any) -> Any:
        if self.temperature is not None:
            kwargs["temperature"] = self.temperature
        return await self.client.chat.completions.create(
            model=self.policy.model, **kwargs
        )
