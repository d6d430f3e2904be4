"""Append-only conversation log with an always-fitting recent window."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from chatsplitter.window.policy import WindowPolicy, WindowReport

logger = logging.getLogger(__name__)


class ConversationMemory:
    """Holds the full log and exposes the window a policy would send.

    The split is computed lazily on first read and cached until the next
    append, so repeated reads cost no estimator calls.
    """

    def __init__(
        self,
        policy: Optional[WindowPolicy] = None,
        messages: Iterable[Any] = (),
    ) -> None:
        self.policy = policy or WindowPolicy()
        self._messages: list[Any] = list(messages)
        self._report: Optional[WindowReport] = None

    def append(self, message: Any) -> None:
        self._messages.append(message)
        self._report = None

    def extend(self, messages: Iterable[Any]) -> None:
        self._messages.extend(messages)
        self._report = None

    def pop(self) -> Any:
        """Remove and return the newest message."""
        message = self._messages.pop()
        self._report = None
        return message

    @property
    def messages(self) -> tuple[Any, ...]:
        """Every message ever appended, oldest first."""
        return tuple(self._messages)

    @property
    def report(self) -> WindowReport:
        if self._report is None:
            self._report = self.policy.split_with_report(self.messages)
            logger.debug(
                "recomputed window: %d recent of %d messages",
                len(self._report.recent), len(self._messages),
            )
        return self._report

    @property
    def recent(self) -> tuple[Any, ...]:
        return tuple(self.report.recent)

    @property
    def outdated(self) -> tuple[Any, ...]:
        return tuple(self.report.outdated)

    def __len__(self) -> int:
        return len(self._messages)
