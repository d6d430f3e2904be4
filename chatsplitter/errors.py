"""Exception types raised by chatsplitter."""

from __future__ import annotations

from typing import Any, Optional


class SplitterError(Exception):
    """Base class for all chatsplitter errors."""


class UnsupportedModelError(SplitterError):
    """No tokenizer or context size is known for a model."""

    def __init__(self, model: str, detail: str = "") -> None:
        self.model = model
        message = f"Unsupported model: {model!r}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class InvalidMessageError(SplitterError):
    """A message cannot be converted between estimator and client forms."""

    def __init__(
        self,
        reason: str,
        message: Any = None,
        position: Optional[int] = None,
    ) -> None:
        self.reason = reason
        self.message = message
        self.position = position
        super().__init__(self._format())

    def _format(self) -> str:
        if self.position is None:
            return f"Invalid message: {self.reason}"
        return f"Invalid message at position {self.position}: {self.reason}"

    def at(self, position: int) -> InvalidMessageError:
        """Return a copy of this error tagged with a sequence position."""
        return InvalidMessageError(self.reason, self.message, position)


class EstimatorContractError(AssertionError):
    """The cost estimator broke its monotonicity contract.

    This is a programming error, not a recoverable condition, so it derives
    from ``AssertionError`` rather than ``SplitterError``.
    """
