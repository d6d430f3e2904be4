"""Window selection: which trailing messages fit a model's context.

A split runs in two stages. The turn-count stage drops everything older than
the newest ``max_turns`` messages without consulting the estimator. The token
stage then binary-searches the remaining suffix for the longest window that
still leaves ``max_output_tokens`` available for the completion.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, NamedTuple, Optional, Sequence

from chatsplitter.errors import EstimatorContractError, InvalidMessageError
from chatsplitter.estimator.base import CostEstimator
from chatsplitter.estimator.tiktoken_estimator import TiktokenEstimator
from chatsplitter.messages.adapters import to_estimator_messages
from chatsplitter.messages.types import CanonicalMessage
from chatsplitter.window.search import partition_point

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-3.5-turbo"

# Hard limit on messages per request imposed by the completions API.
ABSOLUTE_TURN_LIMIT = 2048

DEFAULT_MAX_TURNS = 128

RECOMMENDED_MIN_OUTPUT_TOKENS = 256


class Split(NamedTuple):
    """Outdated prefix and recent suffix of a conversation."""

    outdated: Sequence[Any]
    recent: Sequence[Any]


@dataclass(frozen=True)
class WindowReport:
    """A split together with how it was reached."""

    outdated: Sequence[Any]
    recent: Sequence[Any]
    turn_boundary: int
    boundary: int
    output_reservation: int
    remaining_tokens: Optional[int]
    estimator_calls: int

    @property
    def token_budget_met(self) -> bool:
        """False only when the newest message alone is already over budget."""
        if self.remaining_tokens is None:
            return True
        return self.remaining_tokens >= self.output_reservation

    @property
    def split(self) -> Split:
        return Split(self.outdated, self.recent)


@dataclass
class _TokenSearch:
    boundary: int
    observed: dict[int, int] = field(default_factory=dict)


@dataclass(frozen=True)
class WindowPolicy:
    """Splits conversations into outdated and recent messages."""

    model: str = DEFAULT_MODEL
    max_output_tokens: Optional[int] = None
    """Tokens reserved for the completion; None means half the context."""

    max_turns: int = DEFAULT_MAX_TURNS
    """Upper bound on recent messages, itself capped at ABSOLUTE_TURN_LIMIT."""

    estimator: CostEstimator = field(
        default_factory=TiktokenEstimator, compare=False, repr=False
    )

    def __post_init__(self) -> None:
        for diagnostic in self.diagnostics:
            logger.warning(diagnostic)

    @property
    def diagnostics(self) -> list[str]:
        """Non-fatal warnings about unusual configuration values."""
        found: list[str] = []
        if (
            self.max_output_tokens is not None
            and self.max_output_tokens < RECOMMENDED_MIN_OUTPUT_TOKENS
        ):
            found.append(
                f"max_output_tokens = {self.max_output_tokens} "
                f"< {RECOMMENDED_MIN_OUTPUT_TOKENS}"
            )
        if self.max_turns > ABSOLUTE_TURN_LIMIT:
            found.append(f"max_turns = {self.max_turns} > {ABSOLUTE_TURN_LIMIT}")
        if self.max_turns < 1:
            found.append(
                f"max_turns = {self.max_turns} < 1, every split will be empty"
            )
        return found

    # ------------------------------------------------------------------
    # Builder-style copies
    # ------------------------------------------------------------------

    def with_model(self, model: str) -> WindowPolicy:
        return replace(self, model=model)

    def with_max_output_tokens(self, max_output_tokens: int) -> WindowPolicy:
        return replace(self, max_output_tokens=max_output_tokens)

    def with_max_turns(self, max_turns: int) -> WindowPolicy:
        return replace(self, max_turns=max_turns)

    # ------------------------------------------------------------------
    # Limits
    # ------------------------------------------------------------------

    @property
    def effective_max_turns(self) -> int:
        return max(0, min(self.max_turns, ABSOLUTE_TURN_LIMIT))

    @property
    def output_reservation(self) -> int:
        """Tokens every recent window must leave free, never above the context.

        Raises UnsupportedModelError for models without a known context size.
        """
        context_size = self.estimator.context_size(self.model)
        if self.max_output_tokens is None:
            return context_size // 2
        return min(self.max_output_tokens, context_size)

    # ------------------------------------------------------------------
    # Boundary search
    # ------------------------------------------------------------------

    def boundary_by_turn_count(self, messages: Sequence[Any]) -> int:
        """Smallest index leaving at most ``effective_max_turns`` messages."""
        return max(0, len(messages) - self.effective_max_turns)

    def boundary_by_token_budget(self, messages: Sequence[Any]) -> int:
        """Smallest index whose suffix leaves the output reservation free.

        Falls back to ``len(messages) - 1`` when even the newest message alone
        is over budget; the window never becomes empty because of tokens.
        """
        return self._search_tokens(to_estimator_messages(messages)).boundary

    def _search_tokens(self, canonical: Sequence[CanonicalMessage]) -> _TokenSearch:
        if not canonical:
            return _TokenSearch(boundary=0)

        limit = self.output_reservation
        search = _TokenSearch(boundary=0)

        def leaves_enough(n: int) -> bool:
            remaining = self.estimator.estimate(self.model, canonical[n:])
            search.observed[n] = remaining
            return remaining >= limit

        # The single newest message is always kept, so it is never evaluated.
        last = len(canonical) - 1
        search.boundary = partition_point(0, last, leaves_enough)
        self._check_contract(search, last, limit)
        logger.debug(
            "token boundary %d of %d after %d estimates (limit %d)",
            search.boundary, len(canonical), len(search.observed), limit,
        )
        return search

    def _check_contract(self, search: _TokenSearch, last: int, limit: int) -> None:
        previous: Optional[tuple[int, int]] = None
        for n in sorted(search.observed):
            remaining = search.observed[n]
            if previous is not None and remaining < previous[1]:
                raise EstimatorContractError(
                    f"estimator is not monotonic for {self.model!r}: "
                    f"{previous[1]} tokens left from index {previous[0]} "
                    f"but {remaining} from index {n}"
                )
            previous = (n, remaining)

        if search.boundary < last:
            remaining = search.observed.get(search.boundary)
            if remaining is None or remaining < limit:
                raise EstimatorContractError(
                    f"window from index {search.boundary} does not leave "
                    f"{limit} tokens for {self.model!r}"
                )

    # ------------------------------------------------------------------
    # Splitting
    # ------------------------------------------------------------------

    def position(self, messages: Sequence[Any]) -> int:
        """Index where the recent window starts."""
        return self._locate(messages)[0]

    def split(self, messages: Sequence[Any]) -> Split:
        """Split into ``(outdated, recent)``.

        ``recent`` respects the turn limit always and the token reservation
        whenever any non-empty window can; ``outdated`` is everything before
        it, in order.
        """
        boundary = self.position(messages)
        return Split(messages[:boundary], messages[boundary:])

    def split_with_report(self, messages: Sequence[Any]) -> WindowReport:
        """Split and report remaining tokens and estimator usage."""
        boundary, turn_boundary, canonical, search = self._locate(messages)
        calls = len(search.observed)

        remaining: Optional[int] = None
        reservation = self.output_reservation if canonical else 0
        if boundary < len(messages):
            local = boundary - turn_boundary
            remaining = search.observed.get(local)
            if remaining is None:
                remaining = self.estimator.estimate(self.model, canonical[local:])
                calls += 1

        report = WindowReport(
            outdated=messages[:boundary],
            recent=messages[boundary:],
            turn_boundary=turn_boundary,
            boundary=boundary,
            output_reservation=reservation,
            remaining_tokens=remaining,
            estimator_calls=calls,
        )
        if not report.token_budget_met:
            logger.warning(
                "newest message leaves only %d of %d reserved tokens for %s",
                remaining, reservation, self.model,
            )
        return report

    def _locate(
        self, messages: Sequence[Any]
    ) -> tuple[int, int, list[CanonicalMessage], _TokenSearch]:
        turn_boundary = self.boundary_by_turn_count(messages)
        try:
            canonical = to_estimator_messages(messages[turn_boundary:])
        except InvalidMessageError as exc:
            raise exc.at(turn_boundary + (exc.position or 0)) from exc
        search = self._search_tokens(canonical)
        return turn_boundary + search.boundary, turn_boundary, canonical, search
