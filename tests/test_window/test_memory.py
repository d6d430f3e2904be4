"""Tests for ConversationMemory."""

from chatsplitter.estimator.base import CountingEstimator
from chatsplitter.messages.types import Message
from chatsplitter.window.memory import ConversationMemory
from chatsplitter.window.policy import WindowPolicy

from conftest import CharCostEstimator, turns


class TestConversationMemory:
    def setup_method(self):
        self.estimator = CountingEstimator(CharCostEstimator())
        self.policy = WindowPolicy("unit", max_turns=6, estimator=self.estimator)
        self.memory = ConversationMemory(self.policy)

    def test_empty(self):
        assert len(self.memory) == 0
        assert self.memory.recent == ()
        assert self.memory.outdated == ()

    def test_matches_fresh_split(self):
        self.memory.extend(turns(*[10] * 12))
        outdated, recent = self.policy.split(list(self.memory.messages))
        assert self.memory.recent == tuple(recent)
        assert self.memory.outdated == tuple(outdated)
        assert len(self.memory.recent) == 5

    def test_reads_are_cached(self):
        self.memory.extend(turns(*[10] * 12))
        _ = self.memory.recent
        calls = self.estimator.calls
        _ = self.memory.recent
        _ = self.memory.outdated
        assert self.estimator.calls == calls

    def test_append_invalidates(self):
        self.memory.extend(turns(10, 10))
        assert len(self.memory.recent) == 2
        big = Message.user("z" * 45)
        self.memory.append(big)
        assert self.memory.recent == (big,)
        assert len(self.memory.outdated) == 2

    def test_messages_are_never_dropped(self):
        log = turns(*[10] * 30)
        for message in log:
            self.memory.append(message)
        assert self.memory.messages == tuple(log)
        assert self.memory.outdated + self.memory.recent == tuple(log)

    def test_initial_messages(self):
        memory = ConversationMemory(self.policy, turns(1, 2, 3))
        assert len(memory) == 3
        assert memory.report.boundary == 0
