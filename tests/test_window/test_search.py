"""Tests for partition_point."""

import pytest

from chatsplitter.window.search import partition_point


class TestPartitionPoint:
    def test_finds_first_true(self):
        assert partition_point(0, 10, lambda n: n >= 7) == 7

    def test_all_true_returns_lo(self):
        assert partition_point(3, 10, lambda n: True) == 3

    def test_none_true_returns_hi(self):
        assert partition_point(0, 10, lambda n: False) == 10

    def test_empty_range(self):
        calls = []
        assert partition_point(5, 5, lambda n: calls.append(n) or True) == 5
        assert calls == []

    def test_inverted_range_rejected(self):
        with pytest.raises(ValueError, match="empty search range"):
            partition_point(4, 2, lambda n: True)

    def test_logarithmic_evaluations(self):
        seen = []

        def pred(n):
            seen.append(n)
            return n >= 600_001

        assert partition_point(0, 1_000_000, pred) == 600_001
        assert len(seen) <= 20
        assert len(seen) == len(set(seen))

    def test_result_was_evaluated_true(self):
        seen = {}

        def pred(n):
            seen[n] = n >= 42
            return seen[n]

        result = partition_point(0, 100, pred)
        assert seen[result] is True
