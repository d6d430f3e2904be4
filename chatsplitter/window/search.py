"""Boundary search over a monotonic predicate."""

from __future__ import annotations

from typing import Callable


def partition_point(lo: int, hi: int, predicate: Callable[[int], bool]) -> int:
    """Return the smallest ``n`` in ``[lo, hi)`` for which ``predicate(n)`` holds.

    ``predicate`` must be false for every index below the boundary and true
    from it onwards. Returns ``hi`` when it holds nowhere in the range. Each
    index is evaluated at most once, for O(log(hi - lo)) evaluations in total.
    Whenever the result is below ``hi``, ``predicate(result)`` was evaluated
    and returned true.
    """
    if lo > hi:
        raise ValueError(f"empty search range [{lo}, {hi})")
    while lo < hi:
        mid = lo + (hi - lo) // 2
        if predicate(mid):
            hi = mid
        else:
            lo = mid + 1
    return lo
