"""Attack order enumeration.

Orderings are produced with the countdown QuickPerm scheme: every ordering
after the first is reached from its predecessor by swapping one pair of
positions, so each step costs O(1) instead of building a permutation from
scratch.
"""
from __future__ import annotations

from typing import Iterator, List


def attacker_orderings(count: int) -> Iterator[List[int]]:
    """Yield every ordering of ``range(count)`` exactly once.

    The identity ordering comes first.  ``count == 0`` yields nothing.  Each
    yielded list is a fresh copy that callers may keep.
    """
    if count <= 0:
        return
    order = list(range(count))
    # control[i] counts the swaps left at position i; control[count] is a sentinel.
    control = list(range(count + 1))
    yield list(order)
    i = 1
    while i < count:
        control[i] -= 1
        j = control[i] if i % 2 == 1 else 0
        order[j], order[i] = order[i], order[j]
        yield list(order)
        i = 1
        while control[i] == 0:
            control[i] = i
            i += 1


__all__ = ["attacker_orderings"]
