"""Sparse, sorted priority buckets used by the ``pre`` and ``post`` tiers."""

from __future__ import annotations

from bisect import bisect_left
from typing import Iterator

__all__ = ["PriorityIndex"]


class PriorityIndex:
    """Map priority numbers to subscriber ids, keeping the priorities sorted.

    ``order`` holds every populated priority in ascending order, and each
    bucket keeps its ids in subscription order. A priority is listed in
    ``order`` exactly when its bucket is non-empty.
    """

    def __init__(self) -> None:
        self._order: list[int] = []
        self._buckets: dict[int, list[str]] = {}

    @property
    def order(self) -> tuple[int, ...]:
        return tuple(self._order)

    def insert(self, priority: int, subscriber_id: str) -> None:
        """Append ``subscriber_id`` to the bucket for ``priority``."""
        bucket = self._buckets.get(priority)
        if bucket is None:
            bucket = self._buckets[priority] = []
            self._insert_key(priority)
        bucket.append(subscriber_id)

    def _insert_key(self, priority: int) -> None:
        position = bisect_left(self._order, priority)
        if position < len(self._order) and self._order[position] == priority:
            return
        self._order.insert(position, priority)

    def remove(self, priority: int, subscriber_id: str) -> bool:
        """Drop ``subscriber_id`` from its bucket; returns ``False`` when it was not there."""
        bucket = self._buckets.get(priority)
        if not bucket:
            return False
        try:
            bucket.remove(subscriber_id)
        except ValueError:
            return False
        if not bucket:
            del self._buckets[priority]
            position = bisect_left(self._order, priority)
            if position < len(self._order) and self._order[position] == priority:
                del self._order[position]
        return True

    def bucket(self, priority: int) -> tuple[str, ...]:
        return tuple(self._buckets.get(priority, ()))

    def highest(self) -> int | None:
        return self._order[-1] if self._order else None

    def next_below(self, priority: int) -> int | None:
        """The largest populated priority lower than ``priority``, if any."""
        position = bisect_left(self._order, priority)
        return self._order[position - 1] if position else None

    def descending(self) -> tuple[int, ...]:
        """Populated priorities, highest first."""
        return tuple(reversed(self._order))

    def ids(self) -> Iterator[str]:
        """Every id in publish order."""
        for priority in self.descending():
            yield from self._buckets[priority]

    def __contains__(self, priority: object) -> bool:
        return priority in self._buckets

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._buckets.values())

    def __repr__(self) -> str:
        return f"PriorityIndex(order={self._order!r})"
