"""Reorder buffer restoring submission order over out-of-order completions.

Submitted ids are recorded in order with expect(). Completed items are
pushed onto a min-heap keyed by id and drained while the heap minimum is
the oldest id still awaited. Arrivals cost O(log k) for k buffered items;
nothing is re-sorted wholesale.
"""

import heapq
from collections import deque
from collections.abc import Iterator
from typing import Generic, Protocol, TypeVar


class SchedulerError(ValueError):
    """Raised when ids violate the ordering contract (reuse, gaps in order, unknown ids)."""


class HasId(Protocol):
    id: int


T = TypeVar("T", bound=HasId)


class ReorderBuffer(Generic[T]):
    """Min-heap of completed items, released strictly in submission order."""

    def __init__(self) -> None:
        self._heap: list[tuple[int, T]] = []
        self._expected: deque[int] = deque()
        self._outstanding: set[int] = set()
        self._last_expected: int | None = None

    def __len__(self) -> int:
        """Number of completed items held back waiting for an earlier id."""
        return len(self._heap)

    @property
    def next_id(self) -> int | None:
        """Oldest submitted id not yet released, or None if nothing is awaited."""
        return self._expected[0] if self._expected else None

    @property
    def awaiting(self) -> int:
        """Submitted ids not yet released (in flight or buffered)."""
        return len(self._expected)

    def expect(self, item_id: int) -> None:
        """Register the next submitted id. Ids must strictly increase."""
        if self._last_expected is not None and item_id <= self._last_expected:
            raise SchedulerError(
                f"ids must be strictly increasing: got {item_id} "
                f"after {self._last_expected}"
            )
        self._last_expected = item_id
        self._expected.append(item_id)
        self._outstanding.add(item_id)

    def push(self, item: T) -> None:
        """Accept a completed item. Each expected id may arrive exactly once."""
        if item.id not in self._outstanding:
            raise SchedulerError(
                f"unexpected or duplicate result id {item.id}"
            )
        self._outstanding.discard(item.id)
        heapq.heappush(self._heap, (item.id, item))

    def drain(self) -> Iterator[T]:
        """Release every buffered item that is next in submission order."""
        while self._heap and self._heap[0][0] == self._expected[0]:
            _, item = heapq.heappop(self._heap)
            self._expected.popleft()
            yield item
