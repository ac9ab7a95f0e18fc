"""Stable priority queue with identity de-duplication."""

from __future__ import annotations

import heapq
from itertools import count
from typing import Callable, Generic, Hashable, Iterator, TypeVar


T = TypeVar("T")


class QueueError(Exception):
    """Base class for ordered queue misuse."""


class EmptyQueueError(QueueError, IndexError):
    """Raised when reading the front of an empty queue."""


class DuplicateItemError(QueueError, ValueError):
    """Raised by strict queues when an identity is inserted twice."""


class OrderedQueue(Generic[T]):
    """Min-key queue, FIFO among equal keys.

    Entries are ``(key, seq, item)`` heap tuples; ``seq`` is a monotonically
    increasing insertion counter so ties never compare items.
    """

    def __init__(
        self,
        identity: Callable[[T], Hashable] = id,
        *,
        strict: bool = False,
        name: str = "queue",
    ) -> None:
        self._identity = identity
        self._strict = strict
        self.name = name
        self._heap: list[tuple[int, int, T]] = []
        self._members: set[Hashable] = set()
        self._seq = count()

    def insert(self, item: T, key: int) -> bool:
        ident = self._identity(item)
        if ident in self._members:
            if self._strict:
                raise DuplicateItemError(f"{self.name}: item {ident!r} already queued")
            return False
        heapq.heappush(self._heap, (key, next(self._seq), item))
        self._members.add(ident)
        return True

    def peek_front(self) -> T:
        return self._front()[2]

    def front_key(self) -> int:
        return self._front()[0]

    def pop_front(self) -> T:
        self._front()
        _, _, item = heapq.heappop(self._heap)
        self._members.discard(self._identity(item))
        return item

    def update_front(self, item: T) -> None:
        key, seq, current = self._front()
        if self._identity(current) != self._identity(item):
            raise ValueError(f"{self.name}: update_front identity mismatch")
        # Same (key, seq) keeps the heap invariant untouched.
        self._heap[0] = (key, seq, item)

    def items(self) -> list[tuple[int, T]]:
        return [(key, item) for key, _, item in sorted(self._heap, key=lambda entry: entry[:2])]

    def clear(self) -> None:
        self._heap.clear()
        self._members.clear()

    def _front(self) -> tuple[int, int, T]:
        if not self._heap:
            raise EmptyQueueError(f"{self.name} is empty")
        return self._heap[0]

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def __iter__(self) -> Iterator[T]:
        return iter([item for _, item in self.items()])

    def __contains__(self, item: object) -> bool:
        return self._identity(item) in self._members  # type: ignore[arg-type]

    def __repr__(self) -> str:
        return f"OrderedQueue(name={self.name!r}, size={len(self._heap)})"
