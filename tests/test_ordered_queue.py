from __future__ import annotations

from dataclasses import dataclass

import pytest

from mlfq_sim.core import DuplicateItemError, EmptyQueueError, OrderedQueue


@dataclass
class _Item:
    ident: int
    value: str = ""


def _queue(**kwargs) -> OrderedQueue[_Item]:
    return OrderedQueue(lambda item: item.ident, **kwargs)


def test_insert_orders_by_key_and_keeps_fifo_on_ties() -> None:
    queue = _queue()
    queue.insert(_Item(1), 2)
    queue.insert(_Item(2), 0)
    queue.insert(_Item(3), 2)
    queue.insert(_Item(4), 1)
    queue.insert(_Item(5), 0)

    assert [item.ident for item in queue] == [2, 5, 4, 1, 3]
    assert [key for key, _ in queue.items()] == [0, 0, 1, 2, 2]


def test_duplicate_identity_is_rejected_without_change() -> None:
    queue = _queue()
    assert queue.insert(_Item(1, "first"), 5)
    assert not queue.insert(_Item(1, "second"), 0)

    assert len(queue) == 1
    assert queue.front_key() == 5
    assert queue.peek_front().value == "first"


def test_strict_queue_raises_on_duplicate() -> None:
    queue = _queue(strict=True, name="ready")
    queue.insert(_Item(7), 0)
    with pytest.raises(DuplicateItemError, match="ready: item 7 already queued"):
        queue.insert(_Item(7), 1)


def test_identity_is_reusable_after_pop() -> None:
    queue = _queue(strict=True)
    queue.insert(_Item(1), 0)
    popped = queue.pop_front()
    assert popped.ident == 1
    assert 1 not in [item.ident for item in queue]
    assert queue.insert(_Item(1), 3)
    assert queue.front_key() == 3


def test_empty_queue_front_access_raises() -> None:
    queue = _queue(name="blocked")
    assert not queue
    with pytest.raises(EmptyQueueError, match="blocked is empty"):
        queue.peek_front()
    with pytest.raises(EmptyQueueError):
        queue.pop_front()
    with pytest.raises(EmptyQueueError):
        queue.front_key()


def test_update_front_replaces_head_in_place() -> None:
    queue = _queue()
    queue.insert(_Item(1, "a"), 1)
    queue.insert(_Item(2, "b"), 1)

    queue.update_front(_Item(1, "changed"))

    assert queue.front_key() == 1
    assert [(item.ident, item.value) for item in queue] == [(1, "changed"), (2, "b")]


def test_update_front_rejects_other_identity() -> None:
    queue = _queue()
    queue.insert(_Item(1), 0)
    queue.insert(_Item(2), 1)
    with pytest.raises(ValueError, match="identity mismatch"):
        queue.update_front(_Item(2))


def test_contains_and_clear() -> None:
    queue = _queue()
    queue.insert(_Item(1), 0)
    queue.insert(_Item(2), 0)
    assert _Item(2) in queue
    assert _Item(3) not in queue

    queue.clear()
    assert len(queue) == 0
    assert _Item(1) not in queue
    assert queue.insert(_Item(1), 0)
