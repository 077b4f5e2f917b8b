"""Unit tests for the arena and the secondary views."""

from __future__ import annotations

from decimal import Decimal

import pytest

from expense_index.arena import RecordArena
from expense_index.exceptions import StaleHandleError
from expense_index.indexes import CategoryIndex, DateIndex, RankHeap, equal_range
from expense_index.models import Expense, Handle


def _expense(amount: str = "1.00", category: str = "Misc", date: str = "2024-01-01") -> Expense:
    return Expense(amount=Decimal(amount), category=category, date=date)


def test_arena_tombstone_is_shared_by_handle() -> None:
    arena = RecordArena()
    handle = arena.insert(_expense())

    assert arena.is_deleted(handle) is False
    arena.mark_deleted(handle)
    assert arena.is_deleted(handle) is True
    assert arena.get(handle) == _expense()


def test_arena_release_invalidates_old_handles() -> None:
    arena = RecordArena()
    first = arena.insert(_expense("1.00"))
    arena.release(first)

    with pytest.raises(StaleHandleError):
        arena.get(first)

    reused = arena.insert(_expense("2.00"))
    assert reused == Handle(slot=first.slot, generation=first.generation + 1)
    assert arena.get(reused).amount == Decimal("2.00")
    assert arena.is_deleted(reused) is False
    assert len(arena) == 1


def test_arena_rejects_foreign_handles() -> None:
    with pytest.raises(StaleHandleError):
        RecordArena().get(Handle(slot=3, generation=0))


def test_category_index_tracks_buckets_and_totals() -> None:
    index = CategoryIndex()
    index.add("Food", Handle(0, 0), Decimal("2.50"))
    index.add("Food", Handle(1, 0), Decimal("1.25"))
    index.add("Rent", Handle(2, 0), Decimal("10.00"))

    assert index.bucket("Food") == (Handle(0, 0), Handle(1, 0))
    assert index.bucket("Travel") is None
    assert index.totals() == {"Food": Decimal("3.75"), "Rent": Decimal("10.00")}

    index.rebuild(lambda handle: handle.slot != 0)
    assert index.bucket("Food") == (Handle(1, 0),)
    assert index.totals()["Food"] == Decimal("3.75")


def test_rank_heap_descends_without_consuming() -> None:
    heap = RankHeap()
    heap.push(Handle(0, 0), Decimal("5"))
    heap.push(Handle(1, 0), Decimal("9"))
    heap.push(Handle(2, 0), Decimal("5"))

    order = [handle.slot for handle in heap.descending()]
    assert order == [1, 0, 2]
    assert [handle.slot for handle in heap.descending()] == order
    assert len(heap) == 3

    heap.rebuild(lambda handle: handle.slot != 1)
    assert [handle.slot for handle in heap.descending()] == [0, 2]


def test_date_index_equal_range_and_between() -> None:
    index = DateIndex()
    index.add("2024-01-05", Handle(0, 0))
    index.add("2024-01-01", Handle(1, 0))
    index.add("2024-01-05", Handle(2, 0))
    index.add("2024-02-01", Handle(3, 0))

    assert index.equal_range("2024-01-05") == (Handle(0, 0), Handle(2, 0))
    assert index.equal_range("2024-01-04") == ()
    assert index.between("2024-01-01", "2024-01-31") == (Handle(1, 0), Handle(0, 0), Handle(2, 0))
    assert index.distinct_dates() == 3


def test_equal_range_bounds() -> None:
    keys = ["a", "b", "b", "b", "c"]

    assert equal_range(keys, "b") == (1, 4)
    assert equal_range(keys, "bb") == (4, 4)
