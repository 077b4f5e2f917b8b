"""Generational arena owning every expense record held by the store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, cast

from .exceptions import StaleHandleError
from .models import Expense, Handle


@dataclass
class _Slot:
    generation: int
    expense: Optional[Expense] = None
    deleted: bool = False


class RecordArena:
    """Stores records once and hands out handles that every view shares.

    Tombstones live on the slot, so marking a handle deleted is visible from
    every view holding that handle. Releasing a slot bumps its generation and
    puts it on the free list; handles issued before the release go stale.
    """

    def __init__(self) -> None:
        self._slots: List[_Slot] = []
        self._free: List[int] = []
        self._occupied = 0

    def insert(self, expense: Expense) -> Handle:
        if self._free:
            index = self._free.pop()
            slot = self._slots[index]
            slot.expense = expense
            slot.deleted = False
        else:
            index = len(self._slots)
            slot = _Slot(generation=0, expense=expense)
            self._slots.append(slot)
        self._occupied += 1
        return Handle(slot=index, generation=slot.generation)

    def get(self, handle: Handle) -> Expense:
        return cast(Expense, self._resolve(handle).expense)

    def is_deleted(self, handle: Handle) -> bool:
        return self._resolve(handle).deleted

    def mark_deleted(self, handle: Handle) -> None:
        self._resolve(handle).deleted = True

    def release(self, handle: Handle) -> None:
        slot = self._resolve(handle)
        slot.expense = None
        slot.deleted = False
        slot.generation += 1
        self._free.append(handle.slot)
        self._occupied -= 1

    def __len__(self) -> int:
        return self._occupied

    # Internal helpers -----------------------------------------------------
    def _resolve(self, handle: Handle) -> _Slot:
        if not 0 <= handle.slot < len(self._slots):
            raise StaleHandleError(f"Handle {handle} does not belong to this arena")
        slot = self._slots[handle.slot]
        if slot.generation != handle.generation or slot.expense is None:
            raise StaleHandleError(
                f"Handle {handle} is stale (slot generation is {slot.generation})"
            )
        return slot
