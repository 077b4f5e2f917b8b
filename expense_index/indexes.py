"""Secondary views kept in step with the record log.

Each view stores arena handles rather than copies of the records, so a
tombstone set through the log is seen by category, rank and date queries.
"""

from __future__ import annotations

import heapq
import itertools
from bisect import bisect_left, bisect_right
from decimal import Decimal
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from .models import Handle

KeepPredicate = Callable[[Handle], bool]


class CategoryIndex:
    """Per-category handle buckets plus running totals."""

    def __init__(self) -> None:
        self._buckets: Dict[str, List[Handle]] = {}
        self._totals: Dict[str, Decimal] = {}

    def add(self, category: str, handle: Handle, amount: Decimal) -> None:
        self._buckets.setdefault(category, []).append(handle)
        # Totals only ever grow; deletes and compaction leave them alone.
        self._totals[category] = self._totals.get(category, Decimal("0.00")) + amount

    def bucket(self, category: str) -> Optional[Tuple[Handle, ...]]:
        """Return a snapshot of the bucket, or None for an unknown category."""
        handles = self._buckets.get(category)
        if handles is None:
            return None
        return tuple(handles)

    def totals(self) -> Dict[str, Decimal]:
        return dict(self._totals)

    def rebuild(self, keep: KeepPredicate) -> None:
        for category, handles in self._buckets.items():
            self._buckets[category] = [handle for handle in handles if keep(handle)]

    def __len__(self) -> int:
        return len(self._buckets)


class RankHeap:
    """Max-heap of handles keyed by amount, ties in insertion order."""

    def __init__(self) -> None:
        self._heap: List[Tuple[Decimal, int, Handle]] = []
        self._sequence = itertools.count()

    def push(self, handle: Handle, amount: Decimal) -> None:
        # heapq is a min-heap, so amounts are negated.
        heapq.heappush(self._heap, (-amount, next(self._sequence), handle))

    def descending(self) -> Iterator[Handle]:
        """Pop handles largest-first from a disposable copy of the heap."""
        heap = list(self._heap)
        while heap:
            yield heapq.heappop(heap)[2]

    def rebuild(self, keep: KeepPredicate) -> None:
        self._heap = [entry for entry in self._heap if keep(entry[2])]
        heapq.heapify(self._heap)

    def __len__(self) -> int:
        return len(self._heap)


class DateIndex:
    """Date-ordered handles searched with binary search.

    ``_keys`` and ``_handles`` are parallel lists sorted by date; records with
    the same date keep their insertion order.
    """

    def __init__(self) -> None:
        self._keys: List[str] = []
        self._handles: List[Handle] = []

    def add(self, date: str, handle: Handle) -> None:
        index = bisect_right(self._keys, date)
        self._keys.insert(index, date)
        self._handles.insert(index, handle)

    def equal_range(self, date: str) -> Tuple[Handle, ...]:
        lo, hi = equal_range(self._keys, date)
        return tuple(self._handles[lo:hi])

    def between(self, start: str, end: str) -> Tuple[Handle, ...]:
        lo = bisect_left(self._keys, start)
        hi = bisect_right(self._keys, end)
        return tuple(self._handles[lo:hi])

    def distinct_dates(self) -> int:
        return len(set(self._keys))

    def rebuild(self, keep: KeepPredicate) -> None:
        kept = [(key, handle) for key, handle in zip(self._keys, self._handles) if keep(handle)]
        self._keys = [key for key, _ in kept]
        self._handles = [handle for _, handle in kept]

    def __len__(self) -> int:
        return len(self._handles)


def equal_range(keys: Sequence[str], target: str) -> Tuple[int, int]:
    """Return the half-open bounds of ``target`` within sorted ``keys``."""
    return bisect_left(keys, target), bisect_right(keys, target)


__all__ = ["CategoryIndex", "DateIndex", "RankHeap", "equal_range"]
