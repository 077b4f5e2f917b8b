"""In-memory expense store with category, rank and date indexes."""

from __future__ import annotations

import logging
import threading
from decimal import Decimal
from typing import Dict, Iterator, List, Optional, Sequence

from .arena import RecordArena
from .config import StoreSettings
from .exceptions import PositionOutOfRangeError, StaleHandleError, ValidationError
from .indexes import CategoryIndex, DateIndex, RankHeap, equal_range
from .models import Expense, Handle, LogEntry, Selection, StoreStats
from .validators import parse_amount, validate_category, validate_count, validate_date

LOGGER = logging.getLogger(__name__)


class ExpenseStore:
    """Keeps the record log and its secondary views consistent.

    Records live once in a generational arena. The log, the category index,
    the rank heap and the date index all hold handles into that arena, so a
    logical delete is visible everywhere. Every public operation runs under
    one lock; the views are not consistent with each other mid-operation.
    """

    def __init__(self, settings: Optional[StoreSettings] = None) -> None:
        self._settings = settings or StoreSettings()
        self._lock = threading.RLock()
        self._arena = RecordArena()
        self._log: List[Handle] = []
        self._categories = CategoryIndex()
        self._ranks = RankHeap()
        self._dates = DateIndex()

    @property
    def settings(self) -> StoreSettings:
        return self._settings

    # Public API -----------------------------------------------------------
    def add(self, amount: object, category: object, date: object) -> int:
        """Record an expense and return its position in the log."""
        expense = Expense(
            amount=parse_amount(amount),
            category=validate_category(category),
            date=validate_date(date),
        )
        with self._lock:
            handle = self._arena.insert(expense)
            self._log.append(handle)
            self._categories.add(expense.category, handle, expense.amount)
            self._ranks.push(handle, expense.amount)
            self._dates.add(expense.date, handle)
            position = len(self._log) - 1
        LOGGER.debug("Added expense at position %s: %s", position, expense)
        return position

    def delete(self, position: int) -> None:
        """Tombstone the record at ``position``; repeating it is harmless."""
        with self._lock:
            handle = self._handle_at(position)
            self._arena.mark_deleted(handle)
        LOGGER.debug("Tombstoned expense at position %s", position)

    def get(self, position: int) -> LogEntry:
        with self._lock:
            handle = self._handle_at(position)
            return self._entry(position, handle)

    def list(self) -> Selection[LogEntry]:
        """Every log entry in log order, tombstoned ones included.

        Each iteration reads the current log, so positions stay valid after
        ``sort_by_date()`` or ``compact()``.
        """

        def produce() -> Iterator[LogEntry]:
            with self._lock:
                entries = [self._entry(position, handle) for position, handle in enumerate(self._log)]
            return iter(entries)

        return Selection(produce)

    def filter_by_category(self, category: object) -> Selection[Expense]:
        with self._lock:
            bucket = self._categories.bucket(str(category).strip())
        if bucket is None:
            return Selection(lambda: iter(()), found=False)
        return Selection(lambda: self._live(bucket))

    def category_totals(self) -> Dict[str, Decimal]:
        with self._lock:
            return self._categories.totals()

    def top_n(self, n: object) -> List[Expense]:
        """Return up to ``n`` live records, largest amount first.

        By default exactly ``n`` records are popped from a copy of the rank
        heap and tombstoned ones are dropped from the output, so fewer than
        ``n`` records can come back even when more live ones exist. With
        ``fill_top_n`` enabled popping continues until ``n`` live records are
        collected or the heap is exhausted.
        """
        count = validate_count(n)
        results: List[Expense] = []
        with self._lock:
            pops = 0
            for handle in self._ranks.descending():
                if self._settings.fill_top_n:
                    if len(results) >= count:
                        break
                elif pops >= count:
                    break
                pops += 1
                if not self._arena.is_deleted(handle):
                    results.append(self._arena.get(handle))
        return results

    def filter_by_date(self, target_date: object) -> Selection[Expense]:
        """Live records dated exactly ``target_date``.

        ``found`` is false when no record, tombstoned or not, carries the date.
        """
        target = validate_date(target_date)
        with self._lock:
            if self._settings.sort_log_on_date_filter:
                self._sort_log()
                keys = [self._arena.get(handle).date for handle in self._log]
                lo, hi = equal_range(keys, target)
                matches = tuple(self._log[lo:hi])
            else:
                matches = self._dates.equal_range(target)
        if not matches:
            LOGGER.debug("No expenses found for date %s", target)
            return Selection(lambda: iter(()), found=False)
        return Selection(lambda: self._live(matches))

    def filter_by_date_range(self, start: object, end: object) -> List[Expense]:
        first = validate_date(start, "start")
        last = validate_date(end, "end")
        if first > last:
            raise ValidationError("start must not be later than end")
        with self._lock:
            return list(self._live(self._dates.between(first, last)))

    def sort_by_date(self) -> None:
        """Reorder the log by date; later deletes address the new order."""
        with self._lock:
            self._sort_log()

    def compact(self) -> int:
        """Physically drop tombstoned records from every view.

        Surviving records move to lower positions. Category totals are kept.
        Returns the number of records removed.
        """
        with self._lock:
            doomed = [handle for handle in self._log if self._arena.is_deleted(handle)]
            if not doomed:
                return 0
            dropped = set(doomed)

            def keep(handle: Handle) -> bool:
                return handle not in dropped

            self._log = [handle for handle in self._log if keep(handle)]
            self._categories.rebuild(keep)
            self._ranks.rebuild(keep)
            self._dates.rebuild(keep)
            for handle in doomed:
                self._arena.release(handle)
        LOGGER.info("Compacted %s tombstoned expenses", len(doomed))
        return len(doomed)

    def stats(self) -> StoreStats:
        with self._lock:
            deleted = sum(1 for handle in self._log if self._arena.is_deleted(handle))
            return StoreStats(
                records=len(self._log),
                live=len(self._log) - deleted,
                deleted=deleted,
                categories=len(self._categories),
                dates=self._dates.distinct_dates(),
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._log)

    # Internal helpers -----------------------------------------------------
    def _handle_at(self, position: int) -> Handle:
        if isinstance(position, bool) or not isinstance(position, int):
            raise ValidationError("position must be an integer")
        if not 0 <= position < len(self._log):
            raise PositionOutOfRangeError(position, len(self._log))
        return self._log[position]

    def _entry(self, position: int, handle: Handle) -> LogEntry:
        return LogEntry(
            position=position,
            expense=self._arena.get(handle),
            deleted=self._arena.is_deleted(handle),
        )

    def _live(self, handles: Sequence[Handle]) -> Iterator[Expense]:
        for handle in handles:
            with self._lock:
                expense = self._live_expense(handle)
            if expense is not None:
                yield expense

    def _live_expense(self, handle: Handle) -> Optional[Expense]:
        try:
            if self._arena.is_deleted(handle):
                return None
            return self._arena.get(handle)
        except StaleHandleError:
            # Reclaimed by compact() after this snapshot was taken.
            return None

    def _sort_log(self) -> None:
        # list.sort is stable, so equal dates keep their relative order.
        self._log.sort(key=lambda handle: self._arena.get(handle).date)
        LOGGER.info("Sorted record log by date (%s entries)", len(self._log))
