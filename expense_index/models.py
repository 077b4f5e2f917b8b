"""Data models for the indexed expense store."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Dict, Generic, Iterator, List, TypeVar

__all__ = ["Expense", "Handle", "LogEntry", "Selection", "StoreStats", "format_amount"]

T = TypeVar("T")


def format_amount(amount: Decimal) -> str:
    """Render an amount with exactly two fraction digits."""
    return f"{amount:.2f}"


@dataclass(frozen=True)
class Expense:
    amount: Decimal
    category: str
    date: str

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the expense to JSON-friendly natives."""
        return {
            "amount": format_amount(self.amount),
            "category": self.category,
            "date": self.date,
        }


@dataclass(frozen=True)
class Handle:
    """Stable reference to an arena slot, tagged with the slot generation."""

    slot: int
    generation: int


@dataclass(frozen=True)
class LogEntry:
    position: int
    expense: Expense
    deleted: bool

    def to_dict(self) -> Dict[str, Any]:
        return {"position": self.position, "deleted": self.deleted, **self.expense.to_dict()}


@dataclass(frozen=True)
class StoreStats:
    records: int
    live: int
    deleted: int
    categories: int
    dates: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "records": self.records,
            "live": self.live,
            "deleted": self.deleted,
            "categories": self.categories,
            "dates": self.dates,
        }


class Selection(Generic[T]):
    """Restartable, lazily evaluated result of a store query.

    Every iteration calls the producer again, so a selection can be walked
    any number of times and always reflects the current tombstone state.
    ``found`` is false when the query key (category or date) is unknown.
    """

    def __init__(self, producer: Callable[[], Iterator[T]], *, found: bool = True) -> None:
        self._producer = producer
        self.found = found

    def __iter__(self) -> Iterator[T]:
        return self._producer()

    def to_list(self) -> List[T]:
        return list(self)
