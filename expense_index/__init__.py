"""Indexed, in-memory expense store shared by the console and HTTP front ends."""

from .config import StoreSettings
from .exceptions import (
    PositionOutOfRangeError,
    RecordNotFoundError,
    StaleHandleError,
    ValidationError,
)
from .models import Expense, Handle, LogEntry, Selection, StoreStats
from .store import ExpenseStore

__all__ = [
    "Expense",
    "ExpenseStore",
    "Handle",
    "LogEntry",
    "PositionOutOfRangeError",
    "RecordNotFoundError",
    "Selection",
    "StaleHandleError",
    "StoreSettings",
    "StoreStats",
    "ValidationError",
]
