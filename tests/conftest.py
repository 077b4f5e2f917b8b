"""Shared fixtures for the expense store test-suite."""

from __future__ import annotations

import pytest

from expense_index.config import StoreSettings
from expense_index.store import ExpenseStore


@pytest.fixture()
def store() -> ExpenseStore:
    return ExpenseStore()


@pytest.fixture()
def scenario_store(store: ExpenseStore) -> ExpenseStore:
    """Store seeded with two Food expenses and one Rent expense."""
    store.add("12.50", "Food", "2024-01-05")
    store.add("40.00", "Rent", "2024-01-01")
    store.add("5.25", "Food", "2024-01-05")
    return store


@pytest.fixture()
def legacy_store() -> ExpenseStore:
    return ExpenseStore(StoreSettings(sort_log_on_date_filter=True))
