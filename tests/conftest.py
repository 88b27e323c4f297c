"""
Shared fixtures.

Test strategy:
1. Stores and aggregation run against in-memory storage
2. A fixed clock pins "now" to 16 Oct 2026, 09:30 local time
3. Ids are deterministic ("exp-1", "exp-2", ...)
4. File storage is only exercised under pytest's tmp_path
"""

from datetime import date, datetime
from itertools import count

import pytest

from expense_tracker.config import get_settings
from expense_tracker.models.expense import Expense
from expense_tracker.services.storage import (
    InMemoryKeyValueStorage,
    KeyValueSnapshotStorage,
)
from expense_tracker.stores import BudgetStore, ExpenseStore


NOW = datetime(2026, 10, 16, 9, 30)


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def id_generator():
    counter = count(1)
    return lambda: f"exp-{next(counter)}"


@pytest.fixture
def backend():
    return InMemoryKeyValueStorage()


@pytest.fixture
def snapshot_storage(backend):
    return KeyValueSnapshotStorage(backend, default_budget_total=50000.0)


@pytest.fixture
def expense_store(snapshot_storage, clock, id_generator):
    return ExpenseStore(snapshot_storage, clock=clock, id_generator=id_generator)


@pytest.fixture
def budget_store(snapshot_storage):
    return BudgetStore(snapshot_storage)


@pytest.fixture
def make_expense():
    """Build an Expense directly, bypassing the store."""
    counter = count(1)

    def _make(
        amount=100.0,
        category="food",
        description="Groceries",
        expense_date=date(2026, 10, 5),
        expense_id=None,
    ):
        n = next(counter)
        return Expense(
            id=expense_id or f"fixture-{n}",
            amount=amount,
            category=category,
            description=description,
            date=expense_date,
            created_at=datetime(2026, 10, 1, 8, 0, n),
        )

    return _make


@pytest.fixture
def fresh_settings():
    """Reload settings from the (monkeypatched) environment."""
    get_settings.cache_clear()
    yield get_settings
    get_settings.cache_clear()
