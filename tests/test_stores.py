"""
Tests for the expense and budget stores.

Test strategy:
1. Successful mutations change state and write the snapshot
2. Rejected input leaves state and storage untouched
3. A failing write propagates and leaves state untouched
"""

import json
from decimal import Decimal

import pytest
from datetime import date, datetime

from expense_tracker.models.expense import Budget
from expense_tracker.services.storage import (
    InMemoryKeyValueStorage,
    KeyValueSnapshotStorage,
    StorageWriteError,
)
from expense_tracker.stores import BudgetStore, ExpenseStore, generate_expense_id
from expense_tracker.stores import expense_store as expense_store_module


class FailingBackend(InMemoryKeyValueStorage):
    """Backend whose writes always fail."""

    def set(self, key, value):
        raise StorageWriteError(f"disk full while writing {key}")


class TestExpenseStoreAdd:
    """Tests for ExpenseStore.add."""

    def test_add_returns_new_expense(self, expense_store):
        """Test that a valid add creates a record with generated fields."""
        expense = expense_store.add("250", "food", "Lunch", "2026-10-02")

        assert expense is not None
        assert expense.id == "exp-1"
        assert expense.amount == 250.0
        assert expense.date == date(2026, 10, 2)
        assert expense.created_at == datetime(2026, 10, 16, 9, 30)
        assert len(expense_store) == 1

    def test_add_prepends(self, expense_store):
        """Test that the newest expense comes first."""
        first = expense_store.add(10, "food", "Tea", "2026-10-01")
        second = expense_store.add(20, "transport", "Bus", "2026-10-02")

        assert expense_store.expenses == (second, first)

    def test_add_defaults_date_to_today(self, expense_store):
        expense = expense_store.add(10, "food", "Tea")
        assert expense.date == date(2026, 10, 16)

    def test_add_writes_snapshot(self, expense_store, snapshot_storage):
        """Test that the stored collection matches the store after add."""
        expense_store.add(10, "food", "Tea", "2026-10-01")
        expense_store.add(20, "transport", "Bus", "2026-10-02")

        assert tuple(snapshot_storage.load_expenses()) == expense_store.expenses

    @pytest.mark.parametrize("amount,category,description,expense_date", [
        ("0", "food", "Lunch", "2026-10-02"),
        ("-5", "food", "Lunch", "2026-10-02"),
        ("abc", "food", "Lunch", "2026-10-02"),
        ("10", "", "Lunch", "2026-10-02"),
        ("10", "food", "a", "2026-10-02"),
        ("10", "food", "   ", "2026-10-02"),
        ("10", "food", "Lunch", "not a date"),
        (10**400, "food", "Lunch", "2026-10-02"),
        ("1e400", "food", "Lunch", "2026-10-02"),
    ])
    def test_invalid_add_is_noop(self, expense_store, backend, amount, category, description, expense_date):
        """Test that rejected input changes nothing and writes nothing."""
        result = expense_store.add(amount, category, description, expense_date)

        assert result is None
        assert len(expense_store) == 0
        assert backend.get("expenses") is None

    def test_add_stores_trimmed_description(self, expense_store):
        expense = expense_store.add(10, "food", "  Coffee beans  ", "2026-10-01")
        assert expense.description == "Coffee beans"


class TestExpenseStoreUpdate:
    """Tests for ExpenseStore.update."""

    def test_update_keeps_identity_and_position(self, expense_store):
        """Test that id, created_at and position survive an edit."""
        expense_store.add(10, "food", "Tea", "2026-10-01")
        middle = expense_store.add(20, "transport", "Bus", "2026-10-02")
        expense_store.add(30, "bills", "Power", "2026-10-03")

        updated = expense_store.update(middle.id, "25.5", "travel", "Train", "2026-10-04")

        assert updated.id == middle.id
        assert updated.created_at == middle.created_at
        assert updated.amount == 25.5
        assert updated.category == "travel"
        assert updated.description == "Train"
        assert updated.date == date(2026, 10, 4)
        assert expense_store.expenses[1] == updated
        assert len(expense_store) == 3

    def test_update_writes_snapshot(self, expense_store, snapshot_storage):
        expense = expense_store.add(10, "food", "Tea", "2026-10-01")
        expense_store.update(expense.id, 12, "food", "Green tea", "2026-10-01")

        assert snapshot_storage.load_expenses()[0].description == "Green tea"

    def test_update_unknown_id(self, expense_store):
        """Test that editing a missing expense changes nothing."""
        expense_store.add(10, "food", "Tea", "2026-10-01")
        before = expense_store.expenses

        assert expense_store.update("missing", 12, "food", "Tea", "2026-10-01") is None
        assert expense_store.expenses == before

    def test_invalid_update_is_noop(self, expense_store, snapshot_storage):
        """Test that rejected input leaves the record and snapshot as they were."""
        expense = expense_store.add(10, "food", "Tea", "2026-10-01")

        assert expense_store.update(expense.id, "-1", "food", "Tea", "2026-10-01") is None
        assert expense_store.get(expense.id) == expense
        assert snapshot_storage.load_expenses() == [expense]


class TestExpenseStoreRemove:
    """Tests for ExpenseStore.remove."""

    def test_remove(self, expense_store, snapshot_storage):
        """Test that a removed expense is gone from state and storage."""
        tea = expense_store.add(10, "food", "Tea", "2026-10-01")
        bus = expense_store.add(20, "transport", "Bus", "2026-10-02")

        assert expense_store.remove(tea.id) is True
        assert expense_store.expenses == (bus,)
        assert snapshot_storage.load_expenses() == [bus]

    def test_remove_is_idempotent(self, expense_store):
        """Test that removing twice equals removing once."""
        tea = expense_store.add(10, "food", "Tea", "2026-10-01")

        assert expense_store.remove(tea.id) is True
        assert expense_store.remove(tea.id) is False
        assert len(expense_store) == 0

    def test_remove_unknown_id(self, expense_store):
        expense_store.add(10, "food", "Tea", "2026-10-01")
        assert expense_store.remove("missing") is False
        assert len(expense_store) == 1


class TestExpenseStoreLoading:
    """Tests for initial state."""

    def test_loads_from_storage(self, snapshot_storage, make_expense, clock):
        """Test that a store without initial data reads the snapshot."""
        saved = [make_expense(), make_expense(amount=5, description="Snack")]
        snapshot_storage.save_expenses(saved)

        store = ExpenseStore(snapshot_storage, clock=clock)

        assert list(store) == saved

    def test_initial_expenses_take_precedence(self, snapshot_storage, make_expense):
        snapshot_storage.save_expenses([make_expense()])
        store = ExpenseStore(snapshot_storage, expenses=[])
        assert len(store) == 0


class TestExpenseStoreWriteFailure:
    """Tests for storage failures during a mutation."""

    def test_failed_write_keeps_state(self, make_expense, clock):
        """Test that the error propagates and the collection is unchanged."""
        existing = make_expense()
        storage = KeyValueSnapshotStorage(FailingBackend())
        store = ExpenseStore(storage, expenses=[existing], clock=clock)

        with pytest.raises(StorageWriteError):
            store.add(10, "food", "Tea", "2026-10-01")
        with pytest.raises(StorageWriteError):
            store.remove(existing.id)

        assert store.expenses == (existing,)


class TestGenerateExpenseId:
    """Tests for id generation."""

    def test_ids_are_unique(self):
        ids = {generate_expense_id() for _ in range(100)}
        assert len(ids) == 100

    def test_falls_back_to_timestamp(self, monkeypatch):
        """Test the millisecond timestamp id without a secure random source."""
        def no_random():
            raise NotImplementedError("no urandom")

        monkeypatch.setattr(expense_store_module, "uuid4", no_random)

        expense_id = generate_expense_id()
        assert expense_id.isdigit()


class TestBudgetStoreTotal:
    """Tests for BudgetStore.set_total."""

    def test_set_total(self, budget_store, snapshot_storage):
        """Test that a valid total is stored and written."""
        assert budget_store.set_total("1000") is True
        assert budget_store.total == 1000.0
        assert snapshot_storage.load_budget().total == 1000.0

    def test_negative_total_clamped_to_zero(self, budget_store):
        assert budget_store.set_total(-250) is True
        assert budget_store.total == 0.0

    @pytest.mark.parametrize("value", ["abc", "", None, "nan", "inf", 10**400, "-1e400"])
    def test_non_numeric_total_rejected(self, budget_store, backend, value):
        """Test that non-numbers leave the total alone and write nothing."""
        assert budget_store.set_total(value) is False
        assert budget_store.total == 50000.0
        assert backend.get("budget") is None

    def test_set_total_keeps_category_limits(self, budget_store):
        budget_store.set_category_limit("food", 300)
        budget_store.set_total(900)
        assert budget_store.limit_for("food") == 300.0


class TestBudgetStoreCategoryLimits:
    """Tests for per-category limits."""

    def test_set_category_limit(self, budget_store, snapshot_storage):
        assert budget_store.set_category_limit("food", "500") is True
        assert budget_store.limit_for("food") == 500.0
        assert snapshot_storage.load_budget().categories == {"food": 500.0}

    def test_only_target_category_changes(self, budget_store):
        """Test that other limits are untouched."""
        budget_store.set_category_limit("food", 500)
        budget_store.set_category_limit("travel", 800)
        budget_store.set_category_limit("food", 450)

        assert budget_store.budget.categories == {"food": 450.0, "travel": 800.0}

    @pytest.mark.parametrize("value", [-5, "-0.01", "abc", None, "nan"])
    def test_invalid_limit_rejected(self, budget_store, value):
        """Test that negative or non-numeric limits keep the previous value."""
        budget_store.set_category_limit("food", 200)

        assert budget_store.set_category_limit("food", value) is False
        assert budget_store.limit_for("food") == 200.0

    @pytest.mark.parametrize("category_id", ["", "   ", "\t\n", None])
    def test_blank_category_id_rejected(self, budget_store, backend, category_id):
        """Test that a limit needs a non-blank category id."""
        assert budget_store.set_category_limit(category_id, 5) is False
        assert budget_store.budget.categories == {}
        assert backend.get("budget") is None

    def test_category_id_is_trimmed(self, budget_store):
        assert budget_store.set_category_limit(" food ", 5) is True
        assert budget_store.budget.categories == {"food": 5}
        assert budget_store.limit_for("food") == 5

    def test_limits_are_exact(self, budget_store):
        budget_store.set_category_limit("food", "0.3")
        assert budget_store.limit_for("food") == Decimal("0.3")

    def test_invalid_limit_on_unset_category(self, budget_store):
        assert budget_store.set_category_limit("food", -5) is False
        assert budget_store.limit_for("food") is None

    def test_zero_limit_is_distinct_from_unset(self, budget_store):
        assert budget_store.set_category_limit("food", 0) is True
        assert budget_store.limit_for("food") == 0.0
        assert budget_store.limit_for("travel") is None

    def test_clear_category_limit(self, budget_store, snapshot_storage):
        budget_store.set_category_limit("food", 500)

        assert budget_store.clear_category_limit("food") is True
        assert budget_store.limit_for("food") is None
        assert snapshot_storage.load_budget().categories == {}
        assert budget_store.clear_category_limit("food") is False


class TestBudgetStoreStorage:
    """Tests for budget persistence."""

    def test_loads_from_storage(self, snapshot_storage):
        snapshot_storage.save_budget(Budget(total=1200, categories={"bills": 400}))
        store = BudgetStore(snapshot_storage)
        assert store.total == 1200.0
        assert store.limit_for("bills") == 400.0

    def test_budget_write_leaves_expenses_alone(self, expense_store, budget_store, backend):
        """Test that the two snapshots are written independently."""
        expense_store.add(10, "food", "Tea", "2026-10-01")
        before = backend.get("expenses")

        budget_store.set_total(1000)

        assert backend.get("expenses") == before
        assert json.loads(backend.get("budget")) == {"total": 1000.0, "categories": {}}

    def test_failed_write_keeps_budget(self):
        store = BudgetStore(KeyValueSnapshotStorage(FailingBackend()))
        with pytest.raises(StorageWriteError):
            store.set_total(10)
        assert store.total == 50000.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
