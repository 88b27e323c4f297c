"""Stores package: the owners of all mutable state."""

from expense_tracker.stores.budget_store import BudgetStore
from expense_tracker.stores.expense_store import (
    Clock,
    ExpenseStore,
    IdGenerator,
    generate_expense_id,
    system_clock,
)

__all__ = [
    "BudgetStore",
    "Clock",
    "ExpenseStore",
    "IdGenerator",
    "generate_expense_id",
    "system_clock",
]
