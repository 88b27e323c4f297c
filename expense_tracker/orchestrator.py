"""
Main Orchestrator for the Expense Tracker

This module ties together all the components:
1. Expense and budget stores (the only mutable state)
2. Snapshot storage (written through on every change)
3. Aggregation engine (recomputed on every read)
4. CSV export

Flow for every user action:
    UI event -> store mutation -> snapshot write -> summary recomputed

The presentation layer only talks to ExpenseTracker.
"""

from datetime import datetime
from typing import Any, Optional

import structlog

from expense_tracker.config import get_settings
from expense_tracker.logging_config import configure_logging
from expense_tracker.models.category import ALL_CATEGORIES
from expense_tracker.models.expense import Budget, Expense, ValidationResult
from expense_tracker.models.summary import MonthlySummary
from expense_tracker.queries import summarize
from expense_tracker.services.export import export_csv
from expense_tracker.services.storage import (
    InMemoryKeyValueStorage,
    KeyValueSnapshotStorage,
    KeyValueStorageInterface,
    LocalFileKeyValueStorage,
    SnapshotStorageInterface,
)
from expense_tracker.stores import (
    BudgetStore,
    Clock,
    ExpenseStore,
    IdGenerator,
    system_clock,
)
from expense_tracker.validation import ExpenseValidator


logger = structlog.get_logger(__name__)


class ExpenseTracker:
    """
    Facade over the stores, aggregation and export.

    All methods are synchronous; a mutation has been written to storage
    by the time it returns.
    """

    def __init__(
        self,
        expense_store: ExpenseStore,
        budget_store: BudgetStore,
        clock: Optional[Clock] = None,
        validator: Optional[ExpenseValidator] = None,
        nearing_budget_percent: float = 80.0,
    ):
        self._expenses = expense_store
        self._budget = budget_store
        self._clock = clock or system_clock
        self._validator = validator or ExpenseValidator()
        self._nearing_budget_percent = nearing_budget_percent

    @property
    def expense_store(self) -> ExpenseStore:
        return self._expenses

    @property
    def budget_store(self) -> BudgetStore:
        return self._budget

    @property
    def expenses(self) -> tuple[Expense, ...]:
        return self._expenses.expenses

    @property
    def budget(self) -> Budget:
        return self._budget.budget

    def now(self) -> datetime:
        return self._clock()

    # -------------------------------------------------------------------------
    # Expenses
    # -------------------------------------------------------------------------

    def validate_expense(
        self,
        amount: Any,
        category: Any,
        description: Any,
        expense_date: Any,
    ) -> ValidationResult:
        """Check form input without changing anything, for form feedback."""
        return self._validator.validate(amount, category, description, expense_date)

    def add_expense(
        self,
        amount: Any,
        category: Any,
        description: Any,
        expense_date: Any = None,
    ) -> Optional[Expense]:
        return self._expenses.add(amount, category, description, expense_date)

    def edit_expense(
        self,
        expense_id: str,
        amount: Any,
        category: Any,
        description: Any,
        expense_date: Any,
    ) -> Optional[Expense]:
        return self._expenses.update(expense_id, amount, category, description, expense_date)

    def delete_expense(self, expense_id: str) -> bool:
        return self._expenses.remove(expense_id)

    # -------------------------------------------------------------------------
    # Budget
    # -------------------------------------------------------------------------

    def set_total_budget(self, value: Any) -> bool:
        return self._budget.set_total(value)

    def set_category_budget(self, category_id: str, value: Any) -> bool:
        return self._budget.set_category_limit(category_id, value)

    def clear_category_budget(self, category_id: str) -> bool:
        return self._budget.clear_category_limit(category_id)

    # -------------------------------------------------------------------------
    # Derived views
    # -------------------------------------------------------------------------

    def summary(
        self,
        search_term: str = "",
        category_filter: str = ALL_CATEGORIES,
    ) -> MonthlySummary:
        """Current-month figures, recomputed from the stores on every call."""
        return summarize(
            self._expenses.expenses,
            self._budget.budget,
            self._clock(),
            search_term=search_term,
            category_filter=category_filter,
            nearing_percent=self._nearing_budget_percent,
        )

    def export_csv(self) -> str:
        """All expenses as CSV, ignoring any search or filter."""
        return export_csv(self._expenses.expenses)


def create_storage_backend() -> KeyValueStorageInterface:
    """Build the key-value backend selected in settings."""
    storage_settings = get_settings().storage
    if storage_settings.backend == "memory":
        return InMemoryKeyValueStorage()
    return LocalFileKeyValueStorage(
        storage_settings.data_dir,
        write_retries=storage_settings.write_retries,
    )


def create_app_components(
    storage: Optional[SnapshotStorageInterface] = None,
    clock: Optional[Clock] = None,
    id_generator: Optional[IdGenerator] = None,
    configure_logs: bool = True,
) -> ExpenseTracker:
    """
    Factory function to create the application.

    Loads both snapshots once; from then on the stores own the state.

    Args:
        storage: Snapshot storage. Built from settings if None.
        clock: Source of "now". Local wall-clock time if None.
        id_generator: Source of expense ids. Random UUIDs if None.
        configure_logs: Set up structlog from settings.

    Returns:
        Ready-to-use ExpenseTracker
    """
    settings = get_settings()
    app_settings = settings.app

    if configure_logs:
        level = "DEBUG" if app_settings.debug_mode else app_settings.log_level
        configure_logging(level, app_settings.log_json)

    if storage is None:
        storage_settings = settings.storage
        storage = KeyValueSnapshotStorage(
            create_storage_backend(),
            expenses_key=storage_settings.expenses_key,
            budget_key=storage_settings.budget_key,
            default_budget_total=settings.budget.default_total,
        )

    expenses, budget = storage.load()
    logger.info(
        "tracker_started",
        expense_count=len(expenses),
        budget_total=str(budget.total),
        environment=app_settings.app_environment,
    )

    validator = ExpenseValidator()
    return ExpenseTracker(
        expense_store=ExpenseStore(
            storage,
            expenses=expenses,
            clock=clock,
            id_generator=id_generator,
            validator=validator,
        ),
        budget_store=BudgetStore(storage, budget=budget),
        clock=clock,
        validator=validator,
        nearing_budget_percent=app_settings.nearing_budget_percent,
    )
