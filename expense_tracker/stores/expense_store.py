"""
Expense Store

Owns the in-memory expense collection, most recently added first.
Every successful add/update/remove writes the whole collection
through the injected snapshot storage before the call returns.

Invalid input is a silent no-op: nothing changes and nothing is
written. Callers that need to show form feedback run the same
ExpenseValidator themselves.
"""

import time
from datetime import datetime
from typing import Any, Callable, Iterable, Iterator, Optional
from uuid import uuid4

import structlog

from expense_tracker.models.expense import Expense
from expense_tracker.services.storage import SnapshotStorageInterface
from expense_tracker.validation import ExpenseValidator


logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]
IdGenerator = Callable[[], str]


def system_clock() -> datetime:
    """Current local time."""
    return datetime.now()


def generate_expense_id() -> str:
    """
    Create a new expense id.

    Uses a random UUID. On platforms without a secure random source
    (os.urandom raises NotImplementedError) it degrades to the current
    time in milliseconds, which is unique only as long as two expenses
    are never created within the same millisecond.
    """
    try:
        return str(uuid4())
    except NotImplementedError:
        logger.warning("secure_random_unavailable", fallback="timestamp_id")
        return str(time.time_ns() // 1_000_000)


class ExpenseStore:
    """
    Mutable collection of expenses backed by snapshot storage.

    Records themselves are immutable; an edit replaces the record at
    the same position with a new one keeping `id` and `created_at`.
    """

    def __init__(
        self,
        storage: SnapshotStorageInterface,
        expenses: Optional[Iterable[Expense]] = None,
        clock: Optional[Clock] = None,
        id_generator: Optional[IdGenerator] = None,
        validator: Optional[ExpenseValidator] = None,
    ):
        """
        Initialize the store.

        Args:
            storage: Snapshot persistence, written on every mutation
            expenses: Initial collection. Loaded from storage if None.
            clock: Source of "now" for created_at and default dates
            id_generator: Source of new expense ids
            validator: Input validator
        """
        self._storage = storage
        self._clock = clock or system_clock
        self._id_generator = id_generator or generate_expense_id
        self._validator = validator or ExpenseValidator()
        self._expenses: list[Expense] = (
            list(expenses) if expenses is not None else storage.load_expenses()
        )

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @property
    def expenses(self) -> tuple[Expense, ...]:
        """Snapshot of the collection in store order."""
        return tuple(self._expenses)

    def get(self, expense_id: str) -> Optional[Expense]:
        for expense in self._expenses:
            if expense.id == expense_id:
                return expense
        return None

    def __len__(self) -> int:
        return len(self._expenses)

    def __iter__(self) -> Iterator[Expense]:
        return iter(tuple(self._expenses))

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add(
        self,
        amount: Any,
        category: Any,
        description: Any,
        expense_date: Any = None,
    ) -> Optional[Expense]:
        """
        Record a new expense at the front of the collection.

        Args:
            amount: Positive number or numeric string
            category: Category id
            description: At least 2 characters after trimming
            expense_date: date or ISO string; defaults to today

        Returns:
            The new expense, or None if the input was rejected
        """
        if expense_date is None:
            expense_date = self._clock().date()

        result = self._validator.validate(amount, category, description, expense_date)
        if not result.is_valid:
            logger.info(
                "expense_rejected",
                operation="add",
                fields=[issue.field for issue in result.issues],
            )
            return None

        draft = result.draft
        expense = Expense(
            id=self._id_generator(),
            amount=draft.amount,
            category=draft.category,
            description=draft.description,
            date=draft.date,
            created_at=self._clock(),
        )

        self._commit([expense, *self._expenses])
        logger.info(
            "expense_added",
            expense_id=expense.id,
            amount=str(expense.amount),
            category=expense.category,
        )
        return expense

    def update(
        self,
        expense_id: str,
        amount: Any,
        category: Any,
        description: Any,
        expense_date: Any,
    ) -> Optional[Expense]:
        """
        Replace the editable fields of an existing expense.

        `id`, `created_at` and the record's position are kept.

        Returns:
            The updated expense, or None if the id is unknown or the
            input was rejected
        """
        index = self._index_of(expense_id)
        if index is None:
            logger.debug("expense_not_found", operation="update", expense_id=expense_id)
            return None

        result = self._validator.validate(amount, category, description, expense_date)
        if not result.is_valid:
            logger.info(
                "expense_rejected",
                operation="update",
                expense_id=expense_id,
                fields=[issue.field for issue in result.issues],
            )
            return None

        current = self._expenses[index]
        draft = result.draft
        updated = Expense(
            id=current.id,
            amount=draft.amount,
            category=draft.category,
            description=draft.description,
            date=draft.date,
            created_at=current.created_at,
        )

        expenses = list(self._expenses)
        expenses[index] = updated
        self._commit(expenses)
        logger.info("expense_updated", expense_id=expense_id)
        return updated

    def remove(self, expense_id: str) -> bool:
        """
        Delete an expense.

        Returns:
            True if it was deleted, False if no expense had that id
        """
        index = self._index_of(expense_id)
        if index is None:
            logger.debug("expense_not_found", operation="remove", expense_id=expense_id)
            return False

        expenses = list(self._expenses)
        del expenses[index]
        self._commit(expenses)
        logger.info("expense_removed", expense_id=expense_id)
        return True

    def _index_of(self, expense_id: str) -> Optional[int]:
        for index, expense in enumerate(self._expenses):
            if expense.id == expense_id:
                return index
        return None

    def _commit(self, expenses: list[Expense]) -> None:
        """Persist the new collection, then make it current."""
        self._storage.save_expenses(expenses)
        self._expenses = expenses
