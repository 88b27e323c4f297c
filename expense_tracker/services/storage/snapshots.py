"""
Snapshot Persistence over a Key-Value Store

Serializes the expense collection and the budget as JSON, each under
its own key:

    "expenses" -> [{"id", "amount", "category", "description", "date", "createdAt"}, ...]
    "budget"   -> {"total": ..., "categories": {"food": ..., ...}}

Snapshots are written whole on every change, never incrementally.

IMPORTANT: Loading never raises. A missing key yields the default
value; a value that is not valid JSON (or not a JSON list of expenses)
is logged and treated as missing. Individual expense records that do
not match the schema are logged and skipped, so one bad record never
costs the rest of the collection. There is no schema versioning, so
a format change simply invalidates old data.
"""

import json
from decimal import Decimal
from typing import Iterable, Optional

import structlog
from pydantic import ValidationError

from expense_tracker.models.expense import Budget, Expense
from expense_tracker.services.storage.interface import (
    KeyValueStorageInterface,
    SnapshotStorageInterface,
    StorageReadError,
)


logger = structlog.get_logger(__name__)

DEFAULT_EXPENSES_KEY = "expenses"
DEFAULT_BUDGET_KEY = "budget"


class KeyValueSnapshotStorage(SnapshotStorageInterface):
    """
    JSON snapshots of both entities on top of any key-value backend.
    """

    def __init__(
        self,
        backend: KeyValueStorageInterface,
        expenses_key: str = DEFAULT_EXPENSES_KEY,
        budget_key: str = DEFAULT_BUDGET_KEY,
        default_budget_total: Decimal = Decimal("50000"),
    ):
        """
        Initialize snapshot storage.

        Args:
            backend: Where the serialized snapshots are kept
            expenses_key: Key of the expense collection
            budget_key: Key of the budget
            default_budget_total: Overall limit of a fresh budget
        """
        if expenses_key == budget_key:
            raise ValueError("Expense and budget snapshots need different keys")
        self._backend = backend
        self._expenses_key = expenses_key
        self._budget_key = budget_key
        self._default_budget_total = default_budget_total

    @property
    def backend(self) -> KeyValueStorageInterface:
        return self._backend

    def default_budget(self) -> Budget:
        """Budget used on first run or after a corrupt snapshot."""
        return Budget(total=self._default_budget_total)

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def load_expenses(self) -> list[Expense]:
        raw = self._read(self._expenses_key)
        if raw is None:
            return []

        try:
            records = json.loads(raw, parse_float=Decimal)
        except json.JSONDecodeError as e:
            logger.warning("snapshot_parse_failed", key=self._expenses_key, error=str(e))
            return []

        if not isinstance(records, list):
            logger.warning(
                "snapshot_parse_failed",
                key=self._expenses_key,
                error=f"expected a list, got {type(records).__name__}",
            )
            return []

        expenses = []
        for index, record in enumerate(records):
            try:
                expenses.append(Expense.model_validate(record))
            except ValidationError as e:
                logger.warning(
                    "expense_record_skipped",
                    key=self._expenses_key,
                    index=index,
                    error_count=e.error_count(),
                    error=str(e).splitlines()[0],
                )

        logger.debug(
            "expenses_loaded",
            count=len(expenses),
            skipped=len(records) - len(expenses),
        )
        return expenses

    def load_budget(self) -> Budget:
        raw = self._read(self._budget_key)
        if raw is None:
            return self.default_budget()

        try:
            budget = Budget.model_validate(json.loads(raw, parse_float=Decimal))
        except json.JSONDecodeError as e:
            logger.warning("snapshot_parse_failed", key=self._budget_key, error=str(e))
            return self.default_budget()
        except ValidationError as e:
            logger.warning(
                "snapshot_parse_failed",
                key=self._budget_key,
                error_count=e.error_count(),
                error=str(e).splitlines()[0],
            )
            return self.default_budget()

        logger.debug("budget_loaded", total=str(budget.total), limits=len(budget.categories))
        return budget

    def _read(self, key: str) -> Optional[str]:
        """Read a raw snapshot; unreadable storage counts as absent."""
        try:
            return self._backend.get(key)
        except StorageReadError as e:
            logger.warning("snapshot_read_failed", key=key, error=str(e))
            return None

    # -------------------------------------------------------------------------
    # Saving
    # -------------------------------------------------------------------------

    def save_expenses(self, expenses: Iterable[Expense]) -> None:
        payload = [expense.to_snapshot_dict() for expense in expenses]
        self._backend.set(
            self._expenses_key,
            json.dumps(payload, ensure_ascii=False, indent=2),
        )
        logger.debug("expenses_saved", key=self._expenses_key, count=len(payload))

    def save_budget(self, budget: Budget) -> None:
        self._backend.set(
            self._budget_key,
            json.dumps(budget.model_dump(mode="json"), ensure_ascii=False, indent=2),
        )
        logger.debug("budget_saved", key=self._budget_key, total=str(budget.total))
