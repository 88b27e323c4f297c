"""
Budget Store

Holds the overall monthly limit and the per-category limits.
The budget is never deleted, only replaced; every successful change
writes the whole budget snapshot before the call returns.
"""

from decimal import Decimal
from typing import Any, Optional

import structlog

from expense_tracker.models.expense import Budget
from expense_tracker.services.storage import SnapshotStorageInterface
from expense_tracker.validation import parse_number


logger = structlog.get_logger(__name__)


class BudgetStore:
    """Owns the current Budget."""

    def __init__(
        self,
        storage: SnapshotStorageInterface,
        budget: Optional[Budget] = None,
    ):
        """
        Initialize the store.

        Args:
            storage: Snapshot persistence, written on every mutation
            budget: Initial budget. Loaded from storage if None.
        """
        self._storage = storage
        self._budget = budget if budget is not None else storage.load_budget()

    @property
    def budget(self) -> Budget:
        """Copy of the current budget; changing it does not affect the store."""
        return self._budget.model_copy(deep=True)

    @property
    def total(self) -> Decimal:
        return self._budget.total

    def limit_for(self, category_id: str) -> Optional[Decimal]:
        return self._budget.limit_for(category_id)

    def set_total(self, value: Any) -> bool:
        """
        Set the overall monthly limit.

        Any finite number is accepted; negative values are stored as 0.

        Returns:
            True if the total was stored, False if the value was rejected
        """
        number = parse_number(value)
        if number is None:
            logger.info("budget_rejected", operation="set_total", value=str(value))
            return False

        self._commit(Budget(
            total=max(Decimal("0"), number),
            categories=dict(self._budget.categories),
        ))
        logger.info("budget_total_set", total=str(self._budget.total))
        return True

    def set_category_limit(self, category_id: str, value: Any) -> bool:
        """
        Set one category's monthly limit, leaving the others untouched.

        Only finite, non-negative numbers are accepted. The category id
        is stored trimmed.

        Returns:
            True if the limit was stored, False if it was rejected
        """
        category_id = category_id.strip() if isinstance(category_id, str) else ""
        number = parse_number(value)
        if not category_id or number is None or number < 0:
            logger.info(
                "budget_rejected",
                operation="set_category_limit",
                category=category_id,
                value=str(value),
            )
            return False

        categories = dict(self._budget.categories)
        categories[category_id] = number
        self._commit(Budget(total=self._budget.total, categories=categories))
        logger.info("category_limit_set", category=category_id, limit=str(number))
        return True

    def clear_category_limit(self, category_id: str) -> bool:
        """
        Remove a category's limit so it shows as "not set" again.

        Returns:
            True if a limit was removed, False if none was set
        """
        if category_id not in self._budget.categories:
            return False

        categories = {
            key: limit
            for key, limit in self._budget.categories.items()
            if key != category_id
        }
        self._commit(Budget(total=self._budget.total, categories=categories))
        logger.info("category_limit_cleared", category=category_id)
        return True

    def _commit(self, budget: Budget) -> None:
        """Persist the new budget, then make it current."""
        self._storage.save_budget(budget)
        self._budget = budget
