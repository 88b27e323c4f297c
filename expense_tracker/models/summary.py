"""
Summary Models

Read-only results produced by the aggregation engine for the
presentation layer. Nothing here is ever persisted.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from expense_tracker.models.category import Category
from expense_tracker.models.expense import Expense


class BudgetStatus(str, Enum):
    """How the month's spending compares to the overall budget."""
    WITHIN = "within"      # at or below the warning threshold
    NEARING = "nearing"    # above the warning threshold, not over
    OVER = "over"          # more than 100% used


class CategorySummary(BaseModel):
    """Spending and limit figures for one category this month."""

    category: Category
    spent: Decimal = Field(default=Decimal("0"), ge=0)
    limit: Optional[Decimal] = Field(
        default=None,
        description="Category limit, None when no limit is set"
    )
    remaining: Decimal = Field(default=Decimal("0"), ge=0)
    limit_used_percent: float = Field(
        default=0.0,
        ge=0,
        le=100,
        description="Share of the category limit used, capped at 100"
    )
    share_of_total: float = Field(
        default=0.0,
        ge=0,
        description="Share of all spending this month"
    )

    @property
    def has_limit(self) -> bool:
        return self.limit is not None and self.limit > 0


class MonthlySummary(BaseModel):
    """Everything the dashboard shows for the current month."""

    year: int
    month: int

    # Overall budget health
    budget_total: Decimal = Field(ge=0)
    total_spent: Decimal = Field(ge=0)
    budget_used_percent: float = Field(ge=0)
    remaining: Decimal = Field(ge=0)
    status: BudgetStatus
    days_left: int = Field(ge=0)

    # Transactions
    transaction_count: int = Field(ge=0)
    average_per_transaction: Decimal = Field(ge=0)

    # Breakdown
    category_totals: dict[str, Decimal] = Field(default_factory=dict)
    categories: list[CategorySummary] = Field(default_factory=list)
    top_categories: list[tuple[str, Decimal]] = Field(default_factory=list)

    # Current-month expenses after search/category filtering
    filtered: list[Expense] = Field(default_factory=list)

    @property
    def is_over_budget(self) -> bool:
        return self.status == BudgetStatus.OVER
