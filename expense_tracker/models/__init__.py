"""
Data Models Package

This package contains all Pydantic models used by the expense tracker.
Everything held by the stores or written to storage conforms to these schemas.
"""

from expense_tracker.models.category import (
    ALL_CATEGORIES,
    CATEGORIES,
    FALLBACK_CATEGORY_ID,
    Category,
    category_ids,
    find_category,
    get_category,
)
from expense_tracker.models.expense import (
    Budget,
    Money,
    Expense,
    ExpenseDraft,
    ValidationIssue,
    ValidationResult,
)
from expense_tracker.models.summary import (
    BudgetStatus,
    CategorySummary,
    MonthlySummary,
)

__all__ = [
    # Category table
    "ALL_CATEGORIES",
    "CATEGORIES",
    "FALLBACK_CATEGORY_ID",
    "Category",
    "category_ids",
    "find_category",
    "get_category",
    # Records
    "Budget",
    "Money",
    "Expense",
    "ExpenseDraft",
    "ValidationIssue",
    "ValidationResult",
    # Summaries
    "BudgetStatus",
    "CategorySummary",
    "MonthlySummary",
]
