"""Aggregation package: pure functions over expenses and the budget."""

from expense_tracker.queries.aggregation import (
    average_per_transaction,
    budget_status,
    budget_used_percent,
    category_budget_used_percent,
    category_remaining,
    category_totals,
    current_month_subset,
    days_left,
    filter_expenses,
    remaining,
    share_of_total,
    summarize,
    top_categories,
    total_spent,
)

__all__ = [
    "average_per_transaction",
    "budget_status",
    "budget_used_percent",
    "category_budget_used_percent",
    "category_remaining",
    "category_totals",
    "current_month_subset",
    "days_left",
    "filter_expenses",
    "remaining",
    "share_of_total",
    "summarize",
    "top_categories",
    "total_spent",
]
