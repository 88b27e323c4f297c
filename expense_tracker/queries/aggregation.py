"""
Aggregation Engine

DESIGN DECISION: Every figure on the dashboard is computed from the
current expense collection and budget by the pure functions below.
Nothing is cached or maintained incrementally; the collection of one
person's monthly spending is small enough to recompute on every read.

Conventions:
- Only the calendar month of "now" is ever aggregated.
- Percentages guard against a zero or missing limit by returning 0.
- Amounts "remaining" never go below 0.
- Money stays Decimal; only percentages are floats.
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from expense_tracker.models.category import ALL_CATEGORIES, CATEGORIES
from expense_tracker.models.expense import Budget, Expense
from expense_tracker.models.summary import (
    BudgetStatus,
    CategorySummary,
    MonthlySummary,
)


# Budget usage above this percentage triggers a "nearing the limit" warning
NEARING_BUDGET_PERCENT = 80.0

# Number of categories listed under "Top Categories"
TOP_CATEGORY_COUNT = 5

# Month length assumed by days_left()
DAYS_IN_MONTH = 31

ZERO = Decimal("0")


# =============================================================================
# SELECTION
# =============================================================================

def current_month_subset(expenses: Iterable[Expense], now: datetime) -> list[Expense]:
    """
    Expenses dated in the same calendar year and month as `now`.

    Expense dates are plain calendar days and `now` is local time, so
    no timezone conversion takes place.
    """
    return [
        expense
        for expense in expenses
        if expense.date.year == now.year and expense.date.month == now.month
    ]


def filter_expenses(
    expenses: Iterable[Expense],
    search_term: str = "",
    category_filter: str = ALL_CATEGORIES,
) -> list[Expense]:
    """
    Apply the search box and the category dropdown.

    The search term matches, case-insensitively, anywhere in the
    description or the category id. The category filter is an exact
    match unless it is the "all" sentinel. Both must hold; input order
    is preserved.
    """
    term = (search_term or "").strip().lower()
    selected = category_filter or ALL_CATEGORIES

    result = []
    for expense in expenses:
        if term and term not in expense.description.lower() and term not in expense.category.lower():
            continue
        if selected != ALL_CATEGORIES and expense.category != selected:
            continue
        result.append(expense)
    return result


# =============================================================================
# TOTALS
# =============================================================================

def total_spent(expenses: Iterable[Expense]) -> Decimal:
    """Sum of amounts; 0 for no expenses."""
    return sum((expense.amount for expense in expenses), ZERO)


def category_totals(expenses: Iterable[Expense]) -> dict[str, Decimal]:
    """
    Spending per category id.

    Categories without spending are absent; use `.get(id, ZERO)`.
    """
    totals: dict[str, Decimal] = {}
    for expense in expenses:
        totals[expense.category] = totals.get(expense.category, ZERO) + expense.amount
    return totals


def average_per_transaction(expenses: Sequence[Expense]) -> Decimal:
    if not expenses:
        return ZERO
    return total_spent(expenses) / len(expenses)


def top_categories(
    totals: dict[str, Decimal],
    limit: int = TOP_CATEGORY_COUNT,
) -> list[tuple[str, Decimal]]:
    """Highest-spending categories first."""
    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return ranked[:limit]


# =============================================================================
# BUDGET HEALTH
# =============================================================================

def budget_used_percent(total: Decimal, budget_total: Decimal) -> float:
    """
    Share of the overall budget used, in percent.

    Returns 0 when no budget is set (budget_total <= 0) rather than
    dividing by zero. May exceed 100.
    """
    if budget_total > 0:
        return float(total / budget_total * 100)
    return 0.0


def remaining(budget_total: Decimal, spent: Decimal) -> Decimal:
    return max(ZERO, budget_total - spent)


def category_remaining(category_budget: Optional[Decimal], spent: Decimal) -> Decimal:
    return max(ZERO, (category_budget or ZERO) - spent)


def category_budget_used_percent(spent: Decimal, category_budget: Optional[Decimal]) -> float:
    """Share of a category limit used, capped at 100; 0 without a limit."""
    if category_budget is None or category_budget <= 0:
        return 0.0
    return min(float(spent / category_budget * 100), 100.0)


def share_of_total(spent: Decimal, total: Decimal) -> float:
    """A category's percentage of all spending this month."""
    if total > 0:
        return float(spent / total * 100)
    return 0.0


def budget_status(
    used_percent: float,
    nearing_percent: float = NEARING_BUDGET_PERCENT,
) -> BudgetStatus:
    if used_percent > 100:
        return BudgetStatus.OVER
    if used_percent > nearing_percent:
        return BudgetStatus.NEARING
    return BudgetStatus.WITHIN


def days_left(now: datetime) -> int:
    """
    Days left in the month, counted against a fixed 31-day month.

    Known quirk: overstates the figure for months shorter than 31 days.
    """
    return max(0, DAYS_IN_MONTH - now.day)


# =============================================================================
# SUMMARY
# =============================================================================

def summarize_categories(
    totals: dict[str, Decimal],
    budget: Budget,
    month_total: Decimal,
) -> list[CategorySummary]:
    """One summary per entry of the category table, in table order."""
    summaries = []
    for category in CATEGORIES:
        spent = totals.get(category.id, ZERO)
        limit = budget.limit_for(category.id)
        summaries.append(CategorySummary(
            category=category,
            spent=spent,
            limit=limit,
            remaining=category_remaining(limit, spent),
            limit_used_percent=category_budget_used_percent(spent, limit),
            share_of_total=share_of_total(spent, month_total),
        ))
    return summaries


def summarize(
    expenses: Iterable[Expense],
    budget: Budget,
    now: datetime,
    search_term: str = "",
    category_filter: str = ALL_CATEGORIES,
    nearing_percent: float = NEARING_BUDGET_PERCENT,
) -> MonthlySummary:
    """
    Compute every dashboard figure for the month containing `now`.

    Args:
        expenses: Full collection in store order
        budget: Current budget
        now: Reference time selecting the month
        search_term: Free-text search applied to the listed expenses
        category_filter: Category id or "all" for the listed expenses
        nearing_percent: Threshold for the "nearing the limit" status

    Returns:
        MonthlySummary. Totals cover the whole month; only `filtered`
        is affected by the search term and category filter.
    """
    month = current_month_subset(expenses, now)
    spent = total_spent(month)
    totals = category_totals(month)
    used = budget_used_percent(spent, budget.total)

    return MonthlySummary(
        year=now.year,
        month=now.month,
        budget_total=budget.total,
        total_spent=spent,
        budget_used_percent=used,
        remaining=remaining(budget.total, spent),
        status=budget_status(used, nearing_percent),
        days_left=days_left(now),
        transaction_count=len(month),
        average_per_transaction=average_per_transaction(month),
        category_totals=totals,
        categories=summarize_categories(totals, budget, spent),
        top_categories=top_categories(totals),
        filtered=filter_expenses(month, search_term, category_filter),
    )
