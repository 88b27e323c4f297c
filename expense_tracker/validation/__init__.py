"""Input validation package."""

from expense_tracker.validation.validator import (
    MIN_DESCRIPTION_LENGTH,
    ExpenseValidator,
    parse_date,
    parse_number,
)

__all__ = [
    "MIN_DESCRIPTION_LENGTH",
    "ExpenseValidator",
    "parse_date",
    "parse_number",
]
