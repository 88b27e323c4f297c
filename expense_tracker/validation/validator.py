"""
Input Validation

The presentation layer hands over raw form values (mostly strings).
This module converts them to typed values and checks the basic rules:

- amount: a finite number greater than zero
- category: non-empty
- description: at least 2 characters once surrounding whitespace is removed
- date: a calendar date (ISO "YYYY-MM-DD" when given as text)
- budget values: finite numbers

IMPORTANT: Validation never raises for bad input. It reports issues so
the UI can show form feedback, and the stores turn an invalid result
into a no-op.
"""

import math
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from expense_tracker.models.expense import (
    ExpenseDraft,
    ValidationIssue,
    ValidationResult,
)


MIN_DESCRIPTION_LENGTH = 2


def parse_number(value: Any) -> Optional[Decimal]:
    """
    Convert form input to a finite Decimal.

    Accepts ints, floats, Decimals and numeric strings (surrounding
    whitespace allowed). Floats go through their shortest repr, so 0.1
    becomes Decimal("0.1"). Returns None for anything else, including
    NaN, infinity, booleans, empty strings and values too large to
    store as a JSON number.
    """
    if value is None or isinstance(value, bool):
        return None
    if not isinstance(value, (int, float, str, Decimal)):
        return None

    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError, OverflowError):
        return None

    if not number.is_finite() or not math.isfinite(float(number)):
        return None
    return number


def parse_date(value: Any) -> Optional[date]:
    """Convert form input to a date; datetimes are truncated to their day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


class ExpenseValidator:
    """
    Validates raw expense form input.

    The same rules apply to adding and to editing an expense.
    """

    def validate(
        self,
        amount: Any,
        category: Any,
        description: Any,
        expense_date: Any,
    ) -> ValidationResult:
        """
        Validate and convert one expense's fields.

        Args:
            amount: Number or numeric string
            category: Category id
            description: Free text
            expense_date: date, datetime or ISO date string

        Returns:
            ValidationResult with a draft when valid, issues otherwise
        """
        issues = []

        parsed_amount = parse_number(amount)
        if parsed_amount is None:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message="Amount must be a number",
            ))
        elif parsed_amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be greater than zero",
            ))

        category_id = category.strip() if isinstance(category, str) else ""
        if not category_id:
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message="Please select a category",
            ))

        text = description.strip() if isinstance(description, str) else ""
        if len(text) < MIN_DESCRIPTION_LENGTH:
            issues.append(ValidationIssue(
                field="description",
                issue_type="too_short",
                message=f"Description needs at least {MIN_DESCRIPTION_LENGTH} characters",
            ))

        parsed_date = parse_date(expense_date)
        if parsed_date is None:
            issues.append(ValidationIssue(
                field="date",
                issue_type="invalid_format",
                message="Date must be a valid calendar date (YYYY-MM-DD)",
            ))

        if issues:
            return ValidationResult(is_valid=False, issues=issues)

        return ValidationResult(
            is_valid=True,
            draft=ExpenseDraft(
                amount=parsed_amount,
                category=category_id,
                description=text,
                date=parsed_date,
            ),
        )

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """Short text for the form when input was rejected."""
        if result.is_valid:
            return "✅ Looks good!"

        lines = ["❌ Please fix the following:"]
        for issue in result.issues:
            lines.append(f"   • {issue.message}")
        return "\n".join(lines)
