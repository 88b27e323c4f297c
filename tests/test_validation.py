"""
Tests for form input validation.

Test strategy:
1. Number and date parsing on their own
2. Each field rule in isolation
3. Several problems reported together
"""

import pytest
from datetime import date, datetime
from decimal import Decimal

from expense_tracker.validation import ExpenseValidator, parse_date, parse_number


class TestParseNumber:
    """Tests for parse_number."""

    @pytest.mark.parametrize("value,expected", [
        ("12.5", 12.5),
        (" 7 ", 7.0),
        (3, 3.0),
        (0.25, 0.25),
        ("-4", -4.0),
    ])
    def test_accepts_numbers(self, value, expected):
        """Test numeric strings and numbers are converted."""
        assert parse_number(value) == expected

    @pytest.mark.parametrize("value", [
        None, "", "   ", "abc", "nan", "inf", True, [1],
        10**400, "1e400", Decimal("NaN"), Decimal("-Infinity"),
    ])
    def test_rejects_non_numbers(self, value):
        """Test that anything that is not a finite number gives None."""
        assert parse_number(value) is None

    def test_keeps_decimal_digits(self):
        """Test that decimal input is kept exactly."""
        assert parse_number("0.1") == Decimal("0.1")
        assert parse_number(0.1) == Decimal("0.1")
        assert parse_number("0.1") + parse_number("0.2") == Decimal("0.3")


class TestParseDate:
    """Tests for parse_date."""

    def test_iso_string(self):
        assert parse_date("2026-10-05") == date(2026, 10, 5)

    def test_datetime_is_truncated(self):
        assert parse_date(datetime(2026, 10, 5, 23, 59)) == date(2026, 10, 5)

    def test_date_passes_through(self):
        assert parse_date(date(2026, 1, 1)) == date(2026, 1, 1)

    @pytest.mark.parametrize("value", ["", "2026-13-01", "yesterday", None, 20261005])
    def test_invalid_dates(self, value):
        """Test that unparseable dates give None."""
        assert parse_date(value) is None


class TestExpenseValidator:
    """Tests for ExpenseValidator."""

    @pytest.fixture
    def validator(self):
        return ExpenseValidator()

    def test_valid_input_produces_draft(self, validator):
        """Test that valid input is converted and trimmed."""
        result = validator.validate("250", " food ", "  Lunch  ", "2026-10-02")

        assert result.is_valid
        assert result.issues == []
        assert result.draft.amount == 250.0
        assert result.draft.category == "food"
        assert result.draft.description == "Lunch"
        assert result.draft.date == date(2026, 10, 2)

    @pytest.mark.parametrize("amount,issue_type", [
        ("0", "invalid_value"),
        ("-5", "invalid_value"),
        ("abc", "invalid_format"),
        ("", "invalid_format"),
    ])
    def test_rejects_bad_amount(self, validator, amount, issue_type):
        """Test amount must be a number greater than zero."""
        result = validator.validate(amount, "food", "Lunch", "2026-10-02")

        assert not result.is_valid
        assert result.draft is None
        assert [(i.field, i.issue_type) for i in result.issues] == [("amount", issue_type)]

    def test_rejects_overflowing_amount(self, validator):
        """Test that an amount too large for a JSON number is a format error."""
        result = validator.validate(10**400, "food", "Lunch", "2026-10-02")

        assert [(i.field, i.issue_type) for i in result.issues] == [("amount", "invalid_format")]

    def test_rejects_missing_category(self, validator):
        result = validator.validate("10", "", "Lunch", "2026-10-02")
        assert [i.field for i in result.issues] == ["category"]

    def test_rejects_short_description(self, validator):
        """Test description needs 2 characters after trimming."""
        result = validator.validate("10", "food", " a ", "2026-10-02")
        assert [i.issue_type for i in result.issues] == ["too_short"]

    def test_two_character_description_is_enough(self, validator):
        assert validator.validate("10", "food", "ab", "2026-10-02").is_valid

    def test_rejects_invalid_date(self, validator):
        result = validator.validate("10", "food", "Lunch", "2026-02-30")
        assert [i.field for i in result.issues] == ["date"]

    def test_reports_all_problems(self, validator):
        """Test that every failing field is reported at once."""
        result = validator.validate("", "", "", "")

        assert result.error_count == 4
        assert {i.field for i in result.issues} == {"amount", "category", "description", "date"}

    def test_user_friendly_summary(self, validator):
        """Test the summary text lists each problem."""
        ok = validator.validate("10", "food", "Lunch", "2026-10-02")
        assert "Looks good" in validator.get_user_friendly_summary(ok)

        bad = validator.validate("0", "food", "Lunch", "2026-10-02")
        text = validator.get_user_friendly_summary(bad)
        assert "Please fix" in text
        assert "Amount must be greater than zero" in text


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
