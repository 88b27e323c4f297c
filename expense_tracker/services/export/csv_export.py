"""
CSV Export

Produces a delimited text document of the full expense collection,
in store order and regardless of any active search or filter.

The header row is plain:

    id,amount,category,description,date,createdAt

Data rows quote every text cell and leave the amount bare, so a
description of: Lunch, with "team" is written as "Lunch, with ""team""\".
A full row looks like:

    "3f2c...",250,"food","Lunch","2026-10-02","2026-10-02T13:05:11"

Commas, quotes and line breaks in free text therefore survive a
round-trip through any spreadsheet program or csv.reader.
"""

import csv
import io
from decimal import Decimal
from typing import Iterable, Union

from expense_tracker.models.expense import Expense


CSV_HEADERS = ["id", "amount", "category", "description", "date", "createdAt"]

DEFAULT_EXPORT_FILENAME = "expenses.csv"
CSV_MIME_TYPE = "text/csv;charset=utf-8"

LINE_TERMINATOR = "\n"


def _format_amount(amount: Decimal) -> Union[int, Decimal]:
    # Whole amounts print without a trailing ".0"
    if amount == amount.to_integral_value():
        return int(amount)
    return amount


def expense_to_row(expense: Expense) -> list:
    """Convert an expense to CSV cells in header order."""
    return [
        expense.id,
        _format_amount(expense.amount),
        expense.category,
        expense.description,
        expense.date.isoformat(),
        expense.created_at.isoformat(),
    ]


def export_csv(expenses: Iterable[Expense]) -> str:
    """
    Serialize expenses to CSV text.

    Args:
        expenses: Expenses in the order they should appear

    Returns:
        The CSV document, header row first, rows separated by "\\n"
    """
    output = io.StringIO()

    header_writer = csv.writer(output, lineterminator=LINE_TERMINATOR)
    header_writer.writerow(CSV_HEADERS)

    row_writer = csv.writer(
        output,
        quoting=csv.QUOTE_NONNUMERIC,
        lineterminator=LINE_TERMINATOR,
    )
    for expense in expenses:
        row_writer.writerow(expense_to_row(expense))

    # No trailing line break after the last row
    return output.getvalue().rstrip(LINE_TERMINATOR)
