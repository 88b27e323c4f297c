"""Export services package."""

from expense_tracker.services.export.csv_export import (
    CSV_HEADERS,
    CSV_MIME_TYPE,
    DEFAULT_EXPORT_FILENAME,
    export_csv,
    expense_to_row,
)

__all__ = [
    "CSV_HEADERS",
    "CSV_MIME_TYPE",
    "DEFAULT_EXPORT_FILENAME",
    "export_csv",
    "expense_to_row",
]
