"""Services package."""

from expense_tracker.services.export import (
    CSV_HEADERS,
    DEFAULT_EXPORT_FILENAME,
    export_csv,
)
from expense_tracker.services.storage import (
    InMemoryKeyValueStorage,
    KeyValueSnapshotStorage,
    KeyValueStorageInterface,
    LocalFileKeyValueStorage,
    SnapshotStorageInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)

__all__ = [
    # Export
    "CSV_HEADERS",
    "DEFAULT_EXPORT_FILENAME",
    "export_csv",
    # Storage services
    "InMemoryKeyValueStorage",
    "KeyValueSnapshotStorage",
    "KeyValueStorageInterface",
    "LocalFileKeyValueStorage",
    "SnapshotStorageInterface",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
]
