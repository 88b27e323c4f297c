"""
Storage Services Package

Provides abstract interfaces and concrete implementations for local
persistence. Files on disk are the default backend; an in-memory
backend is available for tests and throwaway sessions.
"""

from expense_tracker.services.storage.interface import (
    KeyValueStorageInterface,
    SnapshotStorageInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from expense_tracker.services.storage.local import (
    InMemoryKeyValueStorage,
    LocalFileKeyValueStorage,
)
from expense_tracker.services.storage.snapshots import KeyValueSnapshotStorage

__all__ = [
    # Interfaces
    "KeyValueStorageInterface",
    "SnapshotStorageInterface",
    # Exceptions
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "InMemoryKeyValueStorage",
    "KeyValueSnapshotStorage",
    "LocalFileKeyValueStorage",
]
