"""
Abstract Storage Interfaces

DESIGN DECISION: Persistence is split in two layers:
1. KeyValueStorageInterface - raw text blobs under string keys
   (a local file per key, a dict in memory, ...)
2. SnapshotStorageInterface - typed load/save of the whole expense
   collection and the budget, each under its own key

The stores only ever see layer 2, injected at construction time.
This allows us to:
1. Use in-memory storage for testing
2. Swap the local file backend without touching business logic
3. Keep serialization and corruption handling in one place

Everything here is synchronous: writes complete before the mutating
call returns, so the next read always observes them.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from expense_tracker.models.expense import Budget, Expense


class KeyValueStorageInterface(ABC):
    """
    Abstract interface for a local key-value store of text values.

    Any backend (files on disk, memory, ...) must implement these methods.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Storage key

        Returns:
            The stored text, or None if the key is absent

        Raises:
            StorageReadError: If the backend exists but cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store a value, overwriting any previous one.

        Args:
            key: Storage key
            value: Text to store

        Raises:
            StorageWriteError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove a key.

        Args:
            key: Storage key

        Returns:
            True if something was removed, False if the key was absent
        """
        pass


class SnapshotStorageInterface(ABC):
    """
    Abstract interface for loading and saving whole-entity snapshots.

    The expense collection and the budget are independent: saving one
    never touches the other, and a corrupt or missing snapshot of one
    falls back to its default without affecting the other.
    """

    @abstractmethod
    def load_expenses(self) -> list[Expense]:
        """
        Load the expense collection.

        Returns:
            Stored expenses in store order, or an empty list if the
            snapshot is absent or unreadable
        """
        pass

    @abstractmethod
    def load_budget(self) -> Budget:
        """
        Load the budget.

        Returns:
            Stored budget, or the default budget if the snapshot is
            absent or unreadable
        """
        pass

    @abstractmethod
    def save_expenses(self, expenses: Iterable[Expense]) -> None:
        """
        Write the full expense collection, replacing the previous snapshot.

        Raises:
            StorageWriteError: If the write fails
        """
        pass

    @abstractmethod
    def save_budget(self, budget: Budget) -> None:
        """
        Write the budget, replacing the previous snapshot.

        Raises:
            StorageWriteError: If the write fails
        """
        pass

    def load(self) -> tuple[list[Expense], Budget]:
        """Load both snapshots independently."""
        return self.load_expenses(), self.load_budget()


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """The backend could not be read at all."""
    pass


class StorageWriteError(StorageError):
    """A snapshot could not be written."""
    pass
