"""
Abstract Storage Interface

DESIGN DECISION: The transaction store does not know where its data
lives. It talks to a small key-value interface, which allows us to:
1. Keep everything in memory for tests
2. Write to a local JSON file for the desktop app
3. Add other backends without touching the store

Values are opaque strings. Serialization is the caller's job.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorage(ABC):
    """
    Abstract interface for local key-value storage.

    Mirrors the browser storage API the dashboard was first built on:
    string keys, string values, and no transactions.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read a value.

        Args:
            key: Storage key

        Returns:
            The stored string, or None if the key is absent
        """
        pass

    @abstractmethod
    def put(self, key: str, value: str) -> None:
        """
        Write a value, replacing any previous one.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def clear(self, key: Optional[str] = None) -> None:
        """
        Remove one key, or every key when key is None.

        Removing a missing key is not an error.
        """
        pass

    def keys(self) -> list[str]:
        """List stored keys. Backends override this when they can."""
        return []


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptDataError(StorageError):
    """Stored data could not be decoded."""
    pass
