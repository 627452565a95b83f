"""
Abstract Storage Interface

DESIGN DECISION: The tracker persists exactly one JSON document under one
fixed key. The back end therefore only needs string get/set by key.
This allows us to:
1. Use in-memory storage for testing
2. Use JSON files on disk in production
3. Add other key-value back ends without touching business logic
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorageInterface(ABC):
    """
    Abstract interface for key-value persistence.

    Values are opaque strings; the document store handles JSON.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Storage key

        Returns:
            The stored string, or None if nothing is stored

        Raises:
            StorageReadError: If the back end could not be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store a value under a key, replacing any previous value.

        Args:
            key: Storage key
            value: Complete serialized value

        Raises:
            StorageWriteError: If the value could not be written
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """The back end could not be read."""
    pass


class StorageWriteError(StorageError):
    """The back end could not be written."""
    pass
