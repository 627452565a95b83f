"""
Storage Services Package

Provides the abstract key-value interface, its implementations, and the
document store that keeps the whole tracker in one JSON document.
"""

from driver_tracker.services.storage.interface import (
    KeyValueStorageInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from driver_tracker.services.storage.memory import InMemoryKeyValueStorage
from driver_tracker.services.storage.file_storage import JsonFileKeyValueStorage
from driver_tracker.services.storage.document_store import (
    DocumentProblem,
    DocumentStore,
    ensure_month_shape,
    parse_document,
)

__all__ = [
    # Interfaces
    "KeyValueStorageInterface",
    # Exceptions
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "InMemoryKeyValueStorage",
    "JsonFileKeyValueStorage",
    # Document store
    "DocumentProblem",
    "DocumentStore",
    "ensure_month_shape",
    "parse_document",
]
