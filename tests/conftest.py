"""
Shared fixtures.

Every test runs against in-memory storage unless it asks for tmp_path;
nothing touches the real data directory.
"""

import json
from typing import Optional

import pytest

from driver_tracker import DriverTracker
from driver_tracker.config import DEFAULT_STORAGE_KEY
from driver_tracker.services.storage import (
    DocumentStore,
    InMemoryKeyValueStorage,
    KeyValueStorageInterface,
    StorageReadError,
    StorageWriteError,
)


class FailingStorage(KeyValueStorageInterface):
    """Back end whose reads and/or writes always fail."""

    def __init__(self, fail_reads: bool = False, fail_writes: bool = True):
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.write_attempts = 0

    def get(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise StorageReadError("disk unreadable")
        return None

    def set(self, key: str, value: str) -> None:
        self.write_attempts += 1
        if self.fail_writes:
            raise StorageWriteError("disk full")


@pytest.fixture
def storage() -> InMemoryKeyValueStorage:
    return InMemoryKeyValueStorage()


@pytest.fixture
def document_store(storage) -> DocumentStore:
    return DocumentStore(storage)


@pytest.fixture
def tracker(document_store) -> DriverTracker:
    return DriverTracker(document_store)


@pytest.fixture
def stored_document(storage):
    """Parsed JSON of whatever is currently persisted."""
    def _read() -> dict:
        raw = storage.get(DEFAULT_STORAGE_KEY)
        return json.loads(raw) if raw else {}
    return _read


@pytest.fixture
def write_failing_storage() -> FailingStorage:
    return FailingStorage(fail_reads=False, fail_writes=True)


@pytest.fixture
def read_failing_storage() -> FailingStorage:
    return FailingStorage(fail_reads=True, fail_writes=False)
