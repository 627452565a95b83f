"""
JSON File Storage Implementation

Each key is one file, `<data_dir>/<key>.json`, holding the raw value.

TRADEOFFS:
- No locking (single user, single process)
- Writes go to a temporary file first and are moved into place, so a
  crash mid-write leaves the previous document intact
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from driver_tracker.services.storage.interface import (
    KeyValueStorageInterface,
    StorageReadError,
    StorageWriteError,
)


class JsonFileKeyValueStorage(KeyValueStorageInterface):
    """
    File-per-key storage on the local filesystem.

    Transient OS errors on write (e.g. a file briefly locked by a sync
    client) are retried before giving up.
    """

    def __init__(self, data_dir: Path, write_attempts: int = 3):
        self._data_dir = Path(data_dir)
        self._write_attempts = write_attempts

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        return self._data_dir / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(f"Failed to read {path}: {e}")

    def set(self, key: str, value: str) -> None:
        writer = retry(
            retry=retry_if_exception_type(OSError),
            stop=stop_after_attempt(self._write_attempts),
            wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
            reraise=True,
        )(self._write)
        try:
            writer(self.path_for(key), value)
        except OSError as e:
            raise StorageWriteError(f"Failed to write {self.path_for(key)}: {e}")

    def _write(self, path: Path, value: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.stem}-", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise
