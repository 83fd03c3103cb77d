"""
JSON File Storage Implementation

DESIGN DECISION: A single JSON object on disk is used as the local store
because:
1. Users can open and read their data directly
2. No database setup required
3. Backups are a file copy

TRADEOFFS:
- The whole file is rewritten on every put (fine at personal scale)
- No locking; one process owns the file

Writes go to a temporary sibling file and are moved into place, so a
crash mid-write leaves the previous contents intact.
"""

import json
import os
from pathlib import Path
from typing import Optional, Union

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from finsight.logger import get_logger
from finsight.services.storage.interface import (
    CorruptDataError,
    KeyValueStorage,
    StorageError,
)


logger = get_logger(__name__)


class JsonFileStorage(KeyValueStorage):
    """
    Key-value storage persisted as one JSON object in a file.

    The file is read once, lazily, and then served from memory.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)
        self._data: Optional[dict[str, str]] = None

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        """
        Read the file into memory on first access.

        A corrupt file is reported once and then treated as empty, so the
        next write replaces it.
        """
        if self._data is None:
            if not self._path.exists():
                self._data = {}
            else:
                try:
                    raw = json.loads(self._path.read_text(encoding="utf-8") or "{}")
                except json.JSONDecodeError as e:
                    self._discard_corrupt(str(e))
                    raise CorruptDataError(f"Storage file {self._path} is not valid JSON: {e}")
                except OSError as e:
                    raise StorageError(f"Failed to read storage file {self._path}: {e}")

                if not isinstance(raw, dict):
                    self._discard_corrupt("not an object")
                    raise CorruptDataError(f"Storage file {self._path} must hold a JSON object")
                self._data = {str(k): str(v) for k, v in raw.items()}
        return self._data

    def _discard_corrupt(self, error: str) -> None:
        logger.error("storage_file_corrupt", path=str(self._path), error=error)
        self._data = {}

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        retry=retry_if_exception_type(OSError),
        reraise=True,
    )
    def _write(self, data: dict[str, str]) -> None:
        """Atomically replace the file contents."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        tmp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        os.replace(tmp_path, self._path)

    def _flush(self, data: dict[str, str]) -> None:
        try:
            self._write(data)
        except OSError as e:
            logger.error("storage_write_failed", path=str(self._path), error=str(e))
            raise StorageError(f"Failed to write storage file {self._path}: {e}")

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def put(self, key: str, value: str) -> None:
        data = {**self._load(), key: value}
        self._flush(data)
        self._data = data

    def clear(self, key: Optional[str] = None) -> None:
        current = self._load()
        if key is None:
            data = {}
        elif key in current:
            data = {k: v for k, v in current.items() if k != key}
        else:
            return
        self._flush(data)
        self._data = data

    def keys(self) -> list[str]:
        return list(self._load())
