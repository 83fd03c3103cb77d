"""In-memory storage backend, used by tests and the `memory` config."""

from typing import Optional

from finsight.services.storage.interface import KeyValueStorage


class InMemoryStorage(KeyValueStorage):
    """Dictionary-backed storage. Nothing survives the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def put(self, key: str, value: str) -> None:
        self._data[key] = value

    def clear(self, key: Optional[str] = None) -> None:
        if key is None:
            self._data.clear()
        else:
            self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)
