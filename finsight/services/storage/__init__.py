"""
Storage Services Package

Provides the abstract key-value interface and its concrete backends.
"""

from finsight.services.storage.interface import (
    CorruptDataError,
    KeyValueStorage,
    StorageError,
)
from finsight.services.storage.json_file import JsonFileStorage
from finsight.services.storage.memory import InMemoryStorage

__all__ = [
    # Interface
    "KeyValueStorage",
    # Exceptions
    "CorruptDataError",
    "StorageError",
    # Implementations
    "InMemoryStorage",
    "JsonFileStorage",
]
