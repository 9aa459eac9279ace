"""Key-value storage backends."""

from .base import KeyValueStorage, StorageError
from .file import FileStorage
from .memory import MemoryStorage
from .sql import SQLStorage

__all__ = [
    "KeyValueStorage",
    "StorageError",
    "FileStorage",
    "MemoryStorage",
    "SQLStorage",
]
