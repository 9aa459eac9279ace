"""Key-value storage interface for per-device personalization state.

Mirrors the browser ``localStorage`` contract: string keys, string values,
synchronous reads and writes.
"""

from abc import ABC, abstractmethod
from typing import Iterator, Optional


class StorageError(Exception):
    """Raised when a storage backend cannot read or write a key."""


class KeyValueStorage(ABC):
    """Abstract string-to-string store."""

    name: str = "base"

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value, or None when the key is absent."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete ``key``. Missing keys are ignored."""

    @abstractmethod
    def keys(self) -> Iterator[str]:
        """Iterate over stored keys."""

    def __contains__(self, key: str) -> bool:
        return self.get_item(key) is not None
