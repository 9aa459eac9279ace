"""TTL Cache — bounded in-memory map with idle expiration."""

import time
from typing import Any, Callable, Optional

from ..utils.logging import get_logger

logger = get_logger("utils.cache")


class TTLCache:
    """In-memory cache with per-key idle TTL and a hard entry cap.

    Reads refresh an entry's expiry, so only idle keys age out.
    """

    def __init__(
        self,
        default_ttl: float = 1800.0,
        max_entries: int = 1000,
        clock: Optional[Callable[[], float]] = None,
    ):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._default_ttl = default_ttl
        self._max_entries = max_entries
        self._clock = clock or time.monotonic
        self._store: dict[str, tuple[Any, float]] = {}  # key -> (value, expires_at)

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def get(self, key: str) -> Any | None:
        """Get a value if present and not expired, refreshing its expiry."""
        entry = self._store.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        now = self._clock()
        if now > expires_at:
            del self._store[key]
            return None
        self._store[key] = (value, now + self._default_ttl)
        return value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Set a value with optional custom TTL."""
        if key not in self._store:
            self._evict_if_full()
        expires_at = self._clock() + (ttl if ttl is not None else self._default_ttl)
        self._store[key] = (value, expires_at)

    def get_or_create(self, key: str, factory: Callable[[], Any]) -> Any:
        """Return the cached value for ``key``, building it on a miss."""
        value = self.get(key)
        if value is None:
            value = factory()
            self.set(key, value)
        return value

    def invalidate(self, key: str) -> None:
        """Remove a specific key from the cache."""
        self._store.pop(key, None)

    def clear(self) -> None:
        """Clear all cached entries."""
        self._store.clear()

    def _evict_if_full(self) -> None:
        """Evict expired entries first, then the soonest to expire if still full."""
        now = self._clock()
        expired_keys = [k for k, (_, exp) in self._store.items() if now > exp]
        for k in expired_keys:
            del self._store[k]

        if len(self._store) >= self._max_entries:
            sorted_keys = sorted(self._store, key=lambda k: self._store[k][1])
            to_remove = len(self._store) - self._max_entries + 1
            for k in sorted_keys[:to_remove]:
                del self._store[k]
            logger.debug("cache_evicted", count=to_remove, expired=len(expired_keys))
