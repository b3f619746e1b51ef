"""Interface for response caches.

Defines the contract the dispatch pipeline relies on for cache-aside
lookups: a key-value store with per-entry TTL. Implementations must be
safe for concurrent use by many in-flight requests.
"""

import abc
from typing import Any

from ..models.common import CacheKey


class CacheError(Exception):
    """Raised when a cache backend fails to read or write an entry."""


class CacheMiss(CacheError, KeyError):
    """Raised by ``Cache.get`` when the key is absent or expired.

    A miss is an expected outcome, distinct from a backend failure; callers
    that only care about the difference catch ``CacheMiss`` first.
    """

    def __init__(self, key: CacheKey):
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"cache miss: {self.key}"


class Cache(abc.ABC):
    """Abstract Base Class for cache backends."""

    @abc.abstractmethod
    async def get(self, key: CacheKey) -> Any:
        """Retrieves an item from the cache.

        Args:
            key: The cache key to retrieve.

        Returns:
            The cached value, as an independent copy of what was stored.

        Raises:
            CacheMiss: If the key is absent or its entry has expired.
            CacheError: If the backend failed to read the entry.
        """

    @abc.abstractmethod
    async def set(self, key: CacheKey, value: Any, ttl: float) -> None:
        """Stores a JSON-serializable item for ``ttl`` seconds.

        Raises:
            CacheError: If the value could not be stored.
        """

    @abc.abstractmethod
    async def delete(self, key: CacheKey) -> None:
        """Deletes an item. Deleting a missing key is not an error."""

    async def close(self) -> None:
        """Releases backend resources. The default has nothing to release."""

    async def __aenter__(self) -> "Cache":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
