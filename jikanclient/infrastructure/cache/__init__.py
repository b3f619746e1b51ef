"""Cache Implementations.

Provides concrete implementations of the Cache interface: an in-process
TTL map with a background expiry sweep, and a persistent adapter over
``diskcache``.
"""

from .memory_cache import MemoryCache
from .disk_cache import DiskCache

__all__ = [
    "MemoryCache",
    "DiskCache",
]
