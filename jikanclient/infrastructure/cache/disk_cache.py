"""Persistent Cache implementation backed by the ``diskcache`` library.

Entries survive process restarts and can be shared between processes on the
same machine. ``diskcache`` is synchronous, so every call is pushed to a
worker thread to keep the event loop free.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

import diskcache as dc

from jikanclient.domain.interfaces.cache import Cache, CacheError, CacheMiss
from jikanclient.domain.models.common import CacheKey

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DIR = Path.home() / ".cache" / "jikanclient"

_MISSING = object()


class DiskCache(Cache):
    """File-based cache; expiry is enforced by ``diskcache`` itself."""

    def __init__(self, directory: Union[str, Path] = DEFAULT_CACHE_DIR, disk_cache: Optional[dc.Cache] = None):
        """Initializes the disk cache.

        Args:
            directory: Directory holding the cache database.
            disk_cache: Pre-built ``diskcache.Cache`` (takes precedence over ``directory``).
        """
        try:
            self.disk_cache = disk_cache if disk_cache is not None else dc.Cache(str(directory), timeout=1)
        except Exception as e:
            logger.error(f"Failed to initialize disk cache at {directory}: {e}", exc_info=True)
            raise CacheError(f"cannot open disk cache at {directory}: {e}") from e
        logger.info(f"DiskCache initialized at: {self.disk_cache.directory}")

    async def get(self, key: CacheKey) -> Any:
        try:
            raw = await asyncio.to_thread(self.disk_cache.get, key, _MISSING)
        except dc.Timeout as e:
            raise CacheError(f"disk cache read timed out for key {key}") from e
        if raw is _MISSING:
            raise CacheMiss(key)
        try:
            return json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning(f"Corrupt disk cache entry for key {key}: {e}. Removing.")
            await self.delete(key)
            raise CacheMiss(key) from e

    async def set(self, key: CacheKey, value: Any, ttl: float) -> None:
        try:
            data = json.dumps(value, separators=(",", ":")).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise CacheError(f"value for key {key} is not JSON-serializable: {e}") from e
        try:
            stored = await asyncio.to_thread(self.disk_cache.set, key, data, ttl)
        except dc.Timeout as e:
            raise CacheError(f"disk cache write timed out for key {key}") from e
        if not stored:
            raise CacheError(f"disk cache refused key {key}")
        logger.debug(f"DiskCache stored key: {key} (ttl={ttl}s)")

    async def delete(self, key: CacheKey) -> None:
        try:
            await asyncio.to_thread(self.disk_cache.delete, key)
        except dc.Timeout as e:
            raise CacheError(f"disk cache delete timed out for key {key}") from e

    async def close(self) -> None:
        await asyncio.to_thread(self.disk_cache.close)
