"""In-process implementation of the Cache interface.

Keeps entries in a dictionary with an absolute expiry per entry. Expired
entries are dropped lazily on read and by a periodic background sweep that
lives as long as the cache does.
"""

import asyncio
import json
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from jikanclient.domain.interfaces.cache import Cache, CacheError, CacheMiss
from jikanclient.domain.models.common import CacheKey

logger = logging.getLogger(__name__)

DEFAULT_SWEEP_INTERVAL_SECONDS = 5 * 60
SWEEP_BATCH_SIZE = 500


@dataclass(frozen=True)
class CacheEntry:
    """Internal representation of a cache entry with expiry."""
    data: bytes  # JSON-encoded value
    expiry_time: float  # clock() value after which the entry is stale


class MemoryCache(Cache):
    """Thread- and task-safe TTL map.

    Values are stored JSON-encoded so every ``get`` returns a fresh,
    complete copy; entries are frozen and swapped whole under the lock.

    Usage:
        async with MemoryCache() as cache:
            client = Client(cache=cache)
    """

    def __init__(
        self,
        sweep_interval: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initializes the memory cache.

        Args:
            sweep_interval: Seconds between background expiry sweeps.
            clock: Monotonic time source, in seconds.
        """
        self._items: Dict[CacheKey, CacheEntry] = {}
        self._lock = threading.Lock()
        self._clock = clock
        self.sweep_interval = sweep_interval
        self._sweeper: Optional[asyncio.Task] = None
        self._closed = False
        logger.info(f"MemoryCache initialized: sweep_interval={sweep_interval}s")

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    # --- Background sweep ---

    def start(self) -> None:
        """Starts the background expiry sweep on the running event loop."""
        if self._closed:
            raise CacheError("MemoryCache is closed")
        if self._sweeper is None or self._sweeper.done():
            self._sweeper = asyncio.get_running_loop().create_task(
                self._sweep_loop(), name="jikanclient-cache-sweep"
            )
            logger.debug("MemoryCache sweeper started.")

    async def close(self) -> None:
        """Stops the background sweep. Entries stay readable."""
        self._closed = True
        sweeper, self._sweeper = self._sweeper, None
        if sweeper is not None and not sweeper.done():
            sweeper.cancel()
            try:
                await sweeper
            except asyncio.CancelledError:
                pass
            logger.debug("MemoryCache sweeper stopped.")

    async def __aenter__(self) -> "MemoryCache":
        self.start()
        return self

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self.sweep_interval)
            removed = await self.sweep()
            if removed:
                logger.debug(f"MemoryCache sweep removed {removed} expired entries.")

    async def sweep(self) -> int:
        """Removes every expired entry, in bounded batches.

        Returns:
            Number of entries removed.
        """
        now = self._clock()
        with self._lock:
            keys = list(self._items)
        removed = 0
        for start in range(0, len(keys), SWEEP_BATCH_SIZE):
            with self._lock:
                for key in keys[start:start + SWEEP_BATCH_SIZE]:
                    entry = self._items.get(key)
                    if entry is not None and now > entry.expiry_time:
                        del self._items[key]
                        removed += 1
            await asyncio.sleep(0)  # let foreground calls in between batches
        return removed

    # --- Cache Interface Implementation ---

    async def get(self, key: CacheKey) -> Any:
        with self._lock:
            entry = self._items.get(key)
            if entry is not None and self._clock() > entry.expiry_time:
                del self._items[key]
                logger.debug(f"MemoryCache expired key: {key}")
                entry = None
        if entry is None:
            raise CacheMiss(key)
        return json.loads(entry.data)

    async def set(self, key: CacheKey, value: Any, ttl: float) -> None:
        try:
            data = json.dumps(value, separators=(",", ":")).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise CacheError(f"value for key {key} is not JSON-serializable: {e}") from e
        entry = CacheEntry(data=data, expiry_time=self._clock() + ttl)
        with self._lock:
            self._items[key] = entry
        if not self._closed and self._sweeper is None:
            self.start()
        logger.debug(f"MemoryCache stored key: {key} (ttl={ttl}s)")

    async def delete(self, key: CacheKey) -> None:
        with self._lock:
            self._items.pop(key, None)
