import asyncio

import pytest

from jikanclient.domain.interfaces.cache import CacheError, CacheMiss
from jikanclient.domain.models.common import CacheKey
from jikanclient.infrastructure.cache.memory_cache import MemoryCache


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
async def cache(clock):
    cache = MemoryCache(clock=clock)
    yield cache
    await cache.close()


async def test_set_then_get_within_ttl(cache):
    value = {"data": {"mal_id": 1, "title": "Cowboy Bebop", "genres": [1, 2]}}
    await cache.set(CacheKey("k"), value, 60)

    assert await cache.get(CacheKey("k")) == value


async def test_get_after_ttl_is_miss(cache, clock):
    await cache.set(CacheKey("k"), {"a": 1}, 60)
    clock.advance(61)

    with pytest.raises(CacheMiss):
        await cache.get(CacheKey("k"))
    assert len(cache) == 0  # evicted on read


async def test_missing_key_is_miss_not_error(cache):
    with pytest.raises(CacheMiss) as exc_info:
        await cache.get(CacheKey("absent"))
    assert isinstance(exc_info.value, KeyError)


async def test_delete(cache):
    await cache.set(CacheKey("k"), 1, 60)
    await cache.delete(CacheKey("k"))
    await cache.delete(CacheKey("never-set"))

    with pytest.raises(CacheMiss):
        await cache.get(CacheKey("k"))


async def test_get_returns_independent_copy(cache):
    await cache.set(CacheKey("k"), {"items": [1]}, 60)

    first = await cache.get(CacheKey("k"))
    first["items"].append(2)

    assert await cache.get(CacheKey("k")) == {"items": [1]}


async def test_non_serializable_value_raises_cache_error(cache):
    with pytest.raises(CacheError):
        await cache.set(CacheKey("k"), object(), 60)


async def test_sweep_removes_only_expired_entries(cache, clock):
    await cache.set(CacheKey("short"), 1, 10)
    await cache.set(CacheKey("long"), 2, 100)
    clock.advance(50)

    removed = await cache.sweep()

    assert removed == 1
    assert len(cache) == 1
    assert await cache.get(CacheKey("long")) == 2


async def test_background_sweeper_runs_and_stops_on_close(clock):
    cache = MemoryCache(sweep_interval=0.01, clock=clock)
    await cache.set(CacheKey("k"), 1, 5)
    clock.advance(10)

    await asyncio.sleep(0.05)
    assert len(cache) == 0

    sweeper = cache._sweeper
    await cache.close()
    assert sweeper.done()


async def test_context_manager_starts_and_stops_sweeper():
    async with MemoryCache(sweep_interval=60) as cache:
        assert cache._sweeper is not None and not cache._sweeper.done()
    assert cache._sweeper is None


async def test_concurrent_writers_never_expose_partial_entries(cache):
    """Readers always see one writer's complete value."""
    key = CacheKey("shared")
    values = [{"writer": i, "payload": list(range(i, i + 50))} for i in range(50)]

    async def write(value):
        await cache.set(key, value, 60)

    async def read():
        try:
            return await cache.get(key)
        except CacheMiss:
            return None

    results = await asyncio.gather(*(write(v) for v in values), *(read() for _ in range(50)))

    for seen in results[len(values):]:
        assert seen is None or seen in values
    assert await cache.get(key) in values
