"""Per-call request context carried out of band using contextvars.

The cache-bypass flag travels with the current task (and tasks spawned from
it) the same way cancellation does, so it reaches the dispatch pipeline
through any number of fetch helpers and endpoint services without being a
parameter of any of them.

Usage:
    with no_cache():
        anime = await client.anime.by_id(1)   # skips cache read and write
"""

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

_skip_cache: ContextVar[bool] = ContextVar("jikanclient_skip_cache", default=False)


@contextmanager
def no_cache() -> Iterator[None]:
    """Forces calls made inside the block to bypass the cache entirely."""
    token = _skip_cache.set(True)
    try:
        yield
    finally:
        _skip_cache.reset(token)


def cache_bypassed() -> bool:
    """True when the current context asked to skip the cache."""
    return _skip_cache.get()
