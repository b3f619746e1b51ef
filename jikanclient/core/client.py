"""Public entry point: the Jikan API client.

Wires the HTTP transport, rate limiter, cache and retry policy into a
RequestDispatcher (the Composition Root) and exposes the endpoint services
built on top of it.
"""

import logging
from typing import Any, Optional

import httpx

from jikanclient import __version__
from jikanclient.core.services.anime_service import AnimeService
from jikanclient.core.services.genre_service import GenreService
from jikanclient.core.services.manga_service import MangaService
from jikanclient.core.services.random_service import RandomService
from jikanclient.domain.interfaces.cache import Cache
from jikanclient.domain.models.common import Query
from jikanclient.infrastructure.cache.disk_cache import DEFAULT_CACHE_DIR, DiskCache
from jikanclient.infrastructure.cache.memory_cache import MemoryCache
from jikanclient.infrastructure.config.settings import ClientSettings
from jikanclient.infrastructure.http.dispatcher import (
    DEFAULT_CACHE_TTL_SECONDS, Decoder, EventHandler, RequestDispatcher,
)
from jikanclient.infrastructure.resilience.backoff import DEFAULT_INITIAL_BACKOFF_SECONDS, BackoffPolicy
from jikanclient.infrastructure.resilience.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.jikan.moe/v4"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_USER_AGENT = f"jikan-client/{__version__}"


class Client:
    """Async client for the Jikan v4 API.

    Usage:
        async with Client(max_retries=3, rate_limit=3, cache=MemoryCache()) as client:
            anime = await client.anime.by_id(1)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        max_retries: int = 0,
        initial_backoff: float = DEFAULT_INITIAL_BACKOFF_SECONDS,
        cache: Optional[Cache] = None,
        cache_ttl: float = DEFAULT_CACHE_TTL_SECONDS,
        rate_limiter: Optional[RateLimiter] = None,
        rate_limit: int = 0,
        user_agent: str = DEFAULT_USER_AGENT,
        event_handler: Optional[EventHandler] = None,
    ):
        """Initializes the client.

        Args:
            base_url: API root.
            http_client: Transport to use; the client creates (and owns) one if None.
            timeout: Per-attempt HTTP timeout for a client-created transport.
            max_retries: Retries for transport errors, 429 and 5xx (0 = single attempt).
            initial_backoff: Wait before the first retry; doubles on each further retry.
            cache: Cache for GET responses; None disables caching.
            cache_ttl: Lifetime in seconds of cached responses.
            rate_limiter: Pre-configured limiter; takes precedence over ``rate_limit``.
            rate_limit: Requests per second for a default limiter; 0 disables limiting.
            user_agent: Client identifier sent with every request.
            event_handler: Optional callback receiving dispatch events.
        """
        self._owns_http_client = http_client is None
        self._owns_cache = False
        self.http_client = http_client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        if rate_limiter is None and rate_limit > 0:
            rate_limiter = RateLimiter.per_second(rate_limit)
        self.cache = cache
        self.dispatcher = RequestDispatcher(
            http_client=self.http_client,
            base_url=base_url,
            user_agent=user_agent,
            backoff=BackoffPolicy(max_retries=max_retries, initial=initial_backoff),
            rate_limiter=rate_limiter,
            cache=cache,
            cache_ttl=cache_ttl,
            event_handler=event_handler,
        )

        self.anime = AnimeService(self.dispatcher)
        self.manga = MangaService(self.dispatcher)
        self.genres = GenreService(self.dispatcher)
        self.random = RandomService(self.dispatcher)

    @classmethod
    def from_settings(cls, settings: ClientSettings, **overrides: Any) -> "Client":
        """Builds a client (and its cache, if any) from loaded settings.

        A cache created here is owned by the client and closed with it.
        """
        cache: Optional[Cache] = None
        if settings.cache_backend == "memory":
            cache = MemoryCache()
        elif settings.cache_backend == "disk":
            cache = DiskCache(settings.cache_dir or DEFAULT_CACHE_DIR)
        kwargs: dict = dict(
            base_url=settings.base_url,
            timeout=settings.timeout,
            max_retries=settings.max_retries,
            cache=cache,
            cache_ttl=settings.cache_ttl,
            rate_limit=settings.rate_limit,
        )
        if settings.user_agent:
            kwargs["user_agent"] = settings.user_agent
        kwargs.update(overrides)
        client = cls(**kwargs)
        client._owns_cache = cache is not None and client.cache is cache
        return client

    async def do(
        self,
        method: str,
        path: str,
        query: Optional[Query] = None,
        decode: Optional[Decoder] = None,
        *,
        timeout: Optional[float] = None,
    ) -> Any:
        """Executes a raw call through the dispatch pipeline.

        See ``RequestDispatcher.execute`` for arguments and errors.
        """
        return await self.dispatcher.execute(method, path, query, decode, timeout=timeout)

    async def close(self) -> None:
        """Closes resources this client created."""
        if self._owns_http_client:
            await self.http_client.aclose()
        if self._owns_cache and self.cache is not None:
            await self.cache.close()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
