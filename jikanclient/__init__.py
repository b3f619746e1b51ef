"""Async client for the Jikan (MyAnimeList) REST API.

Every call goes through one dispatch pipeline that rate-limits, caches and
retries requests before decoding the JSON envelope.
"""

__version__ = "0.1.0"

from jikanclient.core.client import Client
from jikanclient.core.fetch import fetch, fetch_paged, list_of
from jikanclient.domain.context import cache_bypassed, no_cache
from jikanclient.domain.errors import ApiError, DecodeError, ErrorKind, JikanError, TransportError
from jikanclient.domain.interfaces.cache import Cache, CacheError, CacheMiss
from jikanclient.domain.models.common import Pagination, RequestDescriptor
from jikanclient.infrastructure.cache import DiskCache, MemoryCache
from jikanclient.infrastructure.config.settings import ClientSettings, load_settings
from jikanclient.infrastructure.resilience import BackoffPolicy, RateLimiter

__all__ = [
    "__version__",
    "Client",
    "fetch",
    "fetch_paged",
    "list_of",
    "no_cache",
    "cache_bypassed",
    "JikanError",
    "ApiError",
    "TransportError",
    "DecodeError",
    "ErrorKind",
    "Cache",
    "CacheError",
    "CacheMiss",
    "MemoryCache",
    "DiskCache",
    "Pagination",
    "RequestDescriptor",
    "ClientSettings",
    "load_settings",
    "BackoffPolicy",
    "RateLimiter",
]
