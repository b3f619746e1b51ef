"""The request dispatch pipeline.

Every API call passes through ``RequestDispatcher.execute``, which serves it
from cache when possible and otherwise waits for the rate limiter and sends
it with a bounded retry loop: transport failures, 429 and 5xx responses
are retried with exponential backoff; every other failure is returned
immediately.

Two concurrent calls for the same uncached request may both reach the
network (no stampede protection); both results are valid and the later
write simply refreshes the cache entry.
"""

import asyncio
import logging
import time
from typing import Any, Callable, Optional, Tuple, TypeVar

import httpx

from jikanclient.domain.context import cache_bypassed
from jikanclient.domain.errors import ApiError, DecodeError, JikanError, TransportError
from jikanclient.domain.events.api_events import (
    ApiCallDeferred, ApiCallFailed, ApiCallInitiated, ApiCallSucceeded,
    CacheHit, DomainEvent, RetryScheduled,
)
from jikanclient.domain.interfaces.cache import Cache, CacheError, CacheMiss
from jikanclient.domain.models.common import CacheKey, Query, RequestDescriptor
from jikanclient.infrastructure.http.error_classifier import classify_response, is_retryable_status
from jikanclient.infrastructure.resilience.backoff import BackoffPolicy
from jikanclient.infrastructure.resilience.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

T = TypeVar("T")
Decoder = Callable[[Any], T]
EventHandler = Callable[[DomainEvent], None]

DEFAULT_CACHE_TTL_SECONDS = 5 * 60

# What a decoder may raise on a payload of the wrong shape
DECODE_EXCEPTIONS = (KeyError, IndexError, TypeError, ValueError, AttributeError)

_MISS = object()


class RequestDispatcher:
    """Executes logical API calls with rate limiting, caching and retries."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str,
        user_agent: str,
        backoff: Optional[BackoffPolicy] = None,
        rate_limiter: Optional[RateLimiter] = None,
        cache: Optional[Cache] = None,
        cache_ttl: float = DEFAULT_CACHE_TTL_SECONDS,
        event_handler: Optional[EventHandler] = None,
    ):
        """Initializes the dispatcher.

        Args:
            http_client: Transport used for every attempt.
            base_url: API root; request paths are appended to it.
            user_agent: Client identifier sent as the User-Agent header.
            backoff: Retry budget and backoff schedule (default: no retries).
            rate_limiter: Token bucket to acquire from before each call; None disables limiting.
            cache: Cache-aside store for GET responses; None disables caching.
            cache_ttl: Lifetime in seconds of entries written by the pipeline.
            event_handler: Optional callback receiving every domain event.
        """
        self.http_client = http_client
        self.base_url = base_url
        self.user_agent = user_agent
        self.backoff = backoff or BackoffPolicy()
        self.rate_limiter = rate_limiter
        self.cache = cache
        self.cache_ttl = cache_ttl
        self.event_handler = event_handler

        logger.info(
            f"RequestDispatcher initialized: base_url={base_url}, "
            f"max_retries={self.backoff.max_retries}, initial_backoff={self.backoff.initial}s, "
            f"rate_limited={rate_limiter is not None}, cache={type(cache).__name__ if cache else 'None'}"
        )

    def _dispatch_event(self, event: DomainEvent) -> None:
        logger.debug(f"EVENT: {event}")
        if self.event_handler is None:
            return
        try:
            self.event_handler(event)
        except Exception:
            logger.exception(f"Event handler failed for {type(event).__name__}")

    async def execute(
        self,
        method: str,
        path: str,
        query: Optional[Query] = None,
        decode: Optional[Decoder] = None,
        *,
        timeout: Optional[float] = None,
    ) -> Any:
        """Executes one logical API call end to end.

        Args:
            method: HTTP method.
            path: Path relative to the base URL, e.g. ``/anime/1``.
            query: Query parameters; key order is irrelevant.
            decode: Converts the parsed JSON body into the result. When None
                the body is ignored, nothing is cached and None is returned.
            timeout: Deadline in seconds for the whole call, including
                rate-limit and backoff waits.

        Returns:
            ``decode(payload)`` for the successful response or cache hit.

        Raises:
            ApiError: Non-retryable status, or the last 429/5xx once retries run out.
            TransportError: The last transport failure once retries run out, or a
                request failure that cannot succeed on resend (e.g. a redirect loop).
            DecodeError: A 2xx body that ``decode`` could not handle, or a body
                whose Content-Encoding is invalid.
            TimeoutError: ``timeout`` elapsed.
            asyncio.CancelledError: The calling task was cancelled.
        """
        request = RequestDescriptor.build(method, path, query)
        if timeout is None:
            return await self._execute(request, decode)
        async with asyncio.timeout(timeout):
            return await self._execute(request, decode)

    async def _execute(self, request: RequestDescriptor, decode: Optional[Decoder]) -> Any:
        # 1. Cache lookup; a hit costs neither network I/O nor a rate-limit token
        cache_key: Optional[CacheKey] = None
        if self._is_cacheable(request, decode):
            cache_key = request.cache_key()
            cached = await self._read_cache(request, cache_key, decode)
            if cached is not _MISS:
                return cached

        # 2. Wait for rate limit permission
        if self.rate_limiter is not None:
            wait_duration = await self.rate_limiter.get_wait_time()
            if wait_duration > 0:
                self._dispatch_event(ApiCallDeferred(method=request.method, path=request.path, wait_time_seconds=wait_duration))
            await self.rate_limiter.wait_for_permission()

        # 3. Network attempts
        state = self.backoff.new_state()
        last_error: Optional[JikanError] = None
        while not state.exhausted:
            delay = state.next_attempt()
            if delay > 0:
                logger.warning(
                    f"Retrying {request.method} {request.path} after {type(last_error).__name__}: {last_error} "
                    f"(attempt {state.attempt}/{self.backoff.max_attempts}, waiting {delay:.2f}s)"
                )
                self._dispatch_event(RetryScheduled(
                    method=request.method, path=request.path, attempt_number=state.attempt,
                    delay_seconds=delay, reason=type(last_error).__name__,
                ))
                await asyncio.sleep(delay)

            self._dispatch_event(ApiCallInitiated(method=request.method, path=request.path, attempt_number=state.attempt))
            start_time = time.perf_counter()
            try:
                response = await self.http_client.request(
                    request.method,
                    request.url(self.base_url),
                    headers={"User-Agent": self.user_agent},
                )
            except httpx.DecodingError as e:
                # Body arrived but its Content-Encoding could not be undone
                error = DecodeError(f"{request.method} {request.path}: undecodable response body: {e}")
                self._fail(request, error)
                raise error from e
            except httpx.TransportError as e:
                last_error = TransportError(f"{request.method} {request.path}: {type(e).__name__}: {e}")
                last_error.__cause__ = e
                continue
            except httpx.RequestError as e:
                # Redirect loops and other non-network request failures repeat on every attempt
                error = TransportError(f"{request.method} {request.path}: {type(e).__name__}: {e}")
                self._fail(request, error)
                raise error from e

            if is_retryable_status(response.status_code):
                last_error = classify_response(response)
                continue

            if not response.is_success:
                error = classify_response(response)
                self._fail(request, error)
                raise error

            payload, result = self._decode(request, response, decode)
            latency_ms = (time.perf_counter() - start_time) * 1000
            if cache_key is not None:
                await self._write_cache(cache_key, payload)
            self._dispatch_event(ApiCallSucceeded(
                method=request.method, path=request.path, latency_ms=latency_ms, attempts=state.attempt,
            ))
            return result

        # --- If loop finishes without returning (i.e., max retries exceeded) ---
        if self.backoff.max_retries:
            logger.error(f"Max retries ({self.backoff.max_retries}) reached for {request.method} {request.path}. Last error: {last_error}")
        self._fail(request, last_error)
        raise last_error

    def _is_cacheable(self, request: RequestDescriptor, decode: Optional[Decoder]) -> bool:
        return (
            self.cache is not None
            and request.method == "GET"
            and decode is not None
            and not cache_bypassed()
        )

    def _decode(self, request: RequestDescriptor, response: httpx.Response, decode: Optional[Decoder]) -> Tuple[Any, Any]:
        """Parses and decodes a 2xx body. Returns ``(payload, result)``."""
        if decode is None:
            return None, None
        try:
            payload = response.json()
        except ValueError as e:
            error = DecodeError(f"{request.method} {request.path}: invalid JSON body: {e}")
            self._fail(request, error)
            raise error from e
        try:
            return payload, decode(payload)
        except DECODE_EXCEPTIONS as e:
            error = DecodeError(f"{request.method} {request.path}: unexpected response shape: {type(e).__name__}: {e}")
            self._fail(request, error)
            raise error from e

    async def _read_cache(self, request: RequestDescriptor, key: CacheKey, decode: Decoder) -> Any:
        try:
            payload = await self.cache.get(key)
        except CacheMiss:
            logger.debug(f"Cache miss for {request.method} {request.path} (key {key})")
            return _MISS
        except CacheError as e:
            logger.warning(f"Cache read failed for key {key}: {e}. Treating as miss.")
            return _MISS
        try:
            value = decode(payload)
        except DECODE_EXCEPTIONS as e:
            logger.warning(f"Cached payload for key {key} does not decode ({type(e).__name__}: {e}). Treating as miss.")
            return _MISS
        logger.debug(f"Cache hit for {request.method} {request.path} (key {key})")
        self._dispatch_event(CacheHit(method=request.method, path=request.path, cache_key=key))
        return value

    async def _write_cache(self, key: CacheKey, payload: Any) -> None:
        try:
            await self.cache.set(key, payload, self.cache_ttl)
        except Exception as e:
            logger.warning(f"Cache write failed for key {key}: {e}")

    def _fail(self, request: RequestDescriptor, error: JikanError) -> None:
        logger.error(f"{request.method} {request.path} failed: {type(error).__name__}: {error}")
        self._dispatch_event(ApiCallFailed(
            method=request.method,
            path=request.path,
            error_type=type(error).__name__,
            error_message=str(error),
            status=error.status if isinstance(error, ApiError) else None,
        ))
