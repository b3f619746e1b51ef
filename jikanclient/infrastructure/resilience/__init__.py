"""API Resilience Implementations.

Contains the token-bucket rate limiter that gates outbound requests and
the backoff policy used by the dispatch pipeline's retry loop.
"""

from .rate_limiter import RateLimiter
from .backoff import BackoffPolicy, RetryState

__all__ = [
    "RateLimiter",
    "BackoffPolicy",
    "RetryState",
]
