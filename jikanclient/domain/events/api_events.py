"""Domain Events related to API calls and resilience.

Emitted by the dispatch pipeline when calls are deferred by the rate
limiter, served from cache, retried, fail or succeed.
"""

from dataclasses import dataclass, field
import time
from typing import Optional


@dataclass
class DomainEvent:
    """Base class for domain events."""
    pass


@dataclass
class ApiCallInitiated(DomainEvent):
    """Event triggered when an HTTP attempt is about to be sent."""
    method: str
    path: str
    attempt_number: int
    timestamp: float = field(default_factory=time.time)


@dataclass
class ApiCallSucceeded(DomainEvent):
    """Event triggered when an API call returns a decoded 2xx response."""
    method: str
    path: str
    latency_ms: float
    attempts: int
    timestamp: float = field(default_factory=time.time)


@dataclass
class ApiCallFailed(DomainEvent):
    """Event triggered when an API call fails definitively (after retries)."""
    method: str
    path: str
    error_type: str
    error_message: str
    status: Optional[int] = None
    timestamp: float = field(default_factory=time.time)


@dataclass
class ApiCallDeferred(DomainEvent):
    """Event triggered when an API call must wait for a rate-limit token."""
    method: str
    path: str
    wait_time_seconds: float
    timestamp: float = field(default_factory=time.time)


@dataclass
class RetryScheduled(DomainEvent):
    """Event triggered when a retry is scheduled for a failed attempt."""
    method: str
    path: str
    attempt_number: int  # the attempt that is about to run
    delay_seconds: float
    reason: str
    timestamp: float = field(default_factory=time.time)


@dataclass
class CacheHit(DomainEvent):
    """Event triggered when a call is answered from the cache."""
    method: str
    path: str
    cache_key: str
    timestamp: float = field(default_factory=time.time)
