"""Retry budget and exponential backoff for the dispatch pipeline."""

from dataclasses import dataclass

DEFAULT_INITIAL_BACKOFF_SECONDS = 0.1
DEFAULT_BACKOFF_FACTOR = 2.0


@dataclass(frozen=True)
class BackoffPolicy:
    """Value Object representing retry backoff configuration.

    ``max_retries`` counts retries, not attempts: 0 means exactly one attempt.
    """
    max_retries: int = 0
    initial: float = DEFAULT_INITIAL_BACKOFF_SECONDS
    factor: float = DEFAULT_BACKOFF_FACTOR

    def __post_init__(self):
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.initial <= 0:
            raise ValueError("initial backoff must be positive")
        if self.factor <= 1:
            raise ValueError("backoff factor must be greater than 1")

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def new_state(self) -> "RetryState":
        return RetryState(policy=self, backoff=self.initial)


@dataclass
class RetryState:
    """Per-call retry bookkeeping. Never shared between calls."""
    policy: BackoffPolicy
    backoff: float
    attempt: int = 0

    @property
    def exhausted(self) -> bool:
        return self.attempt >= self.policy.max_attempts

    def next_attempt(self) -> float:
        """Advances to the next attempt.

        Returns:
            Seconds to wait before sending it (0 for the first attempt).
        """
        self.attempt += 1
        if self.attempt == 1:
            return 0.0
        delay = self.backoff
        self.backoff *= self.policy.factor
        return delay
