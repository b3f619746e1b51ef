"""Error taxonomy for the Jikan client.

Every failure surfaced by the dispatch pipeline is a ``JikanError`` subclass,
except cancellation (``asyncio.CancelledError``) and caller deadlines
(``TimeoutError``), which propagate untouched.
"""

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Kind tag attached to every classified failure."""
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    CLIENT_ERROR = "client_error"
    TRANSPORT_ERROR = "transport_error"
    DECODE_ERROR = "decode_error"


class JikanError(Exception):
    """Base class for all errors raised by the client."""
    kind: ErrorKind


class ApiError(JikanError):
    """A non-2xx response from the API, classified by status code.

    Two ApiErrors compare equal when their status codes match, so callers can
    pattern-match on the failure kind without depending on message text:

        try:
            await client.anime.by_id(1)
        except ApiError as e:
            if e == ApiError(404):
                ...
    """

    def __init__(
        self,
        status: int,
        message: str = "",
        type: Optional[str] = None,
        detail: Optional[str] = None,
    ):
        self.status = status
        self.message = message
        self.type = type
        self.detail = detail
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message

    def __repr__(self) -> str:
        return f"ApiError(status={self.status}, message={self.message!r}, type={self.type!r})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ApiError):
            return NotImplemented
        return self.status == other.status

    def __hash__(self) -> int:
        return hash(self.status)

    @property
    def kind(self) -> ErrorKind:  # type: ignore[override]
        if self.is_not_found():
            return ErrorKind.NOT_FOUND
        if self.is_rate_limited():
            return ErrorKind.RATE_LIMITED
        if self.is_server_error():
            return ErrorKind.SERVER_ERROR
        return ErrorKind.CLIENT_ERROR

    def is_not_found(self) -> bool:
        return self.status == 404

    def is_rate_limited(self) -> bool:
        return self.status == 429

    def is_server_error(self) -> bool:
        return 500 <= self.status < 600


class TransportError(JikanError):
    """No response was received (DNS, connect, read timeout...).

    The underlying ``httpx`` exception is chained as ``__cause__``.
    """
    kind = ErrorKind.TRANSPORT_ERROR


class DecodeError(JikanError):
    """A 2xx response whose body could not be decoded into the requested shape."""
    kind = ErrorKind.DECODE_ERROR
