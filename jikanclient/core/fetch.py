"""Typed helpers that unwrap the API's JSON envelopes.

Single resources arrive as ``{"data": ...}``; lists arrive as
``{"data": [...], "pagination": {...}}``. The unwrapping runs as the
dispatcher's decode step, so a malformed envelope is a DecodeError like any
other bad body, and cache hits go through exactly the same path.
"""

from typing import Any, Callable, List, Optional, Tuple, TypeVar

from jikanclient.domain.models.common import Pagination, Query
from jikanclient.infrastructure.http.dispatcher import RequestDispatcher

T = TypeVar("T")


def _data(payload: Any) -> Any:
    if not isinstance(payload, dict):
        raise TypeError(f"expected a JSON object envelope, got {type(payload).__name__}")
    return payload.get("data")


def list_of(decode: Callable[[Any], T]) -> Callable[[Any], List[T]]:
    """Lifts an item decoder to a decoder for a JSON array of items."""
    def decode_list(items: Any) -> List[T]:
        if items is None:
            return []
        if not isinstance(items, list):
            raise TypeError(f"expected a JSON array, got {type(items).__name__}")
        return [decode(item) for item in items]
    return decode_list


async def fetch(
    dispatcher: RequestDispatcher,
    path: str,
    query: Optional[Query] = None,
    decode: Callable[[Any], T] = lambda data: data,
) -> T:
    """GETs ``path`` and returns ``decode(envelope["data"])``."""
    return await dispatcher.execute("GET", path, query, lambda payload: decode(_data(payload)))


async def fetch_paged(
    dispatcher: RequestDispatcher,
    path: str,
    query: Optional[Query] = None,
    decode: Callable[[Any], T] = lambda data: data,
) -> Tuple[T, Pagination]:
    """GETs ``path`` and returns ``(decode(envelope["data"]), pagination)``."""
    def decode_page(payload: Any) -> Tuple[T, Pagination]:
        return decode(_data(payload)), Pagination.from_dict(payload.get("pagination"))
    return await dispatcher.execute("GET", path, query, decode_page)
