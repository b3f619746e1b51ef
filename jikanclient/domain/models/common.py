"""Defines common Value Objects used across the client.

These objects describe a logical request (method, path, query), the cache
key derived from it and the pagination block attached to list responses.
"""

from dataclasses import dataclass
from typing import AbstractSet, Any, Dict, Iterable, Mapping, NewType, Optional, Tuple, Union
from urllib.parse import urlencode

# === Caching Context ===
CacheKey = NewType("CacheKey", str)  # 16 hex digits, FNV-1a 64 of the request

QueryValue = Union[str, int, float, bool, Iterable[Union[str, int]]]
Query = Mapping[str, QueryValue]

_FNV_OFFSET_BASIS = 0xCBF29CE484222325
_FNV_PRIME = 0x100000001B3
_MASK_64 = 0xFFFFFFFFFFFFFFFF


def fnv1a_64(data: bytes) -> int:
    """Non-cryptographic 64-bit FNV-1a hash."""
    h = _FNV_OFFSET_BASIS
    for byte in data:
        h ^= byte
        h = (h * _FNV_PRIME) & _MASK_64
    return h


def _stringify(value: Union[str, int, float, bool]) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def canonicalize_query(query: Optional[Query]) -> Tuple[Tuple[str, str], ...]:
    """Flattens a query mapping into sorted ``(key, value)`` pairs.

    Keys are sorted. Any non-string iterable becomes one pair per item:
    ordered collections keep their order, sets are sorted. ``None`` values
    are dropped.

    Raises:
        TypeError: A value is a mapping or bytes.
    """
    if not query:
        return ()
    pairs = []
    for key in sorted(query):
        value = query[key]
        if value is None:
            continue
        if isinstance(value, (Mapping, bytes, bytearray)):
            raise TypeError(f"query parameter {key!r} has unsupported type {type(value).__name__}")
        if isinstance(value, str):
            pairs.append((key, value))
        elif isinstance(value, AbstractSet):
            pairs.extend((key, v) for v in sorted(_stringify(v) for v in value))
        elif isinstance(value, Iterable):
            pairs.extend((key, _stringify(v)) for v in value)
        else:
            pairs.append((key, _stringify(value)))
    return tuple(pairs)


@dataclass(frozen=True)
class RequestDescriptor:
    """One logical API request. Immutable once built."""
    method: str
    path: str
    query: Tuple[Tuple[str, str], ...] = ()

    @classmethod
    def build(cls, method: str, path: str, query: Optional[Query] = None) -> "RequestDescriptor":
        return cls(method=method.upper(), path=path, query=canonicalize_query(query))

    @property
    def query_string(self) -> str:
        return urlencode(self.query)

    def url(self, base_url: str) -> str:
        """Absolute URL for this request against ``base_url``."""
        url = base_url.rstrip("/") + self.path
        if self.query:
            url += "?" + self.query_string
        return url

    def cache_key(self) -> CacheKey:
        """Deterministic fingerprint of (method, path, canonical query).

        Identical logical requests always map to the same key. Distinct
        requests collide only with negligible probability; a collision would
        serve the wrong cached body, which is an accepted limitation.
        """
        material = "|".join([self.method, self.path, self.query_string])
        return CacheKey(f"{fnv1a_64(material.encode('utf-8')):016x}")


@dataclass
class Pagination:
    """Pagination block of a list response."""
    last_visible_page: int = 0
    current_page: int = 0
    has_next_page: bool = False

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Pagination":
        if not data:
            return cls()
        return cls(
            last_visible_page=int(data.get("last_visible_page") or 0),
            current_page=int(data.get("current_page") or 0),
            has_next_page=bool(data.get("has_next_page", False)),
        )
