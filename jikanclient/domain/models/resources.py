"""Decoded shapes for the handful of resources the endpoint services expose.

Only the commonly used fields are modelled; the raw payload is kept on
``raw`` for anything else.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Resource:
    """A reference to another entity (studio, genre, author...)."""
    mal_id: int
    type: str = ""
    name: str = ""
    url: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Resource":
        return cls(
            mal_id=int(data["mal_id"]),
            type=data.get("type") or "",
            name=data.get("name") or "",
            url=data.get("url") or "",
        )


def _resources(items: Optional[List[Dict[str, Any]]]) -> List[Resource]:
    return [Resource.from_dict(item) for item in items or []]


@dataclass
class Anime:
    mal_id: int
    title: str
    url: str = ""
    title_english: Optional[str] = None
    title_japanese: Optional[str] = None
    type: Optional[str] = None
    episodes: Optional[int] = None
    status: Optional[str] = None
    score: Optional[float] = None
    year: Optional[int] = None
    genres: List[Resource] = field(default_factory=list)
    studios: List[Resource] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Anime":
        return cls(
            mal_id=int(data["mal_id"]),
            title=data["title"],
            url=data.get("url") or "",
            title_english=data.get("title_english"),
            title_japanese=data.get("title_japanese"),
            type=data.get("type"),
            episodes=data.get("episodes"),
            status=data.get("status"),
            score=data.get("score"),
            year=data.get("year"),
            genres=_resources(data.get("genres")),
            studios=_resources(data.get("studios")),
            raw=data,
        )


@dataclass
class Manga:
    mal_id: int
    title: str
    url: str = ""
    title_english: Optional[str] = None
    type: Optional[str] = None
    chapters: Optional[int] = None
    volumes: Optional[int] = None
    status: Optional[str] = None
    score: Optional[float] = None
    authors: List[Resource] = field(default_factory=list)
    genres: List[Resource] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Manga":
        return cls(
            mal_id=int(data["mal_id"]),
            title=data["title"],
            url=data.get("url") or "",
            title_english=data.get("title_english"),
            type=data.get("type"),
            chapters=data.get("chapters"),
            volumes=data.get("volumes"),
            status=data.get("status"),
            score=data.get("score"),
            authors=_resources(data.get("authors")),
            genres=_resources(data.get("genres")),
            raw=data,
        )


@dataclass
class Genre:
    mal_id: int
    name: str
    url: str = ""
    count: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Genre":
        return cls(
            mal_id=int(data["mal_id"]),
            name=data["name"],
            url=data.get("url") or "",
            count=int(data.get("count") or 0),
        )
