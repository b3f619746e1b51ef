"""Genre listing endpoints."""

from enum import Enum
from typing import List, Optional, Tuple

from jikanclient.core.fetch import fetch_paged, list_of
from jikanclient.domain.models.common import Pagination
from jikanclient.domain.models.resources import Genre
from jikanclient.infrastructure.http.dispatcher import RequestDispatcher


class GenreFilter(str, Enum):
    GENRES = "genres"
    EXPLICIT = "explicit_genres"
    THEMES = "themes"
    DEMOGRAPHICS = "demographics"


class GenreService:
    def __init__(self, dispatcher: RequestDispatcher):
        self.dispatcher = dispatcher

    async def anime(self, filter: Optional[GenreFilter] = None, page: int = 0, limit: int = 0) -> Tuple[List[Genre], Pagination]:
        return await self._list("/genres/anime", filter, page, limit)

    async def manga(self, filter: Optional[GenreFilter] = None, page: int = 0, limit: int = 0) -> Tuple[List[Genre], Pagination]:
        return await self._list("/genres/manga", filter, page, limit)

    async def _list(self, path: str, filter: Optional[GenreFilter], page: int, limit: int) -> Tuple[List[Genre], Pagination]:
        params = {
            "filter": filter.value if filter else None,
            "page": page or None,
            "limit": limit or None,
        }
        return await fetch_paged(self.dispatcher, path, params, decode=list_of(Genre.from_dict))
