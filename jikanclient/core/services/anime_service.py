"""Anime endpoints."""

from typing import List, Optional, Sequence, Tuple

from jikanclient.core.fetch import fetch, fetch_paged, list_of
from jikanclient.domain.models.common import Pagination
from jikanclient.domain.models.resources import Anime
from jikanclient.infrastructure.http.dispatcher import RequestDispatcher


class AnimeService:
    def __init__(self, dispatcher: RequestDispatcher):
        self.dispatcher = dispatcher

    async def by_id(self, mal_id: int) -> Anime:
        return await fetch(self.dispatcher, f"/anime/{mal_id}", decode=Anime.from_dict)

    async def search(
        self,
        query: str = "",
        *,
        type: Optional[str] = None,
        status: Optional[str] = None,
        genres: Sequence[int] = (),
        order_by: Optional[str] = None,
        sort: Optional[str] = None,
        page: int = 0,
        limit: int = 0,
    ) -> Tuple[List[Anime], Pagination]:
        """Searches anime. Empty/zero arguments are left out of the query."""
        params = {
            "q": query or None,
            "type": type,
            "status": status,
            "genres": ",".join(str(g) for g in genres) or None,
            "order_by": order_by,
            "sort": sort,
            "page": page or None,
            "limit": limit or None,
        }
        return await fetch_paged(self.dispatcher, "/anime", params, decode=list_of(Anime.from_dict))
