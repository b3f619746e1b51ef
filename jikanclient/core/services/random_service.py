"""Random entry endpoints.

Every call is meant to return something different, so these always bypass
the cache.
"""

from jikanclient.core.fetch import fetch
from jikanclient.domain.context import no_cache
from jikanclient.domain.models.resources import Anime, Manga
from jikanclient.infrastructure.http.dispatcher import RequestDispatcher


class RandomService:
    def __init__(self, dispatcher: RequestDispatcher):
        self.dispatcher = dispatcher

    async def anime(self) -> Anime:
        with no_cache():
            return await fetch(self.dispatcher, "/random/anime", decode=Anime.from_dict)

    async def manga(self) -> Manga:
        with no_cache():
            return await fetch(self.dispatcher, "/random/manga", decode=Manga.from_dict)
