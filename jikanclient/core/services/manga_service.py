"""Manga endpoints."""

from jikanclient.core.fetch import fetch
from jikanclient.domain.models.resources import Manga
from jikanclient.infrastructure.http.dispatcher import RequestDispatcher


class MangaService:
    def __init__(self, dispatcher: RequestDispatcher):
        self.dispatcher = dispatcher

    async def by_id(self, mal_id: int) -> Manga:
        return await fetch(self.dispatcher, f"/manga/{mal_id}", decode=Manga.from_dict)
