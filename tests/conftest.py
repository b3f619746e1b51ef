import time

import httpx
import pytest

from jikanclient.infrastructure.http.dispatcher import RequestDispatcher
from jikanclient.infrastructure.resilience.backoff import BackoffPolicy

BASE_URL = "https://api.test/v4"
USER_AGENT = "jikan-client/test"


def reply(status: int = 200, body=None, headers=None) -> httpx.Response:
    """Builds a fresh response; dicts/lists become JSON, str/bytes are sent raw."""
    if isinstance(body, (dict, list)):
        return httpx.Response(status, json=body, headers=headers)
    if isinstance(body, str):
        body = body.encode()
    return httpx.Response(status, content=body or b"", headers=headers)


class FakeApi:
    """Scripted upstream for httpx.MockTransport.

    Each script item is a ``(status, body)`` or ``(status, body, headers)``
    tuple, or an exception instance; the last item repeats once the script
    runs out.
    """

    def __init__(self, *script):
        self.script = list(script) or [(200, {"data": None})]
        self.requests = []
        self.sent_at = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.sent_at.append(time.monotonic())
        item = self.script[min(len(self.requests), len(self.script)) - 1]
        if isinstance(item, Exception):
            raise item
        return reply(*item)


@pytest.fixture
async def make_dispatcher():
    """Factory building a RequestDispatcher wired to a FakeApi."""
    clients = []

    def factory(api: FakeApi, max_retries: int = 0, initial_backoff: float = 0.01, **kwargs) -> RequestDispatcher:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(api.handler))
        clients.append(http_client)
        return RequestDispatcher(
            http_client=http_client,
            base_url=BASE_URL,
            user_agent=USER_AGENT,
            backoff=BackoffPolicy(max_retries=max_retries, initial=initial_backoff),
            **kwargs,
        )

    yield factory
    for http_client in clients:
        await http_client.aclose()


@pytest.fixture
def anime_payload():
    return {
        "mal_id": 1,
        "url": "https://myanimelist.net/anime/1/Cowboy_Bebop",
        "title": "Cowboy Bebop",
        "title_english": "Cowboy Bebop",
        "title_japanese": "カウボーイビバップ",
        "type": "TV",
        "episodes": 26,
        "status": "Finished Airing",
        "score": 8.75,
        "year": 1998,
        "genres": [{"mal_id": 1, "type": "anime", "name": "Action", "url": "https://myanimelist.net/anime/genre/1/Action"}],
        "studios": [{"mal_id": 14, "type": "anime", "name": "Sunrise", "url": "https://myanimelist.net/anime/producer/14/Sunrise"}],
    }


def identity(payload):
    return payload
