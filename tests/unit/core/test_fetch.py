import pytest

from conftest import FakeApi
from jikanclient.core.fetch import fetch, fetch_paged, list_of
from jikanclient.domain.errors import DecodeError
from jikanclient.domain.models.common import Pagination
from jikanclient.domain.models.resources import Anime


async def test_fetch_unwraps_data(make_dispatcher, anime_payload):
    dispatcher = make_dispatcher(FakeApi((200, {"data": anime_payload})))

    anime = await fetch(dispatcher, "/anime/1", decode=Anime.from_dict)

    assert isinstance(anime, Anime)
    assert anime.title == "Cowboy Bebop"


async def test_fetch_without_decoder_returns_raw_data(make_dispatcher):
    dispatcher = make_dispatcher(FakeApi((200, {"data": {"anything": [1, 2]}})))

    assert await fetch(dispatcher, "/anything") == {"anything": [1, 2]}


async def test_fetch_paged_returns_items_and_pagination(make_dispatcher, anime_payload):
    api = FakeApi((200, {
        "data": [anime_payload, dict(anime_payload, mal_id=5, title="Cowboy Bebop: The Movie")],
        "pagination": {"last_visible_page": 3, "current_page": 1, "has_next_page": True},
    }))
    dispatcher = make_dispatcher(api)

    items, page = await fetch_paged(dispatcher, "/anime", {"q": "bebop"}, decode=list_of(Anime.from_dict))

    assert [a.mal_id for a in items] == [1, 5]
    assert page == Pagination(last_visible_page=3, current_page=1, has_next_page=True)
    assert api.requests[0].url.params["q"] == "bebop"


async def test_fetch_paged_without_pagination_block(make_dispatcher):
    dispatcher = make_dispatcher(FakeApi((200, {"data": []})))

    items, page = await fetch_paged(dispatcher, "/anime", decode=list_of(Anime.from_dict))

    assert items == []
    assert page == Pagination()


@pytest.mark.parametrize("body", [[{"data": 1}], "null", {"data": {"title": "missing id"}}])
async def test_bad_envelope_is_decode_error(make_dispatcher, body):
    dispatcher = make_dispatcher(FakeApi((200, body)))

    with pytest.raises(DecodeError):
        await fetch(dispatcher, "/anime/1", decode=Anime.from_dict)


async def test_list_of_rejects_non_array(make_dispatcher):
    dispatcher = make_dispatcher(FakeApi((200, {"data": {"mal_id": 1}})))

    with pytest.raises(DecodeError):
        await fetch_paged(dispatcher, "/anime", decode=list_of(Anime.from_dict))
