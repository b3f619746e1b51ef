import httpx
import pytest

from jikanclient.domain.errors import ApiError, ErrorKind
from jikanclient.infrastructure.http.error_classifier import classify_response, is_retryable_status


def test_classify_structured_error_body():
    response = httpx.Response(404, json={
        "status": 404,
        "type": "BadResponseException",
        "message": "Resource does not exist",
        "error": "404 on https://myanimelist.net/anime/0/",
    })

    error = classify_response(response)

    assert error.status == 404
    assert error.message == "Resource does not exist"
    assert error.type == "BadResponseException"
    assert error.detail == "404 on https://myanimelist.net/anime/0/"
    assert str(error) == "Resource does not exist: 404 on https://myanimelist.net/anime/0/"


def test_classify_falls_back_to_reason_phrase():
    """Non-JSON bodies use the status line's standard text."""
    error = classify_response(httpx.Response(503, content=b"<html>gateway</html>"))

    assert error.status == 503
    assert error.message == "Service Unavailable"
    assert error.type is None
    assert str(error) == "Service Unavailable"


def test_classify_ignores_status_claimed_by_body():
    error = classify_response(httpx.Response(500, json={"status": 200, "message": "Internal"}))

    assert error.status == 500
    assert error.is_server_error()


def test_classify_non_object_json():
    error = classify_response(httpx.Response(400, json=["unexpected"]))

    assert error.message == "Bad Request"


@pytest.mark.parametrize(
    "status, kind",
    [
        (404, ErrorKind.NOT_FOUND),
        (429, ErrorKind.RATE_LIMITED),
        (500, ErrorKind.SERVER_ERROR),
        (599, ErrorKind.SERVER_ERROR),
        (400, ErrorKind.CLIENT_ERROR),
        (403, ErrorKind.CLIENT_ERROR),
    ],
)
def test_error_kind_from_status(status, kind):
    error = ApiError(status, "x")
    assert error.kind is kind
    assert error.is_not_found() == (kind is ErrorKind.NOT_FOUND)
    assert error.is_rate_limited() == (kind is ErrorKind.RATE_LIMITED)
    assert error.is_server_error() == (kind is ErrorKind.SERVER_ERROR)


def test_errors_compare_by_status_only():
    assert ApiError(404, "not here") == ApiError(404, "gone", type="Other")
    assert ApiError(404) != ApiError(500)
    assert len({ApiError(429, "a"), ApiError(429, "b")}) == 1


@pytest.mark.parametrize(
    "status, retryable",
    [(200, False), (400, False), (404, False), (429, True), (500, True), (502, True), (599, True), (600, False)],
)
def test_is_retryable_status(status, retryable):
    assert is_retryable_status(status) is retryable
