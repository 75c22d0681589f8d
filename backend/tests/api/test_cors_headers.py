"""CORS headers on catch-all responses — which Origin values are answered."""

from starlette.requests import Request

from board_api.api.error_handlers import cors_headers


def _request(origin: str | None = None) -> Request:
    headers = [(b"origin", origin.encode())] if origin else []
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


def test_wildcard_allows_any_origin():
    assert cors_headers(_request("http://web.example"), ["*"]) == {
        "Access-Control-Allow-Origin": "*",
    }


def test_listed_origin_is_echoed():
    headers = cors_headers(
        _request("http://web.example"), ["http://web.example", "http://admin.example"],
    )
    assert headers == {
        "Access-Control-Allow-Origin": "http://web.example", "Vary": "Origin",
    }


def test_unlisted_origin_gets_nothing():
    assert cors_headers(_request("http://evil.example"), ["http://web.example"]) == {}


def test_same_origin_request_gets_nothing():
    assert cors_headers(_request(), ["*"]) == {}
