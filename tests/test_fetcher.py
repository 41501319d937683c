from __future__ import annotations

import socket

import pytest
import requests

from page_fetcher.errors import FetchError
from page_fetcher.fetchers import RequestsFetcher, fetch_page


class FakeResponse:
    def __init__(self, content: bytes, status_code: int = 200) -> None:
        self.content = content
        self.status_code = status_code
        self.close_count = 0

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error", response=self)

    def close(self) -> None:
        self.close_count += 1

    def __enter__(self) -> FakeResponse:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class FakeSession:
    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[dict[str, object]] = []
        self.closed = False

    def get(self, url: str, **kwargs: object) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        assert self.response is not None
        return self.response

    def close(self) -> None:
        self.closed = True


def _closed_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def test_fetch_page_returns_body_unchanged() -> None:
    response = FakeResponse(b'{"data":[]}')
    fetcher = RequestsFetcher(session=FakeSession(response))
    assert fetcher.fetch_page("http://example.test/api", 1) == '{"data":[]}'


def test_fetch_page_builds_legacy_target_and_streams() -> None:
    session = FakeSession(FakeResponse(b"{}"))
    RequestsFetcher(session=session).fetch_page("http://example.test/api", 2)
    assert session.calls == [
        {"url": "http://example.test/api?&page=2", "timeout": None, "stream": True}
    ]


def test_fetch_page_passes_timeout_and_query_style() -> None:
    session = FakeSession(FakeResponse(b"{}"))
    fetcher = RequestsFetcher(session=session, timeout_sec=3.5, query_style="normalized")
    fetcher.fetch_page("http://example.test/api", 4)
    assert session.calls[0]["url"] == "http://example.test/api?page=4"
    assert session.calls[0]["timeout"] == 3.5


def test_fetch_page_decodes_utf8_without_truncation() -> None:
    text = '{"userName":"Zoë 患者","notes":"' + "x" * 100_000 + '"}'
    response = FakeResponse(text.encode("utf-8"))
    assert RequestsFetcher(session=FakeSession(response)).fetch_page("https://example.test/api", 1) == text


def test_stream_closed_once_on_success() -> None:
    response = FakeResponse(b"{}")
    RequestsFetcher(session=FakeSession(response)).fetch_page("http://example.test/api", 1)
    assert response.close_count == 1


def test_http_error_status_raises_fetch_error_and_closes_once() -> None:
    response = FakeResponse(b"oops", status_code=503)
    fetcher = RequestsFetcher(session=FakeSession(response))
    with pytest.raises(FetchError) as exc:
        fetcher.fetch_page("http://example.test/api", 1)
    assert isinstance(exc.value.cause, requests.HTTPError)
    assert exc.value.__cause__ is exc.value.cause
    assert exc.value.url == "http://example.test/api?&page=1"
    assert response.close_count == 1


def test_invalid_utf8_raises_fetch_error_and_closes_once() -> None:
    response = FakeResponse(b"\xff\xfe\xfa")
    fetcher = RequestsFetcher(session=FakeSession(response))
    with pytest.raises(FetchError) as exc:
        fetcher.fetch_page("http://example.test/api", 1)
    assert isinstance(exc.value.cause, UnicodeDecodeError)
    assert response.close_count == 1


def test_transport_error_preserves_cause() -> None:
    cause = requests.ConnectionError("Name or service not known")
    fetcher = RequestsFetcher(session=FakeSession(error=cause))
    with pytest.raises(FetchError) as exc:
        fetcher.fetch_page("http://unreachable.test/api", 1)
    assert exc.value.cause is cause
    assert exc.value.__cause__ is cause


def test_invalid_request_rejected_before_network() -> None:
    session = FakeSession(FakeResponse(b"{}"))
    fetcher = RequestsFetcher(session=session)
    with pytest.raises(ValueError, match="page 必须 >= 1"):
        fetcher.fetch_page("http://example.test/api", 0)
    with pytest.raises(ValueError, match="base_url"):
        fetcher.fetch_page("example.test/api", 1)
    with pytest.raises(ValueError, match="page 必须是整数"):
        fetcher.fetch_page("http://example.test/api", True)
    assert session.calls == []


def test_injected_session_is_not_closed_by_fetcher() -> None:
    session = FakeSession(FakeResponse(b"{}"))
    with RequestsFetcher(session=session) as fetcher:
        fetcher.fetch_page("http://example.test/api", 1)
    assert session.closed is False


def test_connection_refused_raises_fetch_error() -> None:
    port = _closed_port()
    with pytest.raises(FetchError) as exc:
        fetch_page(f"http://127.0.0.1:{port}/api", 1, timeout_sec=5)
    assert isinstance(exc.value.cause, requests.ConnectionError)


def test_non_finite_timeout_rejected_at_construction() -> None:
    for value in (float("nan"), float("inf"), 0):
        with pytest.raises(ValueError, match="有限数"):
            RequestsFetcher(session=FakeSession(FakeResponse(b"{}")), timeout_sec=value)
