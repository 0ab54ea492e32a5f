"""Tests for the HTTP fetcher.

Mocking strategy:
- ``respx`` patches ``httpx`` at the transport layer so no real network calls
  are made.  Any request to an unmocked route fails the test, which is how the
  invalid-URL tests prove that no network I/O happens.
"""

from __future__ import annotations

import httpx
import pytest
import respx

from harvest.config import settings
from harvest.scraper.errors import InvalidLocator, NetworkError, UnsuccessfulStatus
from harvest.scraper.fetcher import fetch
from harvest.scraper.models import RawDocument


_URL = "https://example.com/page"
_HTML = "<html><head><title>Page</title></head><body><a href='/x'>x</a></body></html>"


class TestFetchSuccess:
    def test_returns_raw_document(self) -> None:
        with respx.mock:
            respx.get(_URL).mock(return_value=httpx.Response(200, html=_HTML))
            raw = fetch(_URL)

        assert isinstance(raw, RawDocument)
        assert raw.url == _URL
        assert raw.status_code == 200
        assert raw.content_type.startswith("text/html")
        assert "<title>Page</title>" in raw.text

    def test_sends_configured_user_agent(self) -> None:
        with respx.mock:
            route = respx.get(_URL).mock(return_value=httpx.Response(200, html=_HTML))
            fetch(_URL)

        assert route.call_count == 1
        assert route.calls.last.request.headers["User-Agent"] == settings.user_agent

    def test_records_declared_charset(self) -> None:
        body = "<p>café</p>".encode("latin-1")
        with respx.mock:
            respx.get(_URL).mock(
                return_value=httpx.Response(
                    200,
                    content=body,
                    headers={"content-type": "text/html; charset=iso-8859-1"},
                )
            )
            raw = fetch(_URL)

        assert raw.encoding == "iso-8859-1"
        assert raw.text == "<p>café</p>"

    def test_uses_injected_client_without_closing_it(self) -> None:
        with respx.mock:
            respx.get(_URL).mock(return_value=httpx.Response(200, html=_HTML))
            with httpx.Client() as client:
                raw = fetch(_URL, client=client)
                assert not client.is_closed

        assert raw.status_code == 200

    def test_unknown_charset_falls_back_to_utf8(self) -> None:
        body = "<p>café</p>".encode("utf-8")
        with respx.mock:
            respx.get(_URL).mock(
                return_value=httpx.Response(
                    200, content=body, headers={"content-type": "text/html; charset=bogus"}
                )
            )
            raw = fetch(_URL)

        assert raw.declared_encoding is None
        assert raw.text == "<p>café</p>"

    def test_injected_client_keeps_its_own_timeout(self) -> None:
        with respx.mock:
            route = respx.get(_URL).mock(return_value=httpx.Response(200, html=_HTML))
            with httpx.Client(timeout=7.0) as client:
                fetch(_URL, client=client)

        assert route.calls.last.request.extensions["timeout"]["read"] == 7.0

    def test_explicit_timeout_overrides_injected_client(self) -> None:
        with respx.mock:
            route = respx.get(_URL).mock(return_value=httpx.Response(200, html=_HTML))
            with httpx.Client(timeout=7.0) as client:
                fetch(_URL, timeout=2.0, client=client)

        assert route.calls.last.request.extensions["timeout"]["read"] == 2.0

    def test_own_client_uses_configured_timeout(self, monkeypatch) -> None:
        monkeypatch.setattr(settings, "request_timeout", 4.0)
        with respx.mock:
            route = respx.get(_URL).mock(return_value=httpx.Response(200, html=_HTML))
            fetch(_URL)

        assert route.calls.last.request.extensions["timeout"]["read"] == 4.0


class TestFetchFailures:
    @pytest.mark.parametrize("status", [404, 500, 503])
    def test_non_success_status_raises(self, status: int) -> None:
        with respx.mock:
            respx.get(_URL).mock(return_value=httpx.Response(status, text="nope"))
            with pytest.raises(UnsuccessfulStatus) as excinfo:
                fetch(_URL)

        assert excinfo.value.status_code == status
        assert excinfo.value.url == _URL

    def test_connection_error_becomes_network_error(self) -> None:
        with respx.mock:
            respx.get(_URL).mock(side_effect=httpx.ConnectError)
            with pytest.raises(NetworkError) as excinfo:
                fetch(_URL)

        assert isinstance(excinfo.value.__cause__, httpx.ConnectError)

    def test_timeout_becomes_network_error(self) -> None:
        with respx.mock:
            respx.get(_URL).mock(side_effect=httpx.ReadTimeout)
            with pytest.raises(NetworkError, match="timed out"):
                fetch(_URL, timeout=2.5)

    def test_single_attempt_only(self) -> None:
        with respx.mock:
            route = respx.get(_URL).mock(side_effect=httpx.ConnectError)
            with pytest.raises(NetworkError):
                fetch(_URL)

        assert route.call_count == 1

    @pytest.mark.parametrize(
        "url",
        ["", "   ", "not a url", "/relative/path", "ftp://example.com/file", "mailto:a@b.c"],
    )
    def test_invalid_locator_fails_before_network(self, url: str) -> None:
        with respx.mock:
            with pytest.raises(InvalidLocator):
                fetch(url)

    def test_non_string_locator(self) -> None:
        with pytest.raises(InvalidLocator):
            fetch(None)  # type: ignore[arg-type]
