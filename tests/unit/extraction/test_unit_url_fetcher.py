# tests/unit/extraction/test_url_fetcher.py — v1
"""Tests for extraction/url_fetcher.py — served by httpx.MockTransport."""

from __future__ import annotations

import httpx
import pytest

from writingtools.extraction.url_fetcher import UrlFetchError, fetch_url_text, looks_like_url


class TestLooksLikeUrl:
    @pytest.mark.parametrize("text", [
        "https://example.com",
        "http://example.com/path?q=1",
        "  https://example.com/a  ",
    ])
    def test_accepts(self, text):
        assert looks_like_url(text)

    @pytest.mark.parametrize("text", [
        "",
        "example.com",
        "ftp://example.com/file",
        "see https://example.com",
        "https://",
        "file:///tmp/a.pdf",
    ])
    def test_rejects(self, text):
        assert not looks_like_url(text)


class TestFetchUrlText:
    @pytest.mark.asyncio
    async def test_fetches_and_flattens(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url == "https://example.com/page"
            return httpx.Response(200, content=b"<html><body><p>Body text</p></body></html>")

        text = await fetch_url_text(
            "https://example.com/page", transport=httpx.MockTransport(handler),
        )
        assert text == "Body text"

    @pytest.mark.asyncio
    async def test_error_status_body_still_flattened(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, content=b"<p>Not found</p>")

        text = await fetch_url_text(
            "https://example.com/missing", transport=httpx.MockTransport(handler),
        )
        assert text == "Not found"

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(UrlFetchError):
            await fetch_url_text(
                "https://example.com", transport=httpx.MockTransport(handler),
            )

    @pytest.mark.asyncio
    async def test_rejects_non_http(self):
        with pytest.raises(UrlFetchError, match="Not a fetchable URL"):
            await fetch_url_text("mailto:someone@example.com")
