# src/extraction/url_fetcher.py — v1
"""Fetch a web page and flatten it to text."""

from __future__ import annotations

import logging

import httpx

from writingtools.extraction.html_extractor import html_to_text

logger = logging.getLogger(__name__)


class UrlFetchError(Exception):
    """Raised when a URL cannot be fetched."""


def looks_like_url(text: str) -> bool:
    """Whether text is a single bare http(s) URL and nothing else."""
    candidate = text.strip()
    if not candidate or any(c.isspace() for c in candidate):
        return False
    try:
        url = httpx.URL(candidate)
    except httpx.InvalidURL:
        return False
    return url.scheme in ("http", "https") and bool(url.host)


async def fetch_url_text(
    url: str,
    timeout_s: float = 30.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """Download url and return its text content.

    Args:
        url: http or https URL.
        timeout_s: Transport timeout.
        transport: Optional httpx transport (tests).

    Returns:
        Flattened page text.

    Raises:
        UrlFetchError: URL is not http(s) or the fetch failed.
    """
    if not looks_like_url(url):
        raise UrlFetchError(f"Not a fetchable URL: {url!r}")

    try:
        async with httpx.AsyncClient(
            timeout=timeout_s, follow_redirects=True, transport=transport,
        ) as client:
            resp = await client.get(url.strip())
    except httpx.HTTPError as exc:
        raise UrlFetchError(f"Error fetching {url}: {exc}") from exc

    logger.debug(
        "Fetched %s: status=%d, %d bytes", url, resp.status_code, len(resp.content),
    )
    return html_to_text(resp.content)
