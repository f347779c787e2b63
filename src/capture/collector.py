# src/capture/collector.py — v1
"""Turn a sniffed payload into CapturedContent.

PDFs are flattened to text. A video keeps any text on the source but
drops images. A bare URL with no other media is fetched and flattened
("process URL from clipboard"); if the fetch fails the URL text itself
is kept.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from writingtools.capture.sniffer import detect, read_image, read_text
from writingtools.capture.source import SERVICE_TEXT_TYPES, ContentSource
from writingtools.core.models import CapturedContent
from writingtools.extraction.pdf_extractor import pdf_to_text
from writingtools.extraction.url_fetcher import (
    UrlFetchError,
    fetch_url_text,
    looks_like_url,
)

logger = logging.getLogger(__name__)

UrlTextFetcher = Callable[[str], Awaitable[str]]


class CaptureError(Exception):
    """No usable payload on the source. Callers treat this as a no-op."""


async def collect(
    source: ContentSource,
    fetch_url: UrlTextFetcher = fetch_url_text,
) -> CapturedContent:
    """Sniff source and normalise the payload.

    Args:
        source: Content source to read.
        fetch_url: Coroutine returning page text for a URL.

    Returns:
        CapturedContent with at least one non-empty field.

    Raises:
        CaptureError: Nothing usable on the source.
    """
    payload = detect(source)
    if payload is None:
        raise CaptureError("Nothing to capture")

    if payload.kind == "pdf":
        text = pdf_to_text(payload.data)
        if not text:
            logger.info("PDF yielded no extractable text")
        captured = CapturedContent(text=text, source_kind="pdf")

    elif payload.kind == "video":
        captured = CapturedContent(
            text=read_text(source), videos=(payload.data,), source_kind="video",
        )

    elif payload.kind == "image":
        captured = CapturedContent(
            text=read_text(source), images=(payload.data,), source_kind="image",
        )

    elif looks_like_url(payload.text):
        captured = await _collect_url(payload.text, fetch_url)

    else:
        captured = CapturedContent(text=payload.text, source_kind="text")

    if captured.is_empty:
        raise CaptureError(f"Captured {payload.kind} payload is empty")
    return captured


async def _collect_url(url: str, fetch_url: UrlTextFetcher) -> CapturedContent:
    try:
        text = await fetch_url(url.strip())
    except UrlFetchError as exc:
        logger.warning("Error processing URL: %s", exc)
        return CapturedContent(text=url, source_kind="text")
    logger.info("Extracted text from URL %s (%d chars)", url.strip(), len(text))
    return CapturedContent(text=text, source_kind="url")


def capture_service_text(source: ContentSource) -> CapturedContent:
    """Service-style capture: text is mandatory, an image is optional.

    Raises:
        CaptureError: No text was selected.
    """
    text = read_text(source, SERVICE_TEXT_TYPES)
    if not text:
        raise CaptureError("No text was selected")
    image = read_image(source)
    images = (image[0],) if image is not None else ()
    return CapturedContent(text=text, images=images, source_kind="text")
