# src/capture/sniffer.py — v1
"""Priority-ordered content sniffing over a ContentSource.

detect() checks, in order: PDF, video, image, text, and returns exactly
one payload. Within images only the first present type in IMAGE_TYPES
is used; formats are never merged. Sniffing is synchronous and never
writes to the source.
"""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname

from writingtools.capture.source import (
    IMAGE_TYPES,
    PDF_TYPES,
    TEXT_TYPES,
    VIDEO_TYPES,
    ContentSource,
)
from writingtools.core.models import (
    ContentPayload,
    ImagePayload,
    PdfPayload,
    TextPayload,
    VideoPayload,
)

logger = logging.getLogger(__name__)

SUPPORTED_VIDEO_EXTENSIONS: tuple[str, ...] = ("mp4", "mov", "avi", "mkv")


def detect(source: ContentSource) -> ContentPayload | None:
    """Extract the single most relevant payload from source.

    Returns:
        PdfPayload, VideoPayload, ImagePayload or TextPayload, or None when
        the source holds nothing usable.
    """
    pdf = read_pdf(source)
    if pdf is not None:
        logger.debug("Source contains PDF data")
        return PdfPayload(data=pdf)

    video = read_video(source)
    if video is not None:
        logger.debug("Source contains video data (%s)", video[1])
        return VideoPayload(data=video[0], format_hint=video[1])

    image = read_image(source)
    if image is not None:
        logger.debug("Selected image type: %s", image[1])
        return ImagePayload(data=image[0], format_hint=image[1])

    text = read_text(source)
    if text:
        return TextPayload(text=text)

    return None


def read_pdf(source: ContentSource) -> bytes | None:
    """PDF bytes from a PDF type, else from a referenced .pdf file."""
    for type_id in PDF_TYPES:
        data = source.data_for_type(type_id)
        if data:
            return data

    path = _first_file_url(source)
    if path is not None and path.suffix.lower() == ".pdf":
        return _read_file(path)
    return None


def read_video(source: ContentSource) -> tuple[bytes, str] | None:
    """Video bytes and format hint from a video type or referenced file."""
    for type_id, hint in VIDEO_TYPES:
        data = source.data_for_type(type_id)
        if data:
            return data, hint

    path = _first_file_url(source)
    if path is None:
        return None
    ext = path.suffix.lower().lstrip(".")
    if ext not in SUPPORTED_VIDEO_EXTENSIONS:
        return None
    data = _read_file(path)
    return (data, ext) if data is not None else None


def read_image(source: ContentSource) -> tuple[bytes, str] | None:
    """First image found in preference order, with its format hint."""
    for type_id, hint in IMAGE_TYPES:
        data = source.data_for_type(type_id)
        if data:
            return data, hint
    return None


def read_text(source: ContentSource, types: tuple[str, ...] = TEXT_TYPES) -> str:
    """First non-empty text among types, decoded as UTF-8."""
    for type_id in types:
        data = source.data_for_type(type_id)
        if data:
            text = data.decode("utf-8", errors="replace")
            if text:
                return text
    return ""


def has_pdf(source: ContentSource) -> bool:
    return read_pdf(source) is not None


def has_video(source: ContentSource) -> bool:
    return read_video(source) is not None


def has_image(source: ContentSource) -> bool:
    return read_image(source) is not None


def _first_file_url(source: ContentSource) -> Path | None:
    """Local path of the first referenced URL, if it is a file URL."""
    urls = source.urls()
    if not urls:
        return None
    parsed = urlparse(urls[0])
    if parsed.scheme == "file":
        return Path(url2pathname(parsed.path))
    if parsed.scheme == "":
        return Path(urls[0])
    return None


def _read_file(path: Path) -> bytes | None:
    try:
        return path.read_bytes()
    except OSError:
        logger.debug("Referenced file is not readable: %s", path)
        return None
