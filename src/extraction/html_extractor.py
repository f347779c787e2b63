# src/extraction/html_extractor.py — v1
"""HTML to plain text using BeautifulSoup.

Shared by the clipboard URL path and the out-of-process share
collaborator. Total: malformed input degrades to raw UTF-8 text, then to
"".
"""

from __future__ import annotations

import logging

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

_DROPPED_TAGS = ("script", "style", "noscript", "template")


def html_to_text(data: bytes) -> str:
    """Strip markup from an HTML byte stream declared as UTF-8.

    Args:
        data: Raw HTML bytes.

    Returns:
        Visible text, the raw UTF-8 decode on parse failure, or "".
    """
    if not data:
        return ""
    try:
        soup = BeautifulSoup(data, "html.parser", from_encoding="utf-8")
        for tag in soup(_DROPPED_TAGS):
            tag.decompose()
        return soup.get_text(separator="\n", strip=True)
    except Exception:
        logger.debug("HTML parse failed; falling back to raw decode")

    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        logger.debug("HTML bytes are not valid UTF-8")
        return ""
