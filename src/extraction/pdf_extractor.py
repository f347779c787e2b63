# src/extraction/pdf_extractor.py — v2
"""PDF to plain text using PyMuPDF (fitz).

Best-effort: pages that fail contribute nothing and an unreadable
document yields "". Never raises for malformed input.
"""

from __future__ import annotations

import logging

import fitz  # PyMuPDF

logger = logging.getLogger(__name__)


def pdf_to_text(data: bytes) -> str:
    """Concatenate the text of every page in page order.

    Args:
        data: Raw PDF bytes.

    Returns:
        Extracted text, possibly empty.
    """
    if not data:
        return ""
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception:
        logger.debug("PDF could not be opened (%d bytes)", len(data))
        return ""

    parts: list[str] = []
    try:
        for page_num in range(doc.page_count):
            parts.append(_page_text(doc, page_num))
    except Exception:
        logger.debug("PDF page enumeration failed", exc_info=True)
    finally:
        doc.close()
    return "".join(parts)


def _page_text(doc: object, page_num: int) -> str:
    """Extract one page's text; failures degrade to ""."""
    try:
        page = doc.load_page(page_num)  # type: ignore[attr-defined]
        return page.get_text("text") or ""
    except Exception:
        logger.debug("Text extraction failed for page %d", page_num + 1)
        return ""
