# src/storage/shared_slot.py — v1
"""Persisted key/value slot shared with the out-of-process URL collaborator.

The collaborator fetches a page, flattens it with html_to_text and stores
the text under SHARED_CONTENT_KEY; the pipeline later takes it from
there. Writes go through a temp file and os.replace so a reader never
sees a half-written file.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from writingtools.extraction.url_fetcher import fetch_url_text

logger = logging.getLogger(__name__)

SHARED_CONTENT_KEY = "sharedContent"


class SharedSlot:
    """JSON-file backed store of string values."""

    def __init__(self, path: str | Path, key: str = SHARED_CONTENT_KEY) -> None:
        self._path = Path(path).expanduser()
        self._key = key

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (ValueError, OSError) as exc:
            logger.warning("Shared slot %s is unreadable: %s", self._path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _store(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh)
            os.replace(tmp, self._path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def put(self, text: str) -> None:
        data = self._load()
        data[self._key] = text
        self._store(data)
        logger.debug("Stored %d chars under %s", len(text), self._key)

    def peek(self) -> str | None:
        value = self._load().get(self._key)
        return value if isinstance(value, str) else None

    def take(self) -> str | None:
        """Return and remove the stored text."""
        data = self._load()
        value = data.pop(self._key, None)
        if value is not None:
            self._store(data)
        return value if isinstance(value, str) else None

    def clear(self) -> None:
        if self._path.exists():
            self._path.unlink()


async def share_url(url: str, slot: SharedSlot, timeout_s: float = 30.0) -> str:
    """Fetch url, flatten it to text and deposit the text in slot.

    Raises:
        UrlFetchError: URL is not http(s) or could not be fetched.
    """
    text = await fetch_url_text(url, timeout_s=timeout_s)
    slot.put(text)
    logger.info("Shared %s (%d chars)", url, len(text))
    return text
