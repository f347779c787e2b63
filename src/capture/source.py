# src/capture/source.py — v1
"""Clipboard-like content sources.

A source exposes its type identifiers, bytes per type identifier and the
file/web URLs it references. The pipeline only ever reads from it.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

# Uniform type identifiers understood by the sniffer.
PDF_TYPES: tuple[str, ...] = ("com.adobe.pdf", "public.pdf")

VIDEO_TYPES: tuple[tuple[str, str], ...] = (
    ("public.mpeg-4", "mp4"),
    ("com.apple.quicktime-movie", "mov"),
    ("public.avi", "avi"),
    ("org.matroska.mkv", "mkv"),
    ("public.movie", "mp4"),
)

# Order is the preference order; only the first hit is used.
IMAGE_TYPES: tuple[tuple[str, str], ...] = (
    ("public.png", "png"),
    ("public.jpeg", "jpeg"),
    ("public.tiff", "tiff"),
    ("com.compuserve.gif", "gif"),
    ("public.image", "image"),
)

TEXT_TYPES: tuple[str, ...] = ("public.utf8-plain-text", "public.plain-text")

# Service-style capture also accepts rich text.
SERVICE_TEXT_TYPES: tuple[str, ...] = (
    "public.utf8-plain-text",
    "public.rtf",
    "public.plain-text",
)

_EXTENSION_TYPES: dict[str, str] = {
    ".pdf": "com.adobe.pdf",
    ".mp4": "public.mpeg-4",
    ".mov": "com.apple.quicktime-movie",
    ".avi": "public.avi",
    ".mkv": "org.matroska.mkv",
    ".png": "public.png",
    ".jpg": "public.jpeg",
    ".jpeg": "public.jpeg",
    ".tif": "public.tiff",
    ".tiff": "public.tiff",
    ".gif": "com.compuserve.gif",
    ".txt": "public.utf8-plain-text",
    ".md": "public.utf8-plain-text",
}

_REFERENCED_EXTENSIONS = frozenset({".pdf", ".mp4", ".mov", ".avi", ".mkv"})


@runtime_checkable
class ContentSource(Protocol):
    """Read-only multi-format content source."""

    def available_types(self) -> list[str]: ...

    def data_for_type(self, type_id: str) -> bytes | None: ...

    def urls(self) -> list[str]: ...


class MemoryContentSource:
    """In-memory ContentSource: a dict of type → bytes plus URL references."""

    def __init__(
        self,
        items: dict[str, bytes] | None = None,
        urls: list[str] | None = None,
    ) -> None:
        self._items = dict(items or {})
        self._urls = list(urls or [])

    @classmethod
    def from_text(cls, text: str) -> MemoryContentSource:
        return cls({TEXT_TYPES[0]: text.encode("utf-8")})

    @classmethod
    def from_path(
        cls, path: Path, as_reference: bool | None = None,
    ) -> MemoryContentSource:
        """Build a source for a local file.

        Args:
            path: File to expose.
            as_reference: Reference the file by URL (like a copied file in a
                file manager) instead of loading its bytes under a type.
                Default: reference PDFs and videos, load everything else.
        """
        if as_reference is None:
            as_reference = path.suffix.lower() in _REFERENCED_EXTENSIONS
        if as_reference:
            return cls(urls=[path.resolve().as_uri()])
        type_id = _EXTENSION_TYPES.get(path.suffix.lower(), "public.data")
        return cls({type_id: path.read_bytes()})

    def available_types(self) -> list[str]:
        return list(self._items)

    def data_for_type(self, type_id: str) -> bytes | None:
        return self._items.get(type_id)

    def urls(self) -> list[str]:
        return list(self._urls)

    def __repr__(self) -> str:
        return f"MemoryContentSource(types={self.available_types()!r}, urls={self._urls!r})"
