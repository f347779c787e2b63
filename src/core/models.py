# src/core/models.py — v2
"""Shared Pydantic domain models used across modules.

Payloads produced by sniffing, the normalised capture and the outcome handed to
the delivery surface.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


# === CONTENT PAYLOADS ===


class _Payload(BaseModel):
    model_config = ConfigDict(frozen=True)


class TextPayload(_Payload):
    """Plain text selection."""

    kind: Literal["text"] = "text"
    text: str


class ImagePayload(_Payload):
    """One image, taken from the first matching image type."""

    kind: Literal["image"] = "image"
    data: bytes
    format_hint: Literal["png", "jpeg", "tiff", "gif", "image"]


class PdfPayload(_Payload):
    """Raw PDF document bytes."""

    kind: Literal["pdf"] = "pdf"
    data: bytes


class VideoPayload(_Payload):
    """Raw video bytes with a container hint."""

    kind: Literal["video"] = "video"
    data: bytes
    format_hint: Literal["mp4", "mov", "avi", "mkv"]


ContentPayload = Annotated[
    Union[TextPayload, ImagePayload, PdfPayload, VideoPayload],
    Field(discriminator="kind"),
]


# === CAPTURE ===


class CapturedContent(BaseModel):
    """Normalised capture ready to be turned into a request.

    Invariant: images is empty whenever videos is non-empty.
    """

    model_config = ConfigDict(frozen=True)

    text: str = ""
    images: tuple[bytes, ...] = ()
    videos: tuple[bytes, ...] = ()
    source_kind: Literal["text", "image", "pdf", "video", "url"]

    @property
    def is_empty(self) -> bool:
        return not self.text and not self.images and not self.videos


# === SESSION OUTCOME ===


class SessionOutcome(BaseModel):
    """What a succeeded session hands to the delivery surface."""

    model_config = ConfigDict(frozen=True)

    session_id: str
    operation_kind: str
    result_text: str
    original_text: str
    presentation: Literal["window", "replace"]
    provider: str
