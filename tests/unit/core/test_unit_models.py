# tests/unit/core/test_models.py — v2
"""Tests for core/models.py — payload union and captured content."""

from __future__ import annotations

import pytest
from pydantic import TypeAdapter, ValidationError

from writingtools.core.models import (
    CapturedContent,
    ContentPayload,
    ImagePayload,
    TextPayload,
    VideoPayload,
)


class TestContentPayload:
    def test_discriminated_by_kind(self):
        adapter = TypeAdapter(ContentPayload)
        payload = adapter.validate_python({"kind": "image", "data": b"x", "format_hint": "gif"})
        assert isinstance(payload, ImagePayload)

    def test_unknown_image_hint_rejected(self):
        with pytest.raises(ValidationError):
            ImagePayload(data=b"x", format_hint="bmp")

    def test_video_hint(self):
        assert VideoPayload(data=b"v", format_hint="avi").kind == "video"

    def test_frozen(self):
        payload = TextPayload(text="a")
        with pytest.raises(ValidationError):
            payload.text = "b"  # type: ignore[misc]


class TestCapturedContent:
    def test_empty(self):
        assert CapturedContent(source_kind="text").is_empty

    def test_image_only_not_empty(self):
        assert not CapturedContent(images=(b"i",), source_kind="image").is_empty
