# tests/unit/capture/test_source.py — v1
"""Tests for capture/source.py — MemoryContentSource builders."""

from __future__ import annotations

from writingtools.capture.source import ContentSource, MemoryContentSource


class TestMemoryContentSource:
    def test_satisfies_protocol(self):
        assert isinstance(MemoryContentSource(), ContentSource)

    def test_from_text(self):
        src = MemoryContentSource.from_text("hi")
        assert src.data_for_type("public.utf8-plain-text") == b"hi"
        assert src.urls() == []

    def test_missing_type_is_none(self):
        assert MemoryContentSource().data_for_type("public.png") is None

    def test_from_path_references_pdf(self, tmp_path):
        pdf = tmp_path / "a.pdf"
        pdf.write_bytes(b"%PDF")
        src = MemoryContentSource.from_path(pdf)
        assert src.available_types() == []
        assert src.urls() == [pdf.resolve().as_uri()]

    def test_from_path_loads_image(self, tmp_path):
        png = tmp_path / "a.png"
        png.write_bytes(b"PNG")
        src = MemoryContentSource.from_path(png)
        assert src.data_for_type("public.png") == b"PNG"

    def test_from_path_force_reference(self, tmp_path):
        png = tmp_path / "a.png"
        png.write_bytes(b"PNG")
        src = MemoryContentSource.from_path(png, as_reference=True)
        assert src.available_types() == []
        assert len(src.urls()) == 1
