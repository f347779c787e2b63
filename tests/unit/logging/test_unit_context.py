# tests/unit/logging/test_context.py — v2
"""Tests for logging/context.py."""

from __future__ import annotations

from writingtools.logging.context import (
    LogContext,
    clear_context,
    get_context,
    set_session_context,
)


class TestLogContext:
    def test_empty_by_default(self):
        clear_context()
        assert get_context().as_dict() == {}

    def test_set_and_get(self):
        set_session_context("abc123", provider="gemini", operation="summary")
        ctx = get_context()
        assert ctx.session_id == "abc123"
        assert ctx.as_dict() == {
            "session_id": "abc123", "provider": "gemini", "operation": "summary",
        }

    def test_as_dict_skips_none(self):
        assert LogContext(session_id="s").as_dict() == {"session_id": "s"}

    def test_clear(self):
        set_session_context("x")
        clear_context()
        assert get_context().session_id is None
