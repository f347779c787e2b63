# tests/unit/llm/test_gemini_adapter.py — v1
"""Tests for llm/adapters/gemini_adapter.py — wire format and error mapping."""

from __future__ import annotations

import base64
import json

import httpx
import pytest

from writingtools.llm.adapters.gemini_adapter import (
    GeminiProvider,
    build_endpoint,
    build_prompt_text,
    build_request_body,
    parse_response,
)
from writingtools.llm.errors import (
    EmptyResultError,
    HTTPStatusError,
    MalformedResponseError,
    MissingCredentialError,
    TransportError,
)
from writingtools.llm.models import GeminiConfig, GenerationRequest


def _ok_body(text: str = "answer") -> bytes:
    return json.dumps(
        {"candidates": [{"content": {"parts": [{"text": text}]}}]}
    ).encode()


class _Recorder:
    """MockTransport handler that records requests and replays one response."""

    def __init__(self, status: int = 200, body: bytes | None = None) -> None:
        self.status = status
        self.body = _ok_body() if body is None else body
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status, content=self.body)


def _provider(recorder, api_key: str = "gem-key") -> GeminiProvider:
    return GeminiProvider(
        GeminiConfig(api_key=api_key), transport=httpx.MockTransport(recorder),
    )


class TestRequestBody:
    def test_prompt_join(self):
        assert build_prompt_text("sys", "user") == "sys\n\nuser"
        assert build_prompt_text(None, "user") == "user"

    def test_text_then_images_then_videos(self):
        req = GenerationRequest.create(
            "u", system_prompt="s", images=[b"I1", b"I2"], videos=[b"V"],
        )
        parts = build_request_body(req)["contents"][0]["parts"]
        assert parts[0] == {"text": "s\n\nu"}
        assert [p["inline_data"]["mime_type"] for p in parts[1:]] == [
            "image/jpeg", "image/jpeg", "video/mp4",
        ]
        assert parts[1]["inline_data"]["data"] == base64.b64encode(b"I1").decode()

    def test_single_contents_entry(self):
        body = build_request_body(GenerationRequest.create("x"))
        assert len(body["contents"]) == 1
        assert body["contents"][0]["parts"] == [{"text": "x"}]

    def test_endpoint_carries_key(self):
        url = build_endpoint("abc")
        assert url.host == "generativelanguage.googleapis.com"
        assert url.path == "/v1beta/models/gemini-2.0-flash-exp:generateContent"
        assert url.params["key"] == "abc"


class TestParseResponse:
    def test_ok(self):
        assert parse_response(200, _ok_body("hi")) == "hi"

    def test_error_message_from_body(self):
        body = json.dumps({"error": {"message": "rate limited"}}).encode()
        with pytest.raises(HTTPStatusError) as exc_info:
            parse_response(429, body)
        assert exc_info.value.status == 429
        assert exc_info.value.message == "rate limited"

    def test_error_without_message(self):
        with pytest.raises(HTTPStatusError, match="Server returned error 503"):
            parse_response(503, b"<html>down</html>")

    def test_invalid_json(self):
        with pytest.raises(MalformedResponseError, match="Failed to parse JSON"):
            parse_response(200, b"not json")

    def test_non_object_json(self):
        with pytest.raises(MalformedResponseError):
            parse_response(200, b"[1, 2]")

    def test_no_candidates(self):
        with pytest.raises(EmptyResultError):
            parse_response(200, b'{"candidates": []}')

    def test_candidate_without_text(self):
        body = json.dumps({"candidates": [{"content": {"parts": [{}]}}]}).encode()
        with pytest.raises(MalformedResponseError, match="No valid content"):
            parse_response(200, body)


class TestGeminiProvider:
    @pytest.mark.asyncio
    async def test_video_request_on_the_wire(self):
        recorder = _Recorder(body=_ok_body("described"))
        provider = _provider(recorder)

        result = await provider.process_text(None, "describe", videos=[b"\x00\x01"])

        assert result == "described"
        sent = json.loads(recorder.requests[0].content)
        assert sent["contents"][0]["parts"] == [
            {"text": "describe"},
            {"inline_data": {"mime_type": "video/mp4", "data": "AAE="}},
        ]
        assert recorder.requests[0].headers["content-type"] == "application/json"
        assert recorder.requests[0].url.params["key"] == "gem-key"

    @pytest.mark.asyncio
    async def test_missing_key_makes_no_request(self):
        recorder = _Recorder()
        provider = _provider(recorder, api_key="")
        with pytest.raises(MissingCredentialError, match="API key is missing"):
            await provider.process_text(None, "hi")
        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_rate_limited(self):
        recorder = _Recorder(
            status=429, body=json.dumps({"error": {"message": "rate limited"}}).encode(),
        )
        with pytest.raises(HTTPStatusError) as exc_info:
            await _provider(recorder).process_text(None, "hi")
        assert (exc_info.value.status, exc_info.value.message) == (429, "rate limited")
        assert exc_info.value.provider == "gemini"

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        provider = GeminiProvider(
            GeminiConfig(api_key="k"), transport=httpx.MockTransport(handler),
        )
        with pytest.raises(TransportError):
            await provider.process_text(None, "hi")

    def test_provider_name(self):
        assert GeminiProvider(GeminiConfig(api_key="k")).provider_name == "gemini"
