# src/llm/adapters/gemini_adapter.py — v2
"""Google Gemini adapter implementing BaseAIProvider.

Talks to the generateContent REST endpoint directly over httpx so the
request body matches the documented wire format exactly: one "contents"
entry whose parts are the prompt text, then images as image/jpeg inline
data, then videos as video/mp4 inline data.
"""

from __future__ import annotations

import base64
import json
import logging
from typing import Any

import httpx

from writingtools.llm.base_client import BaseAIProvider
from writingtools.llm.errors import (
    EmptyResultError,
    HTTPStatusError,
    InvalidEndpointError,
    MalformedResponseError,
    MissingCredentialError,
    TransportError,
)
from writingtools.llm.models import GeminiConfig, GeminiModel, GenerationRequest

logger = logging.getLogger(__name__)

_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

# The endpoint is pinned to one model regardless of the configured one.
_ENDPOINT_MODEL = GeminiModel.TWO_FLASH.value

_IMAGE_MIME = "image/jpeg"
_VIDEO_MIME = "video/mp4"


def build_prompt_text(system_prompt: str | None, user_prompt: str) -> str:
    """Join system and user prompt the way Gemini receives them."""
    if system_prompt is None:
        return user_prompt
    return f"{system_prompt}\n\n{user_prompt}"


def build_request_body(request: GenerationRequest) -> dict[str, Any]:
    """Build the generateContent JSON body for a request."""
    parts: list[dict[str, Any]] = [
        {"text": build_prompt_text(request.system_prompt, request.user_prompt)}
    ]
    for image in request.images:
        parts.append({
            "inline_data": {
                "mime_type": _IMAGE_MIME,
                "data": base64.b64encode(image).decode("ascii"),
            }
        })
    for video in request.videos or ():
        parts.append({
            "inline_data": {
                "mime_type": _VIDEO_MIME,
                "data": base64.b64encode(video).decode("ascii"),
            }
        })
    return {"contents": [{"parts": parts}]}


def build_endpoint(api_key: str) -> httpx.URL:
    """Build the generateContent URL with the API key as query parameter."""
    try:
        return httpx.URL(
            f"{_BASE_URL}/models/{_ENDPOINT_MODEL}:generateContent",
            params={"key": api_key},
        )
    except (httpx.InvalidURL, TypeError) as exc:
        raise InvalidEndpointError("Invalid URL.", provider="gemini") from exc


def parse_response(status: int, body: bytes) -> str:
    """Turn a raw HTTP response into generated text or a ProviderError."""
    if status != 200:
        message = f"Server returned error {status}"
        try:
            payload = json.loads(body)
        except ValueError:
            payload = None
        if isinstance(payload, dict):
            error = payload.get("error")
            if isinstance(error, dict) and isinstance(error.get("message"), str):
                message = error["message"]
        logger.warning("Gemini API error %d: %s", status, message)
        raise HTTPStatusError(status, message, provider="gemini")

    try:
        payload = json.loads(body)
    except ValueError as exc:
        raise MalformedResponseError(
            "Failed to parse JSON response.", provider="gemini",
        ) from exc
    if not isinstance(payload, dict):
        raise MalformedResponseError(
            "Failed to parse JSON response.", provider="gemini",
        )

    candidates = payload.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        raise EmptyResultError(
            "No candidates found in the response.", provider="gemini",
        )

    first = candidates[0]
    content = first.get("content") if isinstance(first, dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if isinstance(parts, list) and parts and isinstance(parts[0], dict):
        text = parts[0].get("text")
        if isinstance(text, str):
            return text

    raise MalformedResponseError("No valid content in response.", provider="gemini")


class GeminiProvider(BaseAIProvider[GeminiConfig]):
    """Gemini generateContent adapter."""

    def __init__(
        self,
        config: GeminiConfig,
        timeout_s: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(config)
        self._timeout_s = timeout_s
        self._transport = transport

    @property
    def provider_name(self) -> str:
        return "gemini"

    async def _generate(self, config: GeminiConfig, request: GenerationRequest) -> str:
        if not config.api_key:
            raise MissingCredentialError("API key is missing.", provider="gemini")

        url = build_endpoint(config.api_key)
        body = build_request_body(request)

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout_s, transport=self._transport,
            ) as client:
                resp = await client.post(
                    url,
                    headers={"Content-Type": "application/json"},
                    json=body,
                )
        except httpx.HTTPError as exc:
            raise TransportError(str(exc) or type(exc).__name__, provider="gemini") from exc

        return parse_response(resp.status_code, resp.content)
