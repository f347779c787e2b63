# src/llm/adapters/openai_adapter.py — v2
"""OpenAI-compatible adapter implementing BaseAIProvider.

Uses the official openai SDK against a configurable base URL, so any
chat-completions compatible gateway works. Images travel as base64 data
URLs in the user message; the chat envelope has no video part.
"""

from __future__ import annotations

import base64
import logging
from typing import Any

import openai

from writingtools.llm.base_client import BaseAIProvider
from writingtools.llm.errors import (
    EmptyResultError,
    HTTPStatusError,
    InvalidEndpointError,
    MalformedResponseError,
    MissingCredentialError,
    TransportError,
)
from writingtools.llm.models import GenerationRequest, OpenAIConfig

logger = logging.getLogger(__name__)

_IMAGE_MIME = "image/jpeg"


def build_messages(request: GenerationRequest) -> list[dict[str, Any]]:
    """Build the chat-completions messages array for a request."""
    messages: list[dict[str, Any]] = []
    if request.system_prompt:
        messages.append({"role": "system", "content": request.system_prompt})

    if not request.images:
        messages.append({"role": "user", "content": request.user_prompt})
        return messages

    content_parts: list[dict[str, Any]] = []
    if request.user_prompt:
        content_parts.append({"type": "text", "text": request.user_prompt})
    for image in request.images:
        b64 = base64.b64encode(image).decode("ascii")
        content_parts.append({
            "type": "image_url",
            "image_url": {"url": f"data:{_IMAGE_MIME};base64,{b64}"},
        })
    messages.append({"role": "user", "content": content_parts})
    return messages


def _status_message(exc: openai.APIStatusError) -> str:
    body = exc.body
    if isinstance(body, dict):
        if isinstance(body.get("message"), str):
            return body["message"]
        error = body.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
    return f"Server returned error {exc.status_code}"


class OpenAIProvider(BaseAIProvider[OpenAIConfig]):
    """OpenAI chat-completions adapter."""

    def __init__(self, config: OpenAIConfig, timeout_s: float = 60.0) -> None:
        super().__init__(config)
        self._timeout_s = timeout_s

    @property
    def provider_name(self) -> str:
        return "openai"

    def _make_client(self, config: OpenAIConfig) -> openai.AsyncOpenAI:
        return openai.AsyncOpenAI(
            api_key=config.api_key,
            base_url=config.base_url,
            organization=config.organization,
            project=config.project,
            timeout=self._timeout_s,
            max_retries=0,
        )

    async def _generate(self, config: OpenAIConfig, request: GenerationRequest) -> str:
        if not config.api_key:
            raise MissingCredentialError("API key is missing.", provider="openai")
        if not config.base_url.startswith(("http://", "https://")):
            raise InvalidEndpointError(
                f"Invalid base URL: {config.base_url!r}", provider="openai",
            )
        if request.videos:
            logger.warning(
                "OpenAI chat completions cannot carry video; dropping %d video(s)",
                len(request.videos),
            )

        client = self._make_client(config)
        try:
            resp = await client.chat.completions.create(
                model=config.model, messages=build_messages(request),
            )
        except openai.APIConnectionError as exc:
            raise TransportError(str(exc), provider="openai") from exc
        except openai.APIStatusError as exc:
            raise HTTPStatusError(
                exc.status_code, _status_message(exc), provider="openai",
            ) from exc
        except openai.OpenAIError as exc:
            raise MalformedResponseError(str(exc), provider="openai") from exc
        finally:
            await client.close()

        choices = getattr(resp, "choices", None)
        if not choices:
            raise EmptyResultError("No choices found in the response.", provider="openai")
        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        if not content:
            raise EmptyResultError("No valid content in response.", provider="openai")
        return content
