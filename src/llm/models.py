# src/llm/models.py — v2
"""Provider-facing types: configs, model catalogue, GenerationRequest."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class EmptyRequestError(ValueError):
    """Raised when a request carries no prompt text and no media at all."""


class GeminiModel(str, Enum):
    """Gemini models selectable in settings."""

    ONE_FLASH_8B = "gemini-1.5-flash-8b-latest"
    ONE_FLASH = "gemini-1.5-flash-latest"
    ONE_PRO = "gemini-1.5-pro-latest"
    TWO_FLASH = "gemini-2.0-flash-exp"

    @property
    def display_name(self) -> str:
        return _GEMINI_DISPLAY_NAMES[self]


_GEMINI_DISPLAY_NAMES: dict[GeminiModel, str] = {
    GeminiModel.ONE_FLASH_8B: "Gemini 1.5 Flash 8B (fast)",
    GeminiModel.ONE_FLASH: "Gemini 1.5 Flash (fast & more intelligent)",
    GeminiModel.ONE_PRO: "Gemini 1.5 Pro (very intelligent, but slower & lower rate limit)",
    GeminiModel.TWO_FLASH: "Gemini 2.0 Flash (extremely intelligent & fast, recommended)",
}


class GeminiConfig(BaseModel):
    """Connection parameters for the Gemini backend."""

    model_config = ConfigDict(frozen=True)

    api_key: str
    model_name: str = GeminiModel.TWO_FLASH.value


class OpenAIConfig(BaseModel):
    """Connection parameters for an OpenAI-compatible backend."""

    model_config = ConfigDict(frozen=True)

    api_key: str
    base_url: str = "https://api.openai.com/v1"
    organization: str | None = None
    project: str | None = None
    model: str = "gpt-4o"


class GenerationRequest(BaseModel):
    """One provider call. Built fresh per dispatch and never mutated."""

    model_config = ConfigDict(frozen=True)

    system_prompt: str | None = None
    user_prompt: str
    images: tuple[bytes, ...] = ()
    videos: tuple[bytes, ...] | None = None

    @classmethod
    def create(
        cls,
        user_prompt: str,
        system_prompt: str | None = None,
        images: list[bytes] | tuple[bytes, ...] = (),
        videos: list[bytes] | tuple[bytes, ...] | None = None,
    ) -> GenerationRequest:
        """Build a request, rejecting one with no prompt and no media.

        Raises:
            EmptyRequestError: If the prompt is empty and no media is attached.
        """
        if not user_prompt and not images and not videos:
            raise EmptyRequestError(
                "Request has no prompt text and no image or video payload"
            )
        return cls(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            images=tuple(images),
            videos=tuple(videos) if videos is not None else None,
        )

    @property
    def has_video(self) -> bool:
        return bool(self.videos)
