# src/llm/base_client.py — v3
"""Abstract AI provider interface.

Every backend implements _generate() against its own wire format; the
shared process_text() wraps it with request validation, a configuration
snapshot, processing-state tracking and cooperative cancellation.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pydantic import BaseModel

from writingtools.llm.cancellation import CancellationToken
from writingtools.llm.errors import RequestCancelledError
from writingtools.llm.models import GenerationRequest

logger = logging.getLogger(__name__)

ConfigT = TypeVar("ConfigT", bound=BaseModel)


class BaseAIProvider(ABC, Generic[ConfigT]):
    """Unified interface for all AI backends."""

    def __init__(self, config: ConfigT) -> None:
        self._config = config
        self._token: CancellationToken | None = None
        self._is_processing = False

    @property
    def config(self) -> ConfigT:
        return self._config

    @property
    def is_processing(self) -> bool:
        return self._is_processing

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (gemini, openai)."""

    @abstractmethod
    async def _generate(self, config: ConfigT, request: GenerationRequest) -> str:
        """Execute one backend call and return the generated text.

        Raises:
            ProviderError: Classified failure for this call.
        """

    async def process_text(
        self,
        system_prompt: str | None,
        user_prompt: str,
        images: list[bytes] | tuple[bytes, ...] = (),
        videos: list[bytes] | tuple[bytes, ...] | None = None,
    ) -> str:
        """Generate text for one request.

        Args:
            system_prompt: Optional instruction prefix.
            user_prompt: Content or instruction; may be empty only when
                media is attached.
            images: Raw image payloads.
            videos: Raw video payloads, or None.

        Returns:
            Generated text.

        Raises:
            EmptyRequestError: Prompt empty and no media attached.
            ProviderError: Classified backend failure.
            RequestCancelledError: cancel() was called before the result
                was delivered.
        """
        request = GenerationRequest.create(
            user_prompt=user_prompt,
            system_prompt=system_prompt,
            images=images,
            videos=videos,
        )
        return await self.execute(request)

    async def execute(
        self,
        request: GenerationRequest,
        token: CancellationToken | None = None,
    ) -> str:
        """Run a prebuilt request. See process_text().

        Args:
            request: The request to send.
            token: Caller-owned token for this call. Cancelling it stops
                only this call, unlike cancel() which stops whichever call
                the provider is currently running.
        """
        config = self._config
        if token is None:
            token = CancellationToken()
        self._token = token
        self._is_processing = True

        task = asyncio.ensure_future(self._generate(config, request))
        token.bind(task)
        logger.debug(
            "%s call started: images=%d videos=%d",
            self.provider_name, len(request.images), len(request.videos or ()),
        )
        try:
            text = await task
        except (asyncio.CancelledError, Exception):
            if token.cancelled:
                logger.debug("%s outcome discarded after cancel", self.provider_name)
                raise RequestCancelledError(self.provider_name) from None
            raise
        finally:
            if self._token is token:
                self._token = None
                self._is_processing = False

        if token.cancelled:
            logger.debug("%s result discarded after cancel", self.provider_name)
            raise RequestCancelledError(self.provider_name)
        return text

    def cancel(self) -> None:
        """Stop delivering the in-flight call's result. Safe when idle."""
        if self._token is not None:
            self._token.cancel()
            logger.info("%s call cancelled", self.provider_name)
        self._is_processing = False
