# src/llm/provider_registry.py — v1
"""Active-provider selector over the configured backends.

Exactly one provider is active at a time. Switching is a plain
assignment. Reconfiguring a provider builds a new instance and swaps it
in; a call already running on the old instance keeps the configuration
it started with.
"""

from __future__ import annotations

import logging

from writingtools.config.settings import Settings
from writingtools.llm.base_client import BaseAIProvider
from writingtools.llm.client_factory import create_provider

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Holds one instance per backend plus the active selection."""

    def __init__(
        self,
        providers: dict[str, BaseAIProvider],
        active: str,
    ) -> None:
        if active not in providers:
            raise KeyError(f"Active provider {active!r} is not configured")
        self._providers = dict(providers)
        self._active = active

    @classmethod
    def from_settings(cls, settings: Settings) -> ProviderRegistry:
        """Build every registered backend from settings."""
        providers = {
            name: create_provider(name, settings)
            for name in ("gemini", "openai")
        }
        if not settings.has_any_api_key:
            logger.warning("No API keys configured.")
        return cls(providers, settings.current_provider)

    @property
    def active_name(self) -> str:
        return self._active

    @property
    def active(self) -> BaseAIProvider:
        return self._providers[self._active]

    def names(self) -> list[str]:
        return sorted(self._providers)

    def get(self, name: str) -> BaseAIProvider:
        return self._providers[name]

    def set_active(self, name: str) -> None:
        """Select the backend used for the next dispatch."""
        if name not in self._providers:
            raise KeyError(f"Unknown provider {name!r}")
        self._active = name
        logger.info("Active provider set to %s", name)

    def replace(self, name: str, provider: BaseAIProvider) -> BaseAIProvider | None:
        """Swap in a new instance for name; returns the previous one."""
        previous = self._providers.get(name)
        self._providers[name] = provider
        logger.info("Provider %s reconfigured", name)
        return previous

    def reconfigure(
        self, name: str, config: object, settings: Settings | None = None,
    ) -> BaseAIProvider:
        """Build a fresh instance from config and swap it in."""
        provider = create_provider(name, settings=settings, config=config)
        self.replace(name, provider)
        return provider

    def cancel_all(self) -> None:
        for provider in self._providers.values():
            provider.cancel()
