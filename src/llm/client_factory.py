# src/llm/client_factory.py — v3
"""Factory: instantiate an AI provider from its name and settings.

Adding a backend means adding an adapter module and a registry entry.
"""

from __future__ import annotations

import importlib
import logging

from writingtools.config.settings import Settings
from writingtools.llm.base_client import BaseAIProvider
from writingtools.llm.models import GeminiConfig, OpenAIConfig

logger = logging.getLogger(__name__)

# Registry of provider name → adapter class path (lazy import).
_PROVIDER_REGISTRY: dict[str, str] = {
    "gemini": "writingtools.llm.adapters.gemini_adapter.GeminiProvider",
    "openai": "writingtools.llm.adapters.openai_adapter.OpenAIProvider",
}


class UnsupportedProviderError(ValueError):
    """Raised when a provider is not registered."""


def gemini_config_from(settings: Settings) -> GeminiConfig:
    """Snapshot the Gemini section of settings."""
    return GeminiConfig(
        api_key=settings.gemini_api_key,
        model_name=settings.gemini_model,
    )


def openai_config_from(settings: Settings) -> OpenAIConfig:
    """Snapshot the OpenAI section of settings."""
    return OpenAIConfig(
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        organization=settings.openai_organization,
        project=settings.openai_project,
        model=settings.openai_model,
    )


_CONFIG_BUILDERS = {
    "gemini": gemini_config_from,
    "openai": openai_config_from,
}


def create_provider(
    name: str,
    settings: Settings | None = None,
    config: object | None = None,
    **kwargs: object,
) -> BaseAIProvider:
    """Instantiate the adapter registered under name.

    Args:
        name: Provider identifier (gemini, openai).
        settings: Application settings; used for the config snapshot and
            transport timeout when config is not given.
        config: Explicit provider config, overriding settings.
        **kwargs: Additional adapter-specific arguments.

    Returns:
        Configured BaseAIProvider instance.

    Raises:
        UnsupportedProviderError: If name is not registered.
    """
    if name not in _PROVIDER_REGISTRY:
        raise UnsupportedProviderError(
            f"Unsupported AI provider: {name!r}. "
            f"Available: {', '.join(sorted(_PROVIDER_REGISTRY))}"
        )

    adapter_cls = _import_class(_PROVIDER_REGISTRY[name])

    init_kwargs = dict(kwargs)
    if settings is not None:
        init_kwargs.setdefault("timeout_s", settings.http_timeout_s)
        if config is None and name in _CONFIG_BUILDERS:
            config = _CONFIG_BUILDERS[name](settings)
    if config is None:
        raise UnsupportedProviderError(
            f"Provider {name!r} needs either settings or an explicit config"
        )

    logger.debug("Creating AI provider: %s", name)
    return adapter_cls(config, **init_kwargs)


def register_provider(name: str, class_path: str) -> None:
    """Register a custom provider adapter.

    Args:
        name: Provider identifier.
        class_path: Fully qualified class path implementing BaseAIProvider.
    """
    _PROVIDER_REGISTRY[name] = class_path
    logger.info("Registered AI provider: %s → %s", name, class_path)


def available_providers() -> list[str]:
    """Return registered provider names."""
    return sorted(_PROVIDER_REGISTRY)


def _import_class(class_path: str) -> type:
    """Dynamically import a class from its fully qualified path."""
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
