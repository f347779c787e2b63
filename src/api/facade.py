# src/api/facade.py — v2
"""Public API facade: one call from captured content to delivered result.

Usage:
    from writingtools.api.facade import build_coordinator, transform
    coordinator = build_coordinator(settings, surface)
    session = await transform(coordinator, "summary", source=source)
"""

from __future__ import annotations

import functools
import logging

from writingtools.capture.source import ContentSource
from writingtools.config.settings import Settings
from writingtools.core.models import CapturedContent
from writingtools.extraction.url_fetcher import fetch_url_text
from writingtools.llm.provider_registry import ProviderRegistry
from writingtools.pipeline.delivery import DeliverySurface
from writingtools.pipeline.operations import (
    CustomCommand,
    FreeformInstruction,
    Operation,
    find_operation,
    load_custom_commands,
)
from writingtools.pipeline.session import RequestSession, SessionCoordinator

logger = logging.getLogger(__name__)


def build_coordinator(
    settings: Settings,
    surface: DeliverySurface,
    registry: ProviderRegistry | None = None,
) -> SessionCoordinator:
    """Wire providers, URL fetching and the delivery surface from settings."""
    registry = registry or ProviderRegistry.from_settings(settings)
    fetch_url = functools.partial(fetch_url_text, timeout_s=settings.http_timeout_s)
    return SessionCoordinator(registry, surface, fetch_url=fetch_url)


def resolve_operation(
    name: str | None,
    instruction: str | None = None,
    commands: list[CustomCommand] | None = None,
) -> Operation:
    """Map CLI/API arguments to an operation.

    A non-empty instruction wins over name.

    Raises:
        KeyError: Unknown operation name.
        ValueError: Neither name nor instruction given.
    """
    if instruction:
        return FreeformInstruction(instruction=instruction)
    if not name:
        raise ValueError("An operation name or an instruction is required")
    return find_operation(name, commands)


async def transform(
    coordinator: SessionCoordinator,
    operation: Operation | str,
    source: ContentSource | None = None,
    content: CapturedContent | None = None,
    settings: Settings | None = None,
) -> RequestSession:
    """Run one session through the coordinator.

    Args:
        coordinator: Coordinator from build_coordinator().
        operation: Operation object, or a built-in/custom command name.
        source: Content source to sniff.
        content: Prebuilt content (e.g. from the shared slot) instead of source.
        settings: Used to load custom commands when operation is a name.

    Returns:
        The finished session.
    """
    if isinstance(operation, str):
        commands = load_custom_commands(settings.custom_commands_path) if settings else []
        operation = find_operation(operation, commands)
    return await coordinator.submit(operation, source=source, content=content)
