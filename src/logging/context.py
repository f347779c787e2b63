# src/logging/context.py — v2
"""Contextual logging support: attach session_id, provider, operation to records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set once per session run.
_session_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "session_id", default=None
)
_provider: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "provider", default=None
)
_operation: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "operation", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    session_id: str | None = None
    provider: str | None = None
    operation: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        session_id=_session_id.get(),
        provider=_provider.get(),
        operation=_operation.get(),
    )


def set_session_context(
    session_id: str,
    provider: str | None = None,
    operation: str | None = None,
) -> None:
    """Set session-level context (called once per session run)."""
    _session_id.set(session_id)
    _provider.set(provider)
    _operation.set(operation)


def clear_context() -> None:
    """Reset all context variables."""
    _session_id.set(None)
    _provider.set(None)
    _operation.set(None)
