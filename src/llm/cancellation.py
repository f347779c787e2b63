# src/llm/cancellation.py — v1
"""Cancellation token bound to one provider call."""

from __future__ import annotations

import asyncio


class CancellationToken:
    """One-shot cancellation flag with an optional bound task.

    The provider checks the flag before handing a result back, so a call
    whose response arrives after cancel() is never delivered.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._task: asyncio.Future | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def bind(self, task: asyncio.Future) -> None:
        """Attach the in-flight task so cancel() can stop it."""
        self._task = task
        if self._cancelled:
            task.cancel()

    def cancel(self) -> None:
        """Mark cancelled and cancel the bound task. Idempotent."""
        self._cancelled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()
