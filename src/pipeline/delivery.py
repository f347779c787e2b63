# src/pipeline/delivery.py — v1
"""Delivery surface: where terminal session states are reported.

The pipeline never talks to windows or the pasteboard directly; it calls
a DeliverySurface. Cancelled sessions and empty captures are never
reported.
"""

from __future__ import annotations

import sys
from typing import Protocol, TextIO, runtime_checkable

from writingtools.core.models import SessionOutcome


@runtime_checkable
class DeliverySurface(Protocol):
    """Receives the result or error of a finished session."""

    def present_result(self, outcome: SessionOutcome) -> None: ...

    def present_error(self, operation_kind: str, message: str) -> None: ...


class ConsoleSurface:
    """Writes results to stdout and errors to stderr."""

    def __init__(self, out: TextIO | None = None, err: TextIO | None = None) -> None:
        self._out = out or sys.stdout
        self._err = err or sys.stderr

    def present_result(self, outcome: SessionOutcome) -> None:
        if outcome.presentation == "window":
            self._out.write(f"=== {outcome.operation_kind} ===\n")
        self._out.write(outcome.result_text)
        if not outcome.result_text.endswith("\n"):
            self._out.write("\n")

    def present_error(self, operation_kind: str, message: str) -> None:
        self._err.write(f"Error processing {operation_kind}: {message}\n")
