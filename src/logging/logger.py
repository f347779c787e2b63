# src/logging/logger.py — v3
"""JSON and text formatters plus the one-shot logging setup.

Everything logs under the "writingtools" namespace; setup_logging() owns
its handlers. Results go to stdout, so log output defaults to stderr.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, TextIO

from writingtools.logging.context import LogContext, get_context

if TYPE_CHECKING:
    from writingtools.config.settings import Settings

ROOT_LOGGER = "writingtools"

# Client libraries that log every request at INFO.
_QUIET_LIBRARIES: tuple[str, ...] = ("httpx", "httpcore", "openai")


class JsonFormatter(logging.Formatter):
    """Structured JSON log formatter, one object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context_dict = get_context().as_dict()
        if context_dict:
            log_entry["context"] = context_dict

        # Extra data passed via extra={"data": ...}
        data = getattr(record, "data", None)
        if data:
            log_entry["data"] = data

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable line: time, level, logger, session tag, message."""

    def format(self, record: logging.LogRecord) -> str:
        parts = [
            datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S"),
            f"[{record.levelname:8s}]",
            record.name,
        ]
        tag = _session_tag(get_context())
        if tag:
            parts.append(tag)
        parts.append(f"- {record.getMessage()}")
        line = " ".join(parts)
        if record.exc_info and record.exc_info[1] is not None:
            line += "\n" + self.formatException(record.exc_info)
        return line


def _session_tag(ctx: LogContext) -> str:
    """'[s1] (gemini:rewrite)' style tag; empty outside a session."""
    pieces = []
    if ctx.session_id:
        pieces.append(f"[{ctx.session_id}]")
    route = ":".join(p for p in (ctx.provider, ctx.operation) if p)
    if route:
        pieces.append(f"({route})")
    return " ".join(pieces)


def setup_logging(
    level: str = "INFO",
    log_format: str = "text",
    log_file: str | None = None,
    rotation: str = "10MB",
    retention: int = 5,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure the writingtools logger, replacing any earlier setup.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        log_format: Output format ("json" or "text").
        log_file: Path to log file (None = console only).
        rotation: Max file size before rotation (e.g. "10MB").
        retention: Number of rotated files to keep.
        stream: Console stream, stderr when None.

    Returns:
        The configured "writingtools" logger.
    """
    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    formatter: logging.Formatter = JsonFormatter() if log_format == "json" else TextFormatter()

    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        from writingtools.logging.handlers import create_rotating_handler

        file_handler = create_rotating_handler(
            log_file, rotation=rotation, retention=retention
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    for name in _QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger


def configure_from_settings(settings: Settings, verbose: bool = False) -> logging.Logger:
    """Apply the LOG_* settings; verbose forces DEBUG."""
    return setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
