# src/main.py — v3
"""CLI entry point: run, ask, command, share-url, take-shared, models, reset.

Usage:
    writingtools run <operation> [--text T | --file F | --url U | --shared]
    writingtools ask <instruction> [--text T | --file F | --url U | --shared]
    writingtools command <name> [--text T | --file F | --url U | --shared]
    writingtools share-url <url>
    writingtools take-shared
    writingtools models
    writingtools reset
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from writingtools.version import __version__

if TYPE_CHECKING:
    from writingtools.capture.source import ContentSource
    from writingtools.config.settings import Settings
    from writingtools.core.models import CapturedContent
    from writingtools.pipeline.operations import Operation

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NOTHING_CAPTURED = 2
EXIT_INTERRUPTED = 130


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)

    if not hasattr(args, "func"):
        parser.print_help()
        return EXIT_ERROR

    try:
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return EXIT_INTERRUPTED
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return EXIT_ERROR


def _add_input_args(p: argparse.ArgumentParser) -> None:
    group = p.add_mutually_exclusive_group()
    group.add_argument("--text", default=None, help="Selected text")
    group.add_argument(
        "--file", type=Path, default=None,
        help="File to capture (PDF, video, image or text)",
    )
    group.add_argument("--url", default=None, help="Web page to fetch and flatten")
    group.add_argument(
        "--shared", action="store_true",
        help="Use text deposited by share-url",
    )
    p.add_argument(
        "--provider", choices=["gemini", "openai"], default=None,
        help="Override the active provider for this call",
    )


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="writingtools",
        description=f"writingtools v{__version__} - AI writing operations on captured content",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- run ---
    p_run = subparsers.add_parser(
        "run", help="Apply a built-in option or custom command",
    )
    p_run.add_argument(
        "operation",
        help="proofread, rewrite, friendly, professional, concise, summary, "
             "key_points, table, or a custom command name",
    )
    _add_input_args(p_run)
    p_run.set_defaults(func=_cmd_run)

    # --- ask ---
    p_ask = subparsers.add_parser(
        "ask", help="Free-form instruction, optionally over captured content",
    )
    p_ask.add_argument("instruction", help="What to do")
    _add_input_args(p_ask)
    p_ask.set_defaults(func=_cmd_ask)

    # --- command ---
    p_cmd = subparsers.add_parser(
        "command", help="Apply a custom command from the commands file",
    )
    p_cmd.add_argument("name", help="Custom command name")
    _add_input_args(p_cmd)
    p_cmd.set_defaults(func=_cmd_command)

    # --- share-url ---
    p_share = subparsers.add_parser(
        "share-url", help="Fetch a page and deposit its text in the shared slot",
    )
    p_share.add_argument("url", help="http(s) URL")
    p_share.set_defaults(func=_cmd_share_url)

    # --- take-shared ---
    p_take = subparsers.add_parser(
        "take-shared", help="Print and clear the shared slot",
    )
    p_take.set_defaults(func=_cmd_take_shared)

    # --- models ---
    p_models = subparsers.add_parser(
        "models", help="List providers, Gemini models and operations",
    )
    p_models.set_defaults(func=_cmd_models)

    # --- reset ---
    p_reset = subparsers.add_parser(
        "reset", help="Clear the shared slot",
    )
    p_reset.set_defaults(func=_cmd_reset)

    return parser


async def _cmd_run(args: argparse.Namespace) -> int:
    """Run a named operation."""
    from writingtools.api.facade import resolve_operation
    from writingtools.pipeline.operations import load_custom_commands

    settings = _load_settings(args)
    commands = load_custom_commands(settings.custom_commands_path)

    try:
        operation = resolve_operation(args.operation, commands=commands)
    except KeyError as exc:
        logger.error("%s", exc.args[0])
        return EXIT_ERROR
    return await _execute(args, settings, operation)


async def _cmd_command(args: argparse.Namespace) -> int:
    """Run a custom command; built-in option names are not accepted here."""
    from writingtools.pipeline.operations import load_custom_commands

    settings = _load_settings(args)
    commands = {c.name: c for c in load_custom_commands(settings.custom_commands_path)}
    if args.name not in commands:
        logger.error(
            "Unknown custom command %r (defined: %s)",
            args.name, ", ".join(sorted(commands)) or "none",
        )
        return EXIT_ERROR
    return await _execute(args, settings, commands[args.name])


async def _cmd_ask(args: argparse.Namespace) -> int:
    """Run a free-form instruction."""
    from writingtools.api.facade import resolve_operation

    settings = _load_settings(args)
    operation = resolve_operation(None, instruction=args.instruction)
    if _no_input(args):
        from writingtools.core.models import CapturedContent

        return await _execute(
            args, settings, operation,
            content=CapturedContent(text="", source_kind="text"),
        )
    return await _execute(args, settings, operation)


async def _execute(
    args: argparse.Namespace,
    settings: Settings,
    operation: Operation,
    content: CapturedContent | None = None,
) -> int:
    """Capture (unless content is given), dispatch and map the state to an exit code."""
    from writingtools.api.facade import build_coordinator
    from writingtools.pipeline.delivery import ConsoleSurface
    from writingtools.pipeline.session import SessionState

    coordinator = build_coordinator(settings, ConsoleSurface())

    source = None
    if content is None:
        source, content = _resolve_input(args, settings)
    if source is None and content is None:
        logger.info("Nothing to process")
        return EXIT_NOTHING_CAPTURED

    session = await coordinator.submit(operation, source=source, content=content)
    if session.state is SessionState.SUCCEEDED:
        return EXIT_OK
    if session.state is SessionState.FAILED:
        return EXIT_ERROR
    return EXIT_NOTHING_CAPTURED


def _no_input(args: argparse.Namespace) -> bool:
    return (
        args.text is None and args.file is None and args.url is None
        and not args.shared and sys.stdin.isatty()
    )


def _resolve_input(
    args: argparse.Namespace, settings: Settings,
) -> tuple[ContentSource | None, CapturedContent | None]:
    """Return (source, content); at most one is set."""
    from writingtools.capture.source import MemoryContentSource
    from writingtools.core.models import CapturedContent
    from writingtools.storage.shared_slot import SharedSlot

    if args.shared:
        text = SharedSlot(settings.shared_slot_path).take()
        if not text:
            return None, None
        return None, CapturedContent(text=text, source_kind="url")
    if args.file is not None:
        if not args.file.exists():
            raise FileNotFoundError(f"File not found: {args.file}")
        return MemoryContentSource.from_path(args.file), None
    if args.url is not None:
        return MemoryContentSource.from_text(args.url), None
    if args.text is not None:
        return MemoryContentSource.from_text(args.text), None
    if not sys.stdin.isatty():
        return MemoryContentSource.from_text(sys.stdin.read()), None
    return None, None


async def _cmd_share_url(args: argparse.Namespace) -> int:
    """Fetch a URL into the shared slot."""
    from writingtools.storage.shared_slot import SharedSlot, share_url

    settings = _load_settings(args)
    slot = SharedSlot(settings.shared_slot_path)
    text = await share_url(args.url, slot, timeout_s=settings.http_timeout_s)
    print(f"Stored {len(text)} characters in {slot.path}")
    return EXIT_OK


async def _cmd_take_shared(args: argparse.Namespace) -> int:
    """Print and clear the shared slot."""
    from writingtools.storage.shared_slot import SharedSlot

    settings = _load_settings(args)
    text = SharedSlot(settings.shared_slot_path).take()
    if text is None:
        return EXIT_NOTHING_CAPTURED
    print(text)
    return EXIT_OK


async def _cmd_models(args: argparse.Namespace) -> int:
    """List providers, Gemini models and operations."""
    from writingtools.llm.client_factory import available_providers
    from writingtools.llm.models import GeminiModel
    from writingtools.pipeline.operations import WritingOption, load_custom_commands

    settings = _load_settings(args)
    print("Providers:")
    for name in available_providers():
        marker = "*" if name == settings.current_provider else " "
        print(f"  {marker} {name}")
    print("\nGemini models:")
    for model in GeminiModel:
        print(f"    {model.value:28s} {model.display_name}")
    print("\nOperations:")
    for option in WritingOption:
        print(f"    {option.value:14s} {option.display_name} ({option.presentation})")
    for command in load_custom_commands(settings.custom_commands_path):
        print(f"    {command.name:14s} custom ({command.presentation})")
    return EXIT_OK


async def _cmd_reset(args: argparse.Namespace) -> int:
    """Clear the shared slot."""
    from writingtools.storage.shared_slot import SharedSlot

    settings = _load_settings(args)
    SharedSlot(settings.shared_slot_path).clear()
    print("Shared slot cleared")
    return EXIT_OK


def _load_settings(args: argparse.Namespace) -> Settings:
    """Load settings and reconfigure logging from them.

    LOG_LEVEL, LOG_FORMAT and LOG_FILE take effect here; -v still forces DEBUG.
    """
    from writingtools.config.settings import load_settings
    from writingtools.logging.logger import configure_from_settings

    overrides: dict[str, str] = {}
    if getattr(args, "provider", None):
        overrides["current_provider"] = args.provider
    settings = load_settings(**overrides)
    configure_from_settings(settings, verbose=args.verbose)
    return settings


def _setup_logging(verbose: bool) -> None:
    """Configure logging for CLI usage."""
    from writingtools.logging.logger import setup_logging

    setup_logging(level="DEBUG" if verbose else "INFO", log_format="text")


if __name__ == "__main__":
    sys.exit(main())
