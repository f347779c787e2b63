# src/pipeline/operations.py — v1
"""Operations and their prompts.

An operation decides the system prompt, how the user prompt is built from
the captured content, and whether the result opens in its own window or
replaces the original selection. Requests with video never carry images.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, TypeAdapter

from writingtools.core.models import CapturedContent
from writingtools.llm.models import GenerationRequest

logger = logging.getLogger(__name__)

Presentation = Literal["window", "replace"]

VIDEO_NOTE = "\n\n(This video should be considered.)"

_NO_COMMENTARY = (
    "Output ONLY the resulting text, without any additional comments or "
    "explanations. If the input is completely incompatible with the request "
    "(e.g. random characters), output \"ERROR_TEXT_INCOMPATIBLE_WITH_REQUEST\"."
)


class WritingOption(str, Enum):
    """Built-in writing operations."""

    PROOFREAD = "proofread"
    REWRITE = "rewrite"
    FRIENDLY = "friendly"
    PROFESSIONAL = "professional"
    CONCISE = "concise"
    SUMMARY = "summary"
    KEY_POINTS = "key_points"
    TABLE = "table"

    @property
    def display_name(self) -> str:
        return _OPTION_SPECS[self][0]

    @property
    def system_prompt(self) -> str:
        return _OPTION_SPECS[self][1]

    @property
    def presentation(self) -> Presentation:
        if self in (WritingOption.SUMMARY, WritingOption.KEY_POINTS, WritingOption.TABLE):
            return "window"
        return "replace"

    @property
    def default_video_prompt(self) -> str:
        return _VIDEO_PROMPTS.get(self, "This is a video, consider its content.")


_OPTION_SPECS: dict[WritingOption, tuple[str, str]] = {
    WritingOption.PROOFREAD: (
        "Proofread",
        "You are a grammar proofreading assistant. Correct grammar, spelling "
        "and punctuation while keeping the original wording and tone. "
        + _NO_COMMENTARY,
    ),
    WritingOption.REWRITE: (
        "Rewrite",
        "You are a writing assistant. Rewrite the text to improve phrasing "
        "and flow while keeping its meaning. " + _NO_COMMENTARY,
    ),
    WritingOption.FRIENDLY: (
        "Friendly",
        "You are a writing assistant. Rewrite the text to sound warmer and "
        "more friendly. " + _NO_COMMENTARY,
    ),
    WritingOption.PROFESSIONAL: (
        "Professional",
        "You are a writing assistant. Rewrite the text to sound more formal "
        "and professional. " + _NO_COMMENTARY,
    ),
    WritingOption.CONCISE: (
        "Concise",
        "You are a writing assistant. Make the text shorter and more direct "
        "without losing essential information. " + _NO_COMMENTARY,
    ),
    WritingOption.SUMMARY: (
        "Summary",
        "You are a summarization assistant. Provide a succinct summary of "
        "the content using Markdown formatting.",
    ),
    WritingOption.KEY_POINTS: (
        "Key Points",
        "You are an assistant that extracts the key points of the content "
        "as a Markdown bullet list.",
    ),
    WritingOption.TABLE: (
        "Table",
        "You are an assistant that converts the content into a Markdown "
        "table. Output only the table.",
    ),
}

_VIDEO_PROMPTS: dict[WritingOption, str] = {
    WritingOption.SUMMARY: "Summarize the content of this video.",
    WritingOption.KEY_POINTS: "Extract the key points from this video.",
    WritingOption.TABLE: "Convert the content of this video into a table.",
}

FREEFORM_SYSTEM_PROMPT = (
    "You are a writing and coding assistant. Your sole task is to respond to "
    "the user's instruction thoughtfully and comprehensively.\n"
    "If the instruction is a question, provide a detailed answer.\n"
    "Use Markdown formatting to make your response more readable."
)


class CustomCommand(BaseModel):
    """User-defined operation with its own system prompt."""

    model_config = ConfigDict(frozen=True)

    name: str
    prompt: str
    icon: str = "star"
    use_response_window: bool = False

    @property
    def presentation(self) -> Presentation:
        return "window" if self.use_response_window else "replace"


class FreeformInstruction(BaseModel):
    """Instruction typed by the user ("Describe your change...")."""

    model_config = ConfigDict(frozen=True)

    instruction: str

    @property
    def presentation(self) -> Presentation:
        return "window"


Operation = Union[WritingOption, CustomCommand, FreeformInstruction]


def operation_kind(operation: Operation) -> str:
    """Stable label for logs and delivery."""
    if isinstance(operation, WritingOption):
        return operation.value
    if isinstance(operation, CustomCommand):
        return f"custom:{operation.name}"
    return "instruction"


def build_request(operation: Operation, content: CapturedContent) -> GenerationRequest:
    """Build the outgoing request for an operation over captured content.

    Raises:
        EmptyRequestError: The operation produced no prompt and no media.
    """
    videos = list(content.videos)
    images = [] if videos else list(content.images)

    if isinstance(operation, WritingOption):
        system_prompt: str | None = operation.system_prompt
        user_prompt = _option_user_prompt(operation, content.text, bool(videos))
    elif isinstance(operation, CustomCommand):
        system_prompt = operation.prompt
        user_prompt = content.text
    else:
        system_prompt = FREEFORM_SYSTEM_PROMPT
        user_prompt = _instruction_user_prompt(operation.instruction, content.text)

    return GenerationRequest.create(
        user_prompt=user_prompt,
        system_prompt=system_prompt,
        images=images,
        videos=videos,
    )


def _option_user_prompt(option: WritingOption, text: str, has_video: bool) -> str:
    if not has_video:
        return text
    if not text:
        return option.default_video_prompt
    return text + VIDEO_NOTE


def _instruction_user_prompt(instruction: str, text: str) -> str:
    if not text:
        return instruction
    return f"User's instruction: {instruction}\n\nText:\n{text}"


_COMMANDS_ADAPTER = TypeAdapter(list[CustomCommand])


def load_custom_commands(path: Path) -> list[CustomCommand]:
    """Load custom commands from a JSON array file.

    A missing file means no custom commands. A malformed file is logged
    and ignored.
    """
    path = path.expanduser()
    if not path.exists():
        return []
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        return _COMMANDS_ADAPTER.validate_python(raw)
    except (ValueError, OSError) as exc:
        logger.warning("Ignoring unreadable custom commands file %s: %s", path, exc)
        return []


def save_custom_commands(path: Path, commands: list[CustomCommand]) -> None:
    """Persist custom commands as a JSON array."""
    path = path.expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = [c.model_dump() for c in commands]
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def find_operation(name: str, commands: list[CustomCommand] | None = None) -> Operation:
    """Resolve a built-in option value or a custom command name.

    Raises:
        KeyError: Unknown operation name.
    """
    try:
        return WritingOption(name)
    except ValueError:
        pass
    for command in commands or []:
        if command.name == name:
            return command
    raise KeyError(f"Unknown operation {name!r}")
