# tests/unit/pipeline/test_operations.py — v1
"""Tests for pipeline/operations.py — prompt building and custom commands."""

from __future__ import annotations

import json

import pytest

from writingtools.core.models import CapturedContent
from writingtools.llm.models import EmptyRequestError
from writingtools.pipeline.operations import (
    FREEFORM_SYSTEM_PROMPT,
    VIDEO_NOTE,
    CustomCommand,
    FreeformInstruction,
    WritingOption,
    build_request,
    find_operation,
    load_custom_commands,
    operation_kind,
    save_custom_commands,
)


def _text(text: str) -> CapturedContent:
    return CapturedContent(text=text, source_kind="text")


class TestWritingOption:
    @pytest.mark.parametrize("option", [
        WritingOption.SUMMARY, WritingOption.KEY_POINTS, WritingOption.TABLE,
    ])
    def test_window_options(self, option):
        assert option.presentation == "window"

    @pytest.mark.parametrize("option", [
        WritingOption.PROOFREAD, WritingOption.REWRITE, WritingOption.FRIENDLY,
        WritingOption.PROFESSIONAL, WritingOption.CONCISE,
    ])
    def test_replace_options(self, option):
        assert option.presentation == "replace"

    def test_every_option_has_prompt(self):
        for option in WritingOption:
            assert option.system_prompt
            assert option.display_name


class TestBuildRequest:
    def test_option_on_text(self):
        req = build_request(WritingOption.PROOFREAD, _text("teh cat"))
        assert req.system_prompt == WritingOption.PROOFREAD.system_prompt
        assert req.user_prompt == "teh cat"

    def test_option_on_video_with_text(self):
        content = CapturedContent(text="notes", videos=(b"V",), source_kind="video")
        req = build_request(WritingOption.SUMMARY, content)
        assert req.user_prompt == "notes" + VIDEO_NOTE
        assert req.videos == (b"V",)

    def test_option_on_bare_video_uses_default_prompt(self):
        content = CapturedContent(videos=(b"V",), source_kind="video")
        req = build_request(WritingOption.SUMMARY, content)
        assert req.user_prompt == "Summarize the content of this video."

    def test_videos_suppress_images(self):
        content = CapturedContent(
            text="t", images=(b"I",), videos=(b"V",), source_kind="video",
        )
        req = build_request(WritingOption.REWRITE, content)
        assert req.images == ()
        assert req.videos == (b"V",)

    def test_image_passed_through(self):
        content = CapturedContent(images=(b"I",), source_kind="image")
        req = build_request(WritingOption.REWRITE, content)
        assert req.images == (b"I",)
        assert req.user_prompt == ""

    def test_custom_command(self):
        cmd = CustomCommand(name="pirate", prompt="Talk like a pirate.")
        req = build_request(cmd, _text("hello"))
        assert req.system_prompt == "Talk like a pirate."
        assert req.user_prompt == "hello"

    def test_instruction_with_text(self):
        req = build_request(FreeformInstruction(instruction="Translate"), _text("Hallo"))
        assert req.system_prompt == FREEFORM_SYSTEM_PROMPT
        assert req.user_prompt == "User's instruction: Translate\n\nText:\nHallo"

    def test_instruction_alone(self):
        req = build_request(FreeformInstruction(instruction="What is 2+2?"), _text(""))
        assert req.user_prompt == "What is 2+2?"

    def test_empty_everything(self):
        cmd = CustomCommand(name="x", prompt="p")
        with pytest.raises(EmptyRequestError):
            build_request(cmd, _text(""))


class TestOperationLookup:
    def test_kinds(self):
        assert operation_kind(WritingOption.TABLE) == "table"
        assert operation_kind(CustomCommand(name="n", prompt="p")) == "custom:n"
        assert operation_kind(FreeformInstruction(instruction="i")) == "instruction"

    def test_find_builtin(self):
        assert find_operation("key_points") is WritingOption.KEY_POINTS

    def test_find_custom(self):
        cmd = CustomCommand(name="emojify", prompt="Add emoji", use_response_window=True)
        found = find_operation("emojify", [cmd])
        assert found == cmd
        assert found.presentation == "window"

    def test_unknown(self):
        with pytest.raises(KeyError):
            find_operation("nope")


class TestCustomCommandStore:
    def test_round_trip(self, tmp_path):
        path = tmp_path / "cmds" / "commands.json"
        cmds = [CustomCommand(name="a", prompt="pa", icon="bolt")]
        save_custom_commands(path, cmds)
        assert load_custom_commands(path) == cmds

    def test_missing_file(self, tmp_path):
        assert load_custom_commands(tmp_path / "none.json") == []

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "commands.json"
        path.write_text(json.dumps([{"name": "no prompt"}]))
        assert load_custom_commands(path) == []
