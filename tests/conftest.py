# tests/conftest.py — v2
"""Shared test fixtures for all unit tests.

Provides a scriptable fake provider, a recording delivery surface,
isolated settings and in-memory content sources. No network I/O: HTTP is
served by httpx.MockTransport and the openai client is mocked.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from writingtools.capture.source import MemoryContentSource
from writingtools.config.settings import Settings
from writingtools.core.models import SessionOutcome
from writingtools.llm.base_client import BaseAIProvider
from writingtools.llm.errors import ProviderError
from writingtools.llm.models import GeminiConfig, GenerationRequest, OpenAIConfig
from writingtools.logging.context import clear_context


# === FAKES ===


class FakeProvider(BaseAIProvider[GeminiConfig]):
    """Provider whose _generate is scripted by the test.

    Every received request is recorded. If `gate` is set, the call waits
    on it before answering, which lets a test cancel mid-flight.
    """

    def __init__(
        self,
        reply: str = "generated",
        error: ProviderError | None = None,
        name: str = "fake",
    ) -> None:
        super().__init__(GeminiConfig(api_key="test-key"))
        self.reply = reply
        self.error = error
        self.name = name
        self.requests: list[GenerationRequest] = []
        self.seen_configs: list[GeminiConfig] = []
        self.gate: asyncio.Event | None = None
        self.started = asyncio.Event()

    @property
    def provider_name(self) -> str:
        return self.name

    async def _generate(self, config: GeminiConfig, request: GenerationRequest) -> str:
        self.requests.append(request)
        self.seen_configs.append(config)
        self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.reply


class RecordingSurface:
    """DeliverySurface that keeps every call for assertions."""

    def __init__(self) -> None:
        self.results: list[SessionOutcome] = []
        self.errors: list[tuple[str, str]] = []

    def present_result(self, outcome: SessionOutcome) -> None:
        self.results.append(outcome)

    def present_error(self, operation_kind: str, message: str) -> None:
        self.errors.append((operation_kind, message))


# === FIXTURES ===


@pytest.fixture(autouse=True)
def _reset_log_context():
    yield
    clear_context()


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def make_provider() -> type[FakeProvider]:
    """The FakeProvider class, for tests that need several instances."""
    return FakeProvider


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Settings isolated from the environment and any .env file."""
    for var in (
        "GEMINI_API_KEY", "OPENAI_API_KEY", "CURRENT_PROVIDER",
        "OPENAI_BASE_URL", "GEMINI_MODEL",
    ):
        monkeypatch.delenv(var, raising=False)
    return Settings(
        _env_file=None,
        gemini_api_key="gem-key",
        openai_api_key="oa-key",
        shared_slot_path=tmp_path / "shared.json",
        custom_commands_path=tmp_path / "commands.json",
    )


@pytest.fixture
def gemini_config() -> GeminiConfig:
    return GeminiConfig(api_key="gem-key")


@pytest.fixture
def openai_config() -> OpenAIConfig:
    return OpenAIConfig(api_key="oa-key", base_url="https://api.example.com/v1")


@pytest.fixture
def text_source() -> MemoryContentSource:
    return MemoryContentSource.from_text("The quick brown fox.")


@pytest.fixture
def sample_pdf_bytes() -> bytes:
    """Minimal single-page PDF built with PyMuPDF."""
    import fitz

    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), "Hello PDF")
    data = doc.tobytes()
    doc.close()
    return data
