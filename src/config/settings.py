# src/config/settings.py — v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for provider credentials, the active-provider
selector, transport timeout and logging. Values are read once at startup
and again on explicit save; a changed configuration produces a new
provider instance rather than mutating a live one.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Active provider selector ===
    current_provider: Literal["gemini", "openai"] = "gemini"

    # === Gemini ===
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash-exp"

    # === OpenAI-compatible ===
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    openai_organization: str | None = None
    openai_project: str | None = None
    openai_model: str = "gpt-4o"

    # === Transport ===
    http_timeout_s: float = 60.0

    # === Cross-process share slot ===
    shared_slot_path: Path = Path("~/.writingtools/shared.json")

    # === Custom commands ===
    custom_commands_path: Path = Path("~/.writingtools/commands.json")

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("openai_organization", "openai_project", mode="before")
    @classmethod
    def blank_to_none(cls, v: object) -> object:  # noqa: N805
        """Empty strings from .env mean 'not set'."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        from writingtools.llm.models import GeminiModel

        errors: list[str] = []

        known = {m.value for m in GeminiModel}
        if self.gemini_model not in known:
            errors.append(
                f"GEMINI_MODEL must be one of {', '.join(sorted(known))}"
            )

        if self.http_timeout_s <= 0:
            errors.append("HTTP_TIMEOUT_S must be > 0")

        if not self.openai_base_url.startswith(("http://", "https://")):
            errors.append("OPENAI_BASE_URL must be an http(s) URL")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def has_any_api_key(self) -> bool:
        """Whether at least one provider has a credential configured."""
        return bool(self.gemini_api_key or self.openai_api_key)


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or explicit saves).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
