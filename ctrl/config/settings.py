"""Configuration management using Pydantic Settings.

Features:
- Environment variable loading
- Type validation
- Default values
- Computed properties
"""

from pathlib import Path
from typing import Any

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ctrl.utils.constants import (
    DEFAULT_CONFIGURED_PROJECT,
    DEFAULT_GITHUB_BASE_URL,
    DEFAULT_MANIFEST_PATH,
    DEFAULT_SLASH_COMMAND,
    DEFAULT_STORE_RETRY_ATTEMPTS,
    DEFAULT_STORE_RETRY_DELAY,
    MANIFEST_CORRUPT_POLICIES,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Slack settings
    slack_bot_token: SecretStr = Field(
        ..., description="Slack Bot User OAuth Token (xoxb-...)"
    )
    slack_app_token: SecretStr = Field(
        ..., description="Slack App-Level Token for Socket Mode (xapp-...)"
    )
    slash_command: str = Field(
        DEFAULT_SLASH_COMMAND, description="Slash command the bot answers to"
    )

    # Manifest storage
    manifest_path: Path = Field(
        Path(DEFAULT_MANIFEST_PATH), description="Path to the YAML manifest file"
    )
    default_configured_project: str = Field(
        DEFAULT_CONFIGURED_PROJECT,
        description="configured_project value written into a fresh manifest",
    )
    manifest_corrupt_policy: str = Field(
        "reset",
        description=(
            "What to do with an unreadable manifest: 'reset' moves it aside and "
            "starts empty, 'fail' refuses to continue"
        ),
    )
    store_retry_attempts: int = Field(
        DEFAULT_STORE_RETRY_ATTEMPTS,
        description="Attempts for manifest reads/writes before giving up",
        ge=1,
        le=10,
    )
    store_retry_delay: float = Field(
        DEFAULT_STORE_RETRY_DELAY,
        description="Seconds to wait between manifest I/O retries",
        ge=0,
    )

    # Rendering
    github_base_url: str = Field(
        DEFAULT_GITHUB_BASE_URL, description="Base URL for repository links"
    )

    # Monitoring
    log_level: str = Field("INFO", description="Logging level")

    # Development
    debug: bool = Field(False, description="Enable debug mode")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("slash_command")
    @classmethod
    def validate_slash_command(cls, v: Any) -> str:
        """Slack slash commands always start with a slash."""
        v = str(v).strip()
        if not v.startswith("/") or len(v) < 2:
            raise ValueError("slash_command must look like '/name'")
        return v

    @field_validator("manifest_path", mode="before")
    @classmethod
    def validate_manifest_path(cls, v: Any) -> Path:
        """Ensure the manifest path is a file location, not a directory."""
        if isinstance(v, str):
            v = Path(v.strip())
        if v.exists() and v.is_dir():
            raise ValueError(f"Manifest path is a directory: {v}")
        return v  # type: ignore[no-any-return]

    @field_validator("manifest_corrupt_policy")
    @classmethod
    def validate_corrupt_policy(cls, v: Any) -> str:
        """Validate corrupt-manifest policy."""
        v = str(v).lower()
        if v not in MANIFEST_CORRUPT_POLICIES:
            raise ValueError(
                f"manifest_corrupt_policy must be one of {list(MANIFEST_CORRUPT_POLICIES)}"
            )
        return v

    @field_validator("github_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: Any) -> str:
        return str(v).rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: Any) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v.upper()  # type: ignore[no-any-return]

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return not self.debug

    @property
    def slack_bot_token_str(self) -> str:
        """Get Slack bot token as string."""
        return self.slack_bot_token.get_secret_value()

    @property
    def slack_app_token_str(self) -> str:
        """Get Slack app token as string."""
        return self.slack_app_token.get_secret_value()
