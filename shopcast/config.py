"""Configuration loading for the shopcast notification system.

This module provides centralized configuration management:
- Load settings from environment variables and .env files
- Validate configuration using pydantic
- Provide typed access to all settings
"""

from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support via python-dotenv.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Notification configuration
    notification_backend: Literal["discord", "stdout"] = Field(
        default="discord",
        description="Notification backend type",
    )
    discord_webhook_url: str = Field(
        default="",
        description="Discord channel webhook URL",
    )
    discord_username: str = Field(
        default="",
        description="Display name overriding the Discord webhook's default",
    )
    discord_use_embeds: bool = Field(
        default=True,
        description="Send rich embeds instead of plain markdown messages",
    )
    discord_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout in seconds for each Discord delivery",
    )

    # Webhook configuration
    webhook_host: str = Field(
        default="0.0.0.0",
        description="Host to listen on for webhook server",
    )
    webhook_port: int = Field(
        default=3000,
        description="Port to listen on for webhook server",
    )
    webhook_path: str = Field(
        default="/webhook",
        description="Path that accepts shop-management event deliveries",
    )
    max_body_bytes: int = Field(
        default=1024 * 1024,
        description="Largest accepted webhook request body in bytes",
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        description="Upper bound in seconds on processing one delivery",
    )

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    # Development
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging",
    )

    @field_validator("webhook_port")
    @classmethod
    def validate_webhook_port(cls, v: int) -> int:
        """Ensure webhook port is in valid range."""
        if v <= 0 or v > 65535:
            raise ValueError("webhook_port must be between 1 and 65535")
        return v

    @field_validator("webhook_path")
    @classmethod
    def validate_webhook_path(cls, v: str) -> str:
        """Ensure webhook path is absolute."""
        if not v.startswith("/"):
            raise ValueError("webhook_path must start with '/'")
        return v

    @field_validator("max_body_bytes")
    @classmethod
    def validate_max_body_bytes(cls, v: int) -> int:
        """Ensure body size limit is positive."""
        if v <= 0:
            raise ValueError("max_body_bytes must be positive")
        return v

    @field_validator("discord_timeout_seconds", "request_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Ensure timeouts are positive."""
        if v <= 0:
            raise ValueError("timeouts must be positive")
        return v

    @model_validator(mode="after")
    def validate_discord_timeout_within_request_timeout(self) -> "Settings":
        """Ensure a Discord delivery times out before the webhook handler does."""
        if (
            self.notification_backend == "discord"
            and self.discord_timeout_seconds >= self.request_timeout_seconds
        ):
            raise ValueError(
                "discord_timeout_seconds must be less than request_timeout_seconds"
            )
        return self


def load_settings(env_file: str | None = None) -> Settings:
    """Load application settings from environment.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    if env_file:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    return Settings()


__all__ = ["Settings", "load_settings"]
