"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Automator"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Matching
    enforce_from_status: bool = Field(
        default=False,
        description="Require from_status to equal the job's previous status",
    )

    # Actions
    team_email: str = Field(
        default="",
        description="Recipient address for send_email actions targeting the team",
    )
    schedule_color: str = Field(
        default="#3498DB",
        description="Color of schedule entries created by add_to_schedule",
    )

    # Webhook
    webhook_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Webhook request timeout in seconds",
    )

    # Email (optional)
    smtp_host: str = Field(default="", description="SMTP server host")
    smtp_port: int = Field(default=587, description="SMTP server port")
    smtp_user: str = Field(default="", description="SMTP username")
    smtp_password: str = Field(default="", description="SMTP password")
    smtp_from: str = Field(default="", description="Email sender address")
    smtp_use_tls: bool = Field(default=True, description="Use STARTTLS (port 587). Set False for SSL (port 465)")
    smtp_timeout_seconds: float = Field(default=30.0, gt=0, description="SMTP timeout in seconds")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
