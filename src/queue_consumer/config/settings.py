"""
Module: settings.py
Description: Consumer configuration using pydantic-settings.

Configures the queue endpoint, credentials and polling options from
environment variables with validation and defaults. Supports .env files
for local development.
"""

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# SQS service limits
MAX_RECEIVE_BATCH_SIZE = 10
MAX_WAIT_TIME_SECONDS = 20
MAX_VISIBILITY_TIMEOUT_SECONDS = 43200


class Settings(BaseSettings):
    """Consumer settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    log_level: str = Field(default="INFO", description="Logging level")

    # AWS settings
    queue_url: str = Field(
        ...,
        description="URL of the SQS queue to consume"
    )
    aws_region: str = Field(default="us-east-1", description="AWS region")
    aws_access_key_id: Optional[str] = Field(
        default=None,
        description="Static access key; the default credential chain is used when unset"
    )
    aws_secret_access_key: Optional[str] = Field(
        default=None,
        description="Static secret key paired with aws_access_key_id"
    )
    endpoint_url: Optional[str] = Field(
        default=None,
        description="Override endpoint for local or test SQS services"
    )

    # Polling settings
    batch_size: int = Field(
        default=10,
        ge=1,
        le=MAX_RECEIVE_BATCH_SIZE,
        description="Maximum messages returned per fetch"
    )
    visibility_timeout_seconds: int = Field(
        default=30,
        ge=0,
        le=MAX_VISIBILITY_TIMEOUT_SECONDS,
        description="Seconds a fetched message stays hidden from other consumers"
    )
    wait_time_seconds: int = Field(
        default=20,
        ge=0,
        le=MAX_WAIT_TIME_SECONDS,
        description="Long-poll duration for each fetch"
    )
    message_attribute_names: List[str] = Field(
        default_factory=lambda: ["All"],
        description="Message attributes requested with each fetch"
    )

    # Worker settings
    fetch_retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts per cycle before a failing fetch is given up"
    )

    @field_validator('queue_url')
    @classmethod
    def validate_queue_url(cls, v: str) -> str:
        """Validate the queue URL is an HTTP(S) URL."""
        if not v or not isinstance(v, str):
            raise ValueError("queue_url must be a non-empty string")
        if not v.startswith(('http://', 'https://')):
            raise ValueError("queue_url must be a valid HTTP/HTTPS URL")
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid logging level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(valid_levels)}")
        return v.upper()


def get_settings() -> Settings:
    """Load settings from the environment; raises ValidationError if queue_url is unset."""
    return Settings()
