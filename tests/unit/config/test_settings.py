"""
Module: test_settings.py
Description: Unit tests for consumer settings loading and validation.
"""

import pytest
from pydantic import ValidationError

from queue_consumer.config.settings import Settings, get_settings

QUEUE_URL = "https://sqs.us-east-1.amazonaws.com/123456789012/directory"


class TestSettings:
    """Test cases for Settings."""

    def test_defaults(self, monkeypatch):
        for name in ("AWS_REGION", "AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "BATCH_SIZE"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(queue_url=QUEUE_URL, _env_file=None)

        assert settings.batch_size == 10
        assert settings.visibility_timeout_seconds == 30
        assert settings.wait_time_seconds == 20
        assert settings.message_attribute_names == ["All"]
        assert settings.aws_region == "us-east-1"
        assert settings.aws_access_key_id is None
        assert settings.fetch_retry_attempts == 3

    def test_loads_from_environment(self, monkeypatch):
        """Test settings are read from environment variables."""
        monkeypatch.setenv("QUEUE_URL", QUEUE_URL)
        monkeypatch.setenv("AWS_REGION", "eu-central-1")
        monkeypatch.setenv("BATCH_SIZE", "5")
        monkeypatch.setenv("VISIBILITY_TIMEOUT_SECONDS", "120")
        monkeypatch.setenv("MESSAGE_ATTRIBUTE_NAMES", '["TraceId"]')
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = get_settings()

        assert settings.queue_url == QUEUE_URL
        assert settings.aws_region == "eu-central-1"
        assert settings.batch_size == 5
        assert settings.visibility_timeout_seconds == 120
        assert settings.message_attribute_names == ["TraceId"]
        assert settings.log_level == "DEBUG"

    def test_queue_url_required(self, monkeypatch):
        monkeypatch.delenv("QUEUE_URL", raising=False)

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_queue_url_must_be_http(self):
        with pytest.raises(ValidationError, match="HTTP/HTTPS"):
            Settings(queue_url="sqs://directory", _env_file=None)

    @pytest.mark.parametrize("field, value", [
        ("batch_size", 0),
        ("batch_size", 11),
        ("wait_time_seconds", 21),
        ("visibility_timeout_seconds", -1),
        ("visibility_timeout_seconds", 43201),
        ("fetch_retry_attempts", 0),
    ])
    def test_out_of_range_values(self, field, value):
        with pytest.raises(ValidationError):
            Settings(queue_url=QUEUE_URL, _env_file=None, **{field: value})

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError, match="log_level must be one of"):
            Settings(queue_url=QUEUE_URL, log_level="VERBOSE", _env_file=None)
