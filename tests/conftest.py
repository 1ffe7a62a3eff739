"""
Module: conftest.py
Description: Shared pytest fixtures for queue consumer tests.

Provides settings that ignore the environment, an in-memory transport
driven by a controllable clock, and an SQS queue mocked with moto.
"""

from unittest.mock import MagicMock

import boto3
import pytest
from moto import mock_aws
from pydantic import Field
from pydantic_settings import SettingsConfigDict

from queue_consumer.config.settings import Settings
from queue_consumer.consumer import QueueConsumer
from queue_consumer.sqs_queue.memory import InMemoryTransport

TEST_QUEUE_URL = "https://sqs.us-east-1.amazonaws.com/123456789012/test-queue"


class TestSettings(Settings):
    """Test settings that don't require environment variables."""

    model_config = SettingsConfigDict(
        env_file=None,  # Disable .env file loading for tests
        case_sensitive=False,
        extra="ignore"
    )

    queue_url: str = Field(default=TEST_QUEUE_URL, description="Test queue URL")
    log_level: str = Field(default="DEBUG", description="Logging level")


class FakeClock:
    """Manually advanced time source for visibility timeouts."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def test_settings():
    """
    Provide test configuration settings.

    Disables environment variable and .env loading for predictable tests.
    """
    return TestSettings()


@pytest.fixture
def clock():
    """Provide a fake clock starting at t=1000s."""
    return FakeClock()


@pytest.fixture
def memory_transport(clock):
    """Provide an empty in-memory transport driven by the fake clock."""
    return InMemoryTransport(clock=clock)


@pytest.fixture
def mock_logger():
    """Provide a logger double for asserting emitted records."""
    return MagicMock()


@pytest.fixture
def consumer(memory_transport, mock_logger):
    """Provide a consumer over the in-memory transport with default polling options."""
    return QueueConsumer(
        transport=memory_transport,
        queue_url=TEST_QUEUE_URL,
        logger=mock_logger
    )


@pytest.fixture
def aws_credentials(monkeypatch):
    """Point boto3 at fake credentials so moto never reaches AWS."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def mock_sqs(aws_credentials):
    """
    Provide a moto-backed SQS client and queue URL.

    The mock stays active for the duration of the test.
    """
    with mock_aws():
        client = boto3.client('sqs', region_name='us-east-1')
        queue_url = client.create_queue(QueueName='test-queue')['QueueUrl']
        yield client, queue_url


@pytest.fixture
def queue_url():
    """Provide the queue URL used by the in-memory consumer."""
    return TEST_QUEUE_URL
