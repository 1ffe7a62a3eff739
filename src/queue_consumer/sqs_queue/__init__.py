"""
Package: sqs_queue
Description: Queue transports for the consumer.

Provides the QueueTransport interface with an SQS implementation and an
in-memory implementation for local runs and tests.
"""

from .memory import InMemoryTransport
from .sqs import SQSTransport
from .transport import QueueTransport

__all__ = ["InMemoryTransport", "QueueTransport", "SQSTransport"]
