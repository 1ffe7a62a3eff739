"""
Package: queue_consumer
Description: Batched SQS consumer with delete reconciliation.

Fetches work from an at-least-once queue and reports which receipts are
settled after a batched delete, so callers only stop tracking messages
that can never be deleted again.
"""

from .consumer import QueueConsumer, Reconciliation, is_resolved, reconcile
from .errors import PermanentMessageError, TransportError
from .models import DeleteBatchResult, DeleteFailure, DeleteOutcome, Message
from .worker import CycleReport, QueueWorker

__all__ = [
    "CycleReport",
    "DeleteBatchResult",
    "DeleteFailure",
    "DeleteOutcome",
    "Message",
    "PermanentMessageError",
    "QueueConsumer",
    "QueueWorker",
    "Reconciliation",
    "TransportError",
    "is_resolved",
    "reconcile",
]
