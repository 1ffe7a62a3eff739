"""
Module: models
Description: Package initialization for Pydantic data models.

- Message: A message fetched from the queue
- DeleteOutcome / DeleteFailure / DeleteBatchResult: Batched delete results
"""

from .message import DeleteBatchResult, DeleteFailure, DeleteOutcome, Message

__all__ = [
    "DeleteBatchResult",
    "DeleteFailure",
    "DeleteOutcome",
    "Message",
]
