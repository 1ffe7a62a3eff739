"""
Module: message.py
Description: Data models for fetched messages and delete outcomes.

Defines the Message handed to callers by fetch_batch() and the models
describing a batched delete response, along with the per-receipt
outcome taxonomy used by reconciliation.

Key Components:
- Message: A received message and its receipt handle
- DeleteOutcome: Per-receipt result of a batched delete
- DeleteFailure: A single failed delete entry
- DeleteBatchResult: Transport response for one batched delete

Dependencies: pydantic, enum, typing
Author: Queue Consumer Team
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class DeleteOutcome(str, Enum):
    """Result of deleting a single receipt handle."""

    SUCCEEDED = "succeeded"
    # Server fault; a later acknowledge() may succeed
    FAILED_RETRYABLE = "failed_retryable"
    # Sender fault; the receipt can never be deleted
    FAILED_PERMANENT = "failed_permanent"


class Message(BaseModel):
    """
    A message checked out from the queue.

    The receipt handle proves this consumer currently holds the message
    under its visibility timeout; it is the only identifier accepted by
    acknowledge(). A redelivered message carries a new receipt handle.

    Attributes:
        body: Opaque message payload
        receipt_handle: Receipt identifier for this delivery
        message_id: Queue-assigned message identifier
        attributes: System attributes (ApproximateReceiveCount, SentTimestamp, ...)
        message_attributes: User-defined message attributes
    """

    model_config = ConfigDict(frozen=True)

    body: str = Field(..., description="Message payload")
    receipt_handle: str = Field(
        ...,
        min_length=1,
        description="Receipt identifier for this delivery"
    )
    message_id: Optional[str] = Field(
        default=None,
        description="Queue-assigned message identifier"
    )
    attributes: Dict[str, str] = Field(
        default_factory=dict,
        description="System attributes"
    )
    message_attributes: Dict[str, Any] = Field(
        default_factory=dict,
        description="User-defined message attributes"
    )


class DeleteFailure(BaseModel):
    """
    A receipt handle the queue refused to delete.

    Attributes:
        receipt_handle: Receipt identifier that failed
        code: Service error code (ReceiptHandleIsInvalid, InternalError, ...)
        error_message: Human-readable error detail
        sender_fault: True when the request itself was at fault
    """

    model_config = ConfigDict(frozen=True)

    receipt_handle: str
    code: str = ""
    error_message: str = ""
    sender_fault: bool

    @property
    def outcome(self) -> DeleteOutcome:
        """Map the fault attribution to a delete outcome."""
        if self.sender_fault:
            return DeleteOutcome.FAILED_PERMANENT
        return DeleteOutcome.FAILED_RETRYABLE


class DeleteBatchResult(BaseModel):
    """Transport response for one batched delete call."""

    succeeded: List[str] = Field(default_factory=list)
    failed: List[DeleteFailure] = Field(default_factory=list)
