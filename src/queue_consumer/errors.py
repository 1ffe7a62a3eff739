"""
Module: errors.py
Description: Exceptions raised by the queue consumer.

Only whole-call failures are exceptions. Per-receipt delete failures are
reported as DeleteOutcome values and never raise.
"""

from typing import Optional


class TransportError(Exception):
    """
    A receive or delete-batch call against the queue failed as a whole.

    Covers network errors, authentication failures and throttling. The
    consumer does not retry these; callers apply their own policy.

    Attributes:
        operation: Name of the failed operation (receive, delete_batch)
        code: Service error code when the service answered, else None
    """

    def __init__(self, message: str, operation: str, code: Optional[str] = None):
        super().__init__(message)
        self.operation = operation
        self.code = code


class PermanentMessageError(Exception):
    """
    Raised by a message handler when a message can never be processed.

    The worker acknowledges such messages so they are not redelivered.
    """
