"""
Module: consumer.py
Description: Queue consumer with batched acknowledgment.

Fetches batches of messages under a visibility timeout and reconciles
batched delete responses into the set of receipts the caller may stop
tracking.

Key Components:
- QueueConsumer: fetch_batch() and acknowledge()
- reconcile(): Pure mapping from a delete response to per-receipt outcomes
- is_resolved(): The rule deciding which outcomes are final

Dependencies: structlog, pydantic, typing
Author: Queue Consumer Team
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence, Set

from pydantic import BaseModel, Field

from queue_consumer.config.settings import (
    MAX_RECEIVE_BATCH_SIZE,
    MAX_VISIBILITY_TIMEOUT_SECONDS,
    MAX_WAIT_TIME_SECONDS,
    Settings,
    get_settings,
)
from queue_consumer.models.message import (
    DeleteBatchResult,
    DeleteFailure,
    DeleteOutcome,
    Message,
)
from queue_consumer.sqs_queue.sqs import SQSTransport
from queue_consumer.sqs_queue.transport import QueueTransport
from queue_consumer.utils.logger import get_logger


def is_resolved(outcome: DeleteOutcome) -> bool:
    """
    Decide whether a receipt with this outcome can be forgotten.

    A sender-fault failure means the receipt is stale or malformed and no
    retry with it can succeed, so it is final just like a success.
    """
    return outcome in (DeleteOutcome.SUCCEEDED, DeleteOutcome.FAILED_PERMANENT)


class Reconciliation(BaseModel):
    """
    Per-receipt outcomes of one acknowledge() call.

    Attributes:
        outcomes: Outcome for every submitted receipt
        failures: Failure details keyed by receipt, for failed receipts
    """

    outcomes: Dict[str, DeleteOutcome] = Field(default_factory=dict)
    failures: Dict[str, DeleteFailure] = Field(default_factory=dict)

    @property
    def resolved(self) -> Set[str]:
        return {receipt for receipt, outcome in self.outcomes.items() if is_resolved(outcome)}

    @property
    def pending(self) -> Set[str]:
        return {receipt for receipt, outcome in self.outcomes.items() if not is_resolved(outcome)}

    @property
    def retryable(self) -> List[DeleteFailure]:
        return [f for f in self.failures.values() if f.outcome is DeleteOutcome.FAILED_RETRYABLE]

    @property
    def permanent(self) -> List[DeleteFailure]:
        return [f for f in self.failures.values() if f.outcome is DeleteOutcome.FAILED_PERMANENT]


def reconcile(receipts: Set[str], result: DeleteBatchResult) -> Reconciliation:
    """
    Classify every submitted receipt from a batched delete response.

    Receipts the response does not mention are treated as retryable so
    they stay pending. Entries for receipts that were never submitted are
    ignored.

    Args:
        receipts: Receipts sent in the delete request
        result: Transport response for that request

    Returns:
        Reconciliation covering exactly the submitted receipts
    """
    reconciliation = Reconciliation()

    for receipt in result.succeeded:
        if receipt in receipts:
            reconciliation.outcomes[receipt] = DeleteOutcome.SUCCEEDED

    for failure in result.failed:
        if failure.receipt_handle in receipts and failure.receipt_handle not in reconciliation.outcomes:
            reconciliation.outcomes[failure.receipt_handle] = failure.outcome
            reconciliation.failures[failure.receipt_handle] = failure

    for receipt in receipts - reconciliation.outcomes.keys():
        reconciliation.outcomes[receipt] = DeleteOutcome.FAILED_RETRYABLE

    return reconciliation


class QueueConsumer:
    """
    Consumer for a single queue.

    Holds only immutable configuration and a transport, so one instance
    can be shared by callers that each track their own in-flight receipts.

    Example:
        >>> consumer = QueueConsumer.from_settings()
        >>> messages = consumer.fetch_batch()
        >>> done = {m.receipt_handle for m in messages if handle(m)}
        >>> cleared = consumer.acknowledge(done)
    """

    def __init__(
        self,
        transport: QueueTransport,
        queue_url: str,
        batch_size: int = 10,
        visibility_timeout_seconds: int = 30,
        wait_time_seconds: int = 20,
        message_attribute_names: Optional[Sequence[str]] = None,
        logger: Optional[Any] = None
    ):
        """
        Initialize queue consumer.

        Args:
            transport: Receive/delete implementation
            queue_url: Queue the consumer reads from
            batch_size: Maximum messages per fetch (1-10)
            visibility_timeout_seconds: Seconds fetched messages stay hidden
            wait_time_seconds: Long-poll duration per fetch (0-20)
            message_attribute_names: Message attributes to fetch, default all
            logger: structlog-style logger receiving delete failure records

        Raises:
            ValueError: If queue_url is empty or a tuning value is out of range
        """
        if not queue_url or not isinstance(queue_url, str):
            raise ValueError("queue_url must be a non-empty string")
        if not 1 <= batch_size <= MAX_RECEIVE_BATCH_SIZE:
            raise ValueError(f"batch_size must be between 1 and {MAX_RECEIVE_BATCH_SIZE}")
        if not 0 <= visibility_timeout_seconds <= MAX_VISIBILITY_TIMEOUT_SECONDS:
            raise ValueError(
                f"visibility_timeout_seconds must be between 0 and {MAX_VISIBILITY_TIMEOUT_SECONDS}"
            )
        if not 0 <= wait_time_seconds <= MAX_WAIT_TIME_SECONDS:
            raise ValueError(f"wait_time_seconds must be between 0 and {MAX_WAIT_TIME_SECONDS}")

        self.transport = transport
        self.queue_url = queue_url
        self.batch_size = batch_size
        self.visibility_timeout_seconds = visibility_timeout_seconds
        self.wait_time_seconds = wait_time_seconds
        self.message_attribute_names = tuple(message_attribute_names or ("All",))
        self.logger = logger if logger is not None else get_logger(__name__)

        self.logger.info(
            "Queue consumer initialized",
            queue_url=queue_url,
            batch_size=batch_size,
            visibility_timeout_seconds=visibility_timeout_seconds,
            wait_time_seconds=wait_time_seconds
        )

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        transport: Optional[QueueTransport] = None,
        logger: Optional[Any] = None
    ) -> "QueueConsumer":
        """
        Build a consumer from settings, backed by SQS unless a transport is given.

        Args:
            settings: Consumer settings; loaded from the environment when omitted
            transport: Transport override
            logger: Logger override

        Returns:
            Configured QueueConsumer
        """
        settings = settings or get_settings()
        if transport is None:
            transport = SQSTransport.from_settings(settings)

        return cls(
            transport=transport,
            queue_url=settings.queue_url,
            batch_size=settings.batch_size,
            visibility_timeout_seconds=settings.visibility_timeout_seconds,
            wait_time_seconds=settings.wait_time_seconds,
            message_attribute_names=settings.message_attribute_names,
            logger=logger
        )

    def fetch_batch(self) -> List[Message]:
        """
        Fetch up to batch_size messages, waiting up to wait_time_seconds.

        Returned messages are hidden from other consumers for
        visibility_timeout_seconds unless acknowledged first.

        Returns:
            Fetched messages; empty when no work arrived within the wait window

        Raises:
            TransportError: If the receive call fails
        """
        messages = self.transport.receive(
            self.queue_url,
            self.batch_size,
            self.visibility_timeout_seconds,
            self.wait_time_seconds,
            self.message_attribute_names
        )

        self.logger.debug(
            "Fetched message batch",
            queue_url=self.queue_url,
            count=len(messages)
        )

        return messages

    def acknowledge(self, receipts: Iterable[str]) -> Set[str]:
        """
        Delete processed messages and report which receipts are settled.

        A receipt is settled when its delete succeeded or was rejected as
        the sender's fault (stale or malformed receipt). Receipts that hit
        a server-side failure are left out of the result and should be
        submitted again in a later call.

        Args:
            receipts: Receipt handles of messages the caller is done with

        Returns:
            Subset of receipts that can be dropped from the caller's
            pending set

        Raises:
            TransportError: If the delete call fails as a whole; no
            receipt is settled in that case
        """
        receipt_set = set(receipts)
        if not receipt_set:
            return set()

        result = self.transport.delete_batch(self.queue_url, sorted(receipt_set))
        reconciliation = reconcile(receipt_set, result)
        self._log_reconciliation(reconciliation, result)

        return reconciliation.resolved

    def _log_reconciliation(self, reconciliation: Reconciliation, result: DeleteBatchResult) -> None:
        for failure in reconciliation.retryable:
            self.logger.error(
                "Error response deleting from queue",
                queue_url=self.queue_url,
                receipt_handle=failure.receipt_handle,
                error_code=failure.code,
                error_message=failure.error_message
            )

        for failure in reconciliation.permanent:
            self.logger.warning(
                "Receipt rejected by queue, treating as settled",
                queue_url=self.queue_url,
                receipt_handle=failure.receipt_handle,
                error_code=failure.code,
                error_message=failure.error_message,
                diagnostic="receipt_rejected"
            )

        reported = set(result.succeeded) | {f.receipt_handle for f in result.failed}
        missing = reconciliation.outcomes.keys() - reported
        if missing:
            self.logger.warning(
                "Delete response omitted receipts, keeping them pending",
                queue_url=self.queue_url,
                receipt_handles=sorted(missing)
            )

        unknown = reported - reconciliation.outcomes.keys()
        if unknown:
            self.logger.warning(
                "Delete response referenced receipts that were not submitted",
                queue_url=self.queue_url,
                receipt_handles=sorted(unknown)
            )

        self.logger.info(
            "Acknowledged message batch",
            queue_url=self.queue_url,
            submitted=len(reconciliation.outcomes),
            resolved=len(reconciliation.resolved),
            pending=len(reconciliation.pending)
        )
