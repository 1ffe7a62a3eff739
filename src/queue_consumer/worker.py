"""
Module: worker.py
Description: Poll/process/acknowledge loop over a QueueConsumer.

Fetches a batch, hands each message to a handler, and acknowledges the
messages the handler is done with. Receipts whose delete hit a server
fault are carried into the next cycle's acknowledge call.

Key Components:
- QueueWorker: Runs cycles until stopped
- CycleReport: Counters for a single cycle

Dependencies: tenacity, structlog
Author: Queue Consumer Team
"""

import logging
import signal
from typing import Any, Callable, Optional, Set

from pydantic import BaseModel, Field
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from queue_consumer.config.settings import Settings, get_settings
from queue_consumer.consumer import QueueConsumer
from queue_consumer.errors import PermanentMessageError, TransportError
from queue_consumer.models.message import Message
from queue_consumer.sqs_queue.transport import QueueTransport
from queue_consumer.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)

MessageHandler = Callable[[Message], Any]


class CycleReport(BaseModel):
    """
    Counters for one worker cycle.

    Attributes:
        received: Messages returned by the fetch
        processed: Messages the handler completed
        unprocessable: Messages the handler rejected permanently
        failed: Messages left for redelivery after a handler error
        resolved: Receipts settled by acknowledge()
        pending: Receipts still awaiting a successful delete
        fetch_failed: True when the fetch gave up after retries
    """

    received: int = Field(default=0, ge=0)
    processed: int = Field(default=0, ge=0)
    unprocessable: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)
    resolved: int = Field(default=0, ge=0)
    pending: int = Field(default=0, ge=0)
    fetch_failed: bool = False


class QueueWorker:
    """
    Worker driving a QueueConsumer with a message handler.

    The handler returns normally when a message is processed and raises
    PermanentMessageError when it never can be; both are acknowledged.
    Any other exception leaves the message to reappear after its
    visibility timeout.

    Example:
        >>> worker = QueueWorker.from_settings(handle_message)
        >>> worker.install_signal_handlers()
        >>> worker.run()
    """

    def __init__(
        self,
        consumer: QueueConsumer,
        handler: MessageHandler,
        fetch_retry_attempts: int = 3,
        fetch_retry_wait_seconds: float = 1.0
    ):
        """
        Initialize worker.

        Args:
            consumer: Consumer to fetch from and acknowledge to
            handler: Callable invoked with each fetched Message
            fetch_retry_attempts: Attempts per cycle for a failing fetch
            fetch_retry_wait_seconds: Base of the exponential backoff between attempts
        """
        if not callable(handler):
            raise ValueError("handler must be callable")
        if fetch_retry_attempts < 1:
            raise ValueError("fetch_retry_attempts must be at least 1")

        self.consumer = consumer
        self.handler = handler
        self.pending: Set[str] = set()
        self._stopping = False
        self._fetch_retrying = Retrying(
            stop=stop_after_attempt(fetch_retry_attempts),
            wait=wait_exponential(
                multiplier=fetch_retry_wait_seconds,
                min=fetch_retry_wait_seconds,
                max=30 * fetch_retry_wait_seconds
            ),
            retry=retry_if_exception_type(TransportError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True
        )

    @classmethod
    def from_settings(
        cls,
        handler: MessageHandler,
        settings: Optional[Settings] = None,
        transport: Optional[QueueTransport] = None
    ) -> "QueueWorker":
        """Build a worker and its consumer from settings, applying the log level."""
        settings = settings or get_settings()
        configure_logging(settings.log_level)

        consumer = QueueConsumer.from_settings(settings, transport=transport)
        return cls(
            consumer,
            handler,
            fetch_retry_attempts=settings.fetch_retry_attempts
        )

    def install_signal_handlers(self) -> None:
        """Stop after the current cycle on SIGTERM or SIGINT."""
        signal.signal(signal.SIGTERM, self._handle_signal)
        signal.signal(signal.SIGINT, self._handle_signal)

    def _handle_signal(self, signum: int, frame: Any) -> None:
        logger.info("Received signal, stopping after current cycle", signal=signum)
        self.stop()

    def stop(self) -> None:
        self._stopping = True

    def run(self, max_cycles: Optional[int] = None) -> int:
        """
        Run cycles until stop() is called or max_cycles is reached.

        Returns:
            Number of cycles completed
        """
        cycles = 0
        logger.info("Queue worker started", queue_url=self.consumer.queue_url)

        while not self._stopping and (max_cycles is None or cycles < max_cycles):
            self.run_once()
            cycles += 1

        logger.info("Queue worker stopped", cycles=cycles, pending=len(self.pending))
        return cycles

    def run_once(self) -> CycleReport:
        """
        Run one fetch/process/acknowledge cycle.

        Returns:
            Counters describing the cycle
        """
        report = CycleReport()

        try:
            messages = self._fetch_retrying(self.consumer.fetch_batch)
        except TransportError as e:
            logger.error(
                "Fetch failed after retries",
                queue_url=self.consumer.queue_url,
                operation=e.operation,
                error_code=e.code,
                error=str(e)
            )
            messages = []
            report.fetch_failed = True

        report.received = len(messages)

        for message in messages:
            if self._process(message, report):
                self.pending.add(message.receipt_handle)

        try:
            resolved = self.consumer.acknowledge(self.pending)
        except TransportError as e:
            # Whole-call failure: every receipt stays pending for the next cycle
            logger.error(
                "Acknowledge failed",
                queue_url=self.consumer.queue_url,
                pending=len(self.pending),
                error_code=e.code,
                error=str(e)
            )
            resolved = set()

        self.pending -= resolved
        report.resolved = len(resolved)
        report.pending = len(self.pending)

        return report

    def _process(self, message: Message, report: CycleReport) -> bool:
        """Run the handler; return True when the message should be acknowledged."""
        try:
            self.handler(message)
            report.processed += 1
            return True

        except PermanentMessageError as e:
            logger.warning(
                "Message cannot be processed, acknowledging",
                message_id=message.message_id,
                error=str(e)
            )
            report.unprocessable += 1
            return True

        except Exception as e:
            logger.error(
                "Error processing message, leaving for redelivery",
                message_id=message.message_id,
                error=str(e),
                error_type=type(e).__name__
            )
            report.failed += 1
            return False
