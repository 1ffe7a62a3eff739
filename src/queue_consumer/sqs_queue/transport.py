"""
Module: transport.py
Description: Transport interface consumed by QueueConsumer.

Any object with matching receive() and delete_batch() methods can back a
consumer: SQSTransport talks to Amazon SQS, InMemoryTransport keeps
messages in process.
"""

from typing import List, Protocol, Sequence

from queue_consumer.models.message import DeleteBatchResult, Message


class QueueTransport(Protocol):
    """Raw receive and batched delete operations against a queue."""

    def receive(
        self,
        queue_url: str,
        max_messages: int,
        visibility_timeout: int,
        wait_time: int,
        attribute_names: Sequence[str],
    ) -> List[Message]:
        """Return up to max_messages messages, or [] when none arrive within wait_time."""
        ...

    def delete_batch(self, queue_url: str, receipts: Sequence[str]) -> DeleteBatchResult:
        """Delete the given receipts; each lands in succeeded or failed."""
        ...
