"""
Module: memory.py
Description: In-process queue transport.

Keeps messages in memory with visibility-timeout semantics so consumers
and workers can run without an SQS endpoint. Each delivery issues a
fresh receipt handle; only the latest one can delete the message.
Long polling is not simulated: receive() returns immediately.
"""

import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Set, Tuple

from queue_consumer.errors import TransportError
from queue_consumer.models.message import DeleteBatchResult, DeleteFailure, Message


@dataclass
class _StoredMessage:
    message_id: str
    body: str
    message_attributes: Dict[str, Any]
    sent_at: float
    visible_at: float = 0.0
    receipt_handle: Optional[str] = None
    receive_count: int = 0


@dataclass
class InMemoryTransport:
    """
    Queue transport backed by a dictionary.

    Attributes:
        clock: Time source in seconds; inject a fake to step through timeouts
        calls: (operation, arguments) for every receive/delete_batch call
    """

    clock: Callable[[], float] = time.monotonic
    calls: List[Tuple[str, Dict[str, Any]]] = field(default_factory=list)
    _messages: Dict[str, _StoredMessage] = field(default_factory=dict)
    _server_faults: Set[str] = field(default_factory=set)
    _pending_failures: Dict[str, str] = field(default_factory=dict)

    def send(self, body: str, message_attributes: Optional[Dict[str, Any]] = None) -> str:
        """Enqueue a message and return its message id."""
        message_id = str(uuid.uuid4())
        self._messages[message_id] = _StoredMessage(
            message_id=message_id,
            body=body,
            message_attributes=message_attributes or {},
            sent_at=self.clock()
        )
        return message_id

    def inject_server_fault(self, receipt_handle: str) -> None:
        """Make every delete of receipt_handle fail with a server fault."""
        self._server_faults.add(receipt_handle)

    def clear_server_fault(self, receipt_handle: str) -> None:
        self._server_faults.discard(receipt_handle)

    def fail_next_call(self, operation: str, code: str = "ServiceUnavailable") -> None:
        """Make the next call to operation ('receive' or 'delete_batch') raise TransportError."""
        if operation not in ('receive', 'delete_batch'):
            raise ValueError("operation must be 'receive' or 'delete_batch'")
        self._pending_failures[operation] = code

    def __len__(self) -> int:
        return len(self._messages)

    def receive(
        self,
        queue_url: str,
        max_messages: int,
        visibility_timeout: int,
        wait_time: int,
        attribute_names: Sequence[str]
    ) -> List[Message]:
        self.calls.append(('receive', {
            'queue_url': queue_url,
            'max_messages': max_messages,
            'visibility_timeout': visibility_timeout,
            'wait_time': wait_time,
            'attribute_names': list(attribute_names)
        }))
        self._raise_if_failing('receive')

        now = self.clock()
        received = []
        for stored in self._messages.values():
            if len(received) >= max_messages:
                break
            if stored.visible_at > now:
                continue

            stored.receipt_handle = uuid.uuid4().hex
            stored.visible_at = now + visibility_timeout
            stored.receive_count += 1
            received.append(
                Message(
                    body=stored.body,
                    receipt_handle=stored.receipt_handle,
                    message_id=stored.message_id,
                    attributes={'ApproximateReceiveCount': str(stored.receive_count)},
                    message_attributes=_select_attributes(
                        stored.message_attributes, attribute_names
                    )
                )
            )

        return received

    def delete_batch(self, queue_url: str, receipts: Sequence[str]) -> DeleteBatchResult:
        self.calls.append(('delete_batch', {
            'queue_url': queue_url,
            'receipts': list(receipts)
        }))
        self._raise_if_failing('delete_batch')

        by_receipt = {
            stored.receipt_handle: message_id
            for message_id, stored in self._messages.items()
            if stored.receipt_handle is not None
        }
        result = DeleteBatchResult()

        for receipt in receipts:
            if receipt in self._server_faults:
                result.failed.append(DeleteFailure(
                    receipt_handle=receipt,
                    code="InternalError",
                    error_message="internal error",
                    sender_fault=False
                ))
            elif receipt in by_receipt:
                del self._messages[by_receipt.pop(receipt)]
                result.succeeded.append(receipt)
            else:
                result.failed.append(DeleteFailure(
                    receipt_handle=receipt,
                    code="ReceiptHandleIsInvalid",
                    error_message="receipt handle is invalid or has expired",
                    sender_fault=True
                ))

        return result

    def _raise_if_failing(self, operation: str) -> None:
        code = self._pending_failures.pop(operation, None)
        if code is not None:
            raise TransportError(f"{operation} failed: {code}", operation, code)


def _select_attributes(attributes: Dict[str, Any], names: Sequence[str]) -> Dict[str, Any]:
    """Filter attributes the way SQS does: exact names, All or .*, and Prefix.* wildcards."""
    if 'All' in names or '.*' in names:
        return dict(attributes)

    # 'Trace.*' selects attributes whose names start with 'Trace.'
    prefixes = tuple(name[:-1] for name in names if name.endswith('.*'))
    return {
        name: value for name, value in attributes.items()
        if name in names or name.startswith(prefixes)
    }
