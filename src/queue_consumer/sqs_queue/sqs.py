"""
Module: sqs.py
Description: SQS transport for queue consumer operations.

Handles receiving messages from the queue and deleting them in batches,
translating boto3 responses into Message and DeleteBatchResult models
and service failures into TransportError.
"""

from typing import Any, Dict, List, Optional, Sequence

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from queue_consumer.config.settings import Settings
from queue_consumer.errors import TransportError
from queue_consumer.models.message import DeleteBatchResult, DeleteFailure, Message
from queue_consumer.utils.batch_helpers import chunk_list
from queue_consumer.utils.logger import get_logger

logger = get_logger(__name__)

# DeleteMessageBatch accepts at most 10 entries per request
MAX_DELETE_BATCH_SIZE = 10

# System attributes requested with every receive
SYSTEM_ATTRIBUTE_NAMES = ['All']


class SQSTransport:
    """
    SQS transport for receive and batched delete operations.

    Wraps a boto3 SQS client. Static credentials are optional; when they
    are not given boto3 resolves credentials through its default chain.

    Example:
        >>> transport = SQSTransport(region_name="us-east-1")
        >>> messages = transport.receive(queue_url, 10, 30, 20, ["All"])
        >>> result = transport.delete_batch(queue_url, [m.receipt_handle for m in messages])
    """

    def __init__(
        self,
        region_name: str = "us-east-1",
        aws_access_key_id: Optional[str] = None,
        aws_secret_access_key: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        client: Optional[Any] = None
    ):
        """
        Initialize SQS transport.

        Args:
            region_name: AWS region hosting the queue
            aws_access_key_id: Optional static access key
            aws_secret_access_key: Optional static secret key
            endpoint_url: Optional endpoint override (local SQS, tests)
            client: Pre-built boto3 SQS client; other arguments are ignored when given

        Raises:
            ValueError: If only one half of a static credential pair is given
        """
        if bool(aws_access_key_id) != bool(aws_secret_access_key):
            raise ValueError(
                "aws_access_key_id and aws_secret_access_key must be provided together"
            )

        if client is None:
            client_kwargs: Dict[str, Any] = {'region_name': region_name}
            if aws_access_key_id:
                client_kwargs['aws_access_key_id'] = aws_access_key_id
                client_kwargs['aws_secret_access_key'] = aws_secret_access_key
            if endpoint_url:
                client_kwargs['endpoint_url'] = endpoint_url
            client = boto3.client('sqs', **client_kwargs)

        self.client = client

        logger.info(
            "SQS transport initialized",
            region=region_name,
            endpoint_url=endpoint_url,
            static_credentials=bool(aws_access_key_id)
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "SQSTransport":
        """Build a transport from consumer settings."""
        return cls(
            region_name=settings.aws_region,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            endpoint_url=settings.endpoint_url
        )

    def receive(
        self,
        queue_url: str,
        max_messages: int,
        visibility_timeout: int,
        wait_time: int,
        attribute_names: Sequence[str]
    ) -> List[Message]:
        """
        Receive up to max_messages messages with long polling.

        Args:
            queue_url: URL of the SQS queue
            max_messages: Maximum number of messages to return (1-10)
            visibility_timeout: Seconds returned messages stay hidden
            wait_time: Long-poll duration in seconds
            attribute_names: Message attribute names to return

        Returns:
            Received messages in service order; empty when the queue had
            nothing to deliver within wait_time

        Raises:
            TransportError: If the ReceiveMessage call fails
        """
        try:
            response = self.client.receive_message(
                QueueUrl=queue_url,
                MaxNumberOfMessages=max_messages,
                VisibilityTimeout=visibility_timeout,
                WaitTimeSeconds=wait_time,
                AttributeNames=SYSTEM_ATTRIBUTE_NAMES,
                MessageAttributeNames=list(attribute_names)
            )
        except (ClientError, BotoCoreError) as e:
            raise _transport_error('receive', queue_url, e) from e

        return [
            Message(
                body=raw.get('Body', ''),
                receipt_handle=raw['ReceiptHandle'],
                message_id=raw.get('MessageId'),
                attributes=raw.get('Attributes', {}),
                message_attributes=raw.get('MessageAttributes', {})
            )
            for raw in response.get('Messages', [])
        ]

    def delete_batch(self, queue_url: str, receipts: Sequence[str]) -> DeleteBatchResult:
        """
        Delete receipts with DeleteMessageBatch.

        Receipts beyond the 10-entry service limit are sent in further
        requests and the results merged. Entry ids are positions within
        each request because receipt handles are not valid batch ids.

        Args:
            queue_url: URL of the SQS queue
            receipts: Receipt handles to delete

        Returns:
            Combined succeeded and failed entries for all requests

        Raises:
            TransportError: If any DeleteMessageBatch call fails as a whole
        """
        result = DeleteBatchResult()

        for chunk in chunk_list(list(receipts), MAX_DELETE_BATCH_SIZE):
            entries = [
                {'Id': str(index), 'ReceiptHandle': receipt}
                for index, receipt in enumerate(chunk)
            ]
            receipts_by_id = {entry['Id']: entry['ReceiptHandle'] for entry in entries}

            try:
                response = self.client.delete_message_batch(
                    QueueUrl=queue_url,
                    Entries=entries
                )
            except (ClientError, BotoCoreError) as e:
                raise _transport_error('delete_batch', queue_url, e) from e

            for entry in response.get('Successful', []):
                receipt = receipts_by_id.get(entry['Id'])
                if receipt is None:
                    logger.warning("Unknown entry id in delete response", entry_id=entry['Id'])
                    continue
                result.succeeded.append(receipt)

            for entry in response.get('Failed', []):
                receipt = receipts_by_id.get(entry['Id'])
                if receipt is None:
                    logger.warning("Unknown entry id in delete response", entry_id=entry['Id'])
                    continue
                result.failed.append(
                    DeleteFailure(
                        receipt_handle=receipt,
                        code=entry.get('Code', ''),
                        error_message=entry.get('Message', ''),
                        sender_fault=bool(entry.get('SenderFault', False))
                    )
                )

        return result


def _transport_error(operation: str, queue_url: str, error: Exception) -> TransportError:
    """Log a failed SQS call and wrap it in a TransportError."""
    if isinstance(error, ClientError):
        code = error.response['Error']['Code']
        message = error.response['Error'].get('Message', '')
        logger.error(
            "SQS request failed",
            operation=operation,
            queue_url=queue_url,
            error_code=code,
            error_message=message
        )
        return TransportError(f"{operation} failed: {code}: {message}", operation, code)

    logger.error(
        "SQS request failed",
        operation=operation,
        queue_url=queue_url,
        error=str(error),
        error_type=type(error).__name__
    )
    return TransportError(f"{operation} failed: {error}", operation)
