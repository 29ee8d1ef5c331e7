"""
SQS Tools

Explicit message acknowledgment. A message that is not deleted becomes
visible again after its visibility timeout and is redelivered.
"""

from dataclasses import dataclass
from typing import Any

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from textract_pipeline.config import AWSSettings
from textract_pipeline.exceptions import SQSError, describe_aws_error
from textract_pipeline.models.events import SQSMessage

log = structlog.get_logger()


def get_client(settings: AWSSettings):
    """Get SQS client."""
    return boto3.client("sqs", **settings.sqs_config)


@dataclass
class AckOutcome:
    """Result of deleting one message."""

    message_id: str
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


def acknowledge(client: Any, queue_url: str, message: SQSMessage) -> AckOutcome:
    """
    Delete a processed message from its queue.

    Args:
        client: SQS client
        queue_url: Queue the message was received from
        message: Message to delete

    Returns:
        AckOutcome, with the error if the delete failed
    """
    try:
        client.delete_message(QueueUrl=queue_url, ReceiptHandle=message.receipt_handle)
    except (BotoCoreError, ClientError) as e:
        _, error_msg = describe_aws_error(e)
        error = SQSError(
            operation="delete",
            queue_url=queue_url,
            error_message=error_msg,
        )
        log.error("message_ack_failed", message_id=message.message_id, error=str(error))
        return AckOutcome(message_id=message.message_id, error=str(error))

    log.debug("message_acknowledged", message_id=message.message_id)
    return AckOutcome(message_id=message.message_id)
