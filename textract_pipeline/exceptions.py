"""
Custom Exceptions for the Extraction Pipeline

All exceptions follow the pattern of specific, actionable errors
with context needed for debugging and logging.
"""

from dataclasses import dataclass
from typing import Any

from botocore.exceptions import ClientError


def describe_aws_error(error: Exception) -> tuple[str | None, str]:
    """Error code and message of a botocore exception."""
    if isinstance(error, ClientError):
        details = error.response.get("Error", {})
        return details.get("Code"), details.get("Message") or str(error)
    return type(error).__name__, str(error)


class PipelineError(Exception):
    """Base exception for the extraction pipeline."""

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(message)

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


@dataclass
class ConfigurationError(PipelineError):
    """Required environment configuration is missing or invalid."""

    missing: list[str]
    invalid: list[str]

    def __init__(
        self,
        missing: list[str] | None = None,
        invalid: list[str] | None = None,
    ) -> None:
        self.missing = missing or []
        self.invalid = invalid or []
        super().__init__(
            "Invalid pipeline configuration",
            missing=self.missing,
            invalid=self.invalid,
        )


@dataclass
class MalformedMessageError(PipelineError):
    """Queue message body could not be decoded."""

    message_id: str
    reason: str

    def __init__(self, message_id: str, reason: str) -> None:
        self.message_id = message_id
        self.reason = reason
        super().__init__(
            f"Malformed message '{message_id}': {reason}",
            message_id=message_id,
        )


@dataclass
class TextractError(PipelineError):
    """Textract start or get-results call failed."""

    operation: str  # "start_document_analysis", "get_document_text_detection", ...
    target: str  # job id or s3 uri
    error_code: str | None = None
    error_message: str | None = None

    def __init__(
        self,
        operation: str,
        target: str,
        error_code: str | None = None,
        error_message: str | None = None,
    ) -> None:
        self.operation = operation
        self.target = target
        self.error_code = error_code
        self.error_message = error_message
        super().__init__(
            f"Textract {operation} failed for '{target}': {error_message or 'Unknown error'}",
            operation=operation,
            target=target,
            error_code=error_code,
        )


@dataclass
class S3Error(PipelineError):
    """S3 operation failed."""

    operation: str  # "put"
    bucket: str
    key: str | None = None

    def __init__(
        self,
        operation: str,
        bucket: str,
        key: str | None = None,
        error_message: str | None = None,
    ) -> None:
        self.operation = operation
        self.bucket = bucket
        self.key = key
        super().__init__(
            f"S3 {operation} failed for s3://{bucket}/{key or '*'}: "
            f"{error_message or 'Unknown error'}",
            operation=operation,
            bucket=bucket,
            key=key,
        )


@dataclass
class SQSError(PipelineError):
    """SQS operation failed."""

    operation: str  # "delete"
    queue_url: str

    def __init__(
        self,
        operation: str,
        queue_url: str,
        error_message: str | None = None,
    ) -> None:
        self.operation = operation
        self.queue_url = queue_url
        super().__init__(
            f"SQS {operation} failed on '{queue_url}': {error_message or 'Unknown error'}",
            operation=operation,
            queue_url=queue_url,
        )


@dataclass
class MissingBlockError(PipelineError):
    """A relationship references a block id absent from the job's result set."""

    block_id: str

    def __init__(self, block_id: str) -> None:
        self.block_id = block_id
        super().__init__(
            f"Block '{block_id}' not found in result set",
            block_id=block_id,
        )


@dataclass
class BatchFailedError(PipelineError):
    """
    One or more messages in a batch were left on the queue.

    Raised after the rest of the batch was processed and acknowledged, so
    the invocation fails and only the unacknowledged messages come back.
    """

    failed_message_ids: list[str]

    def __init__(self, failed_message_ids: list[str]) -> None:
        self.failed_message_ids = list(failed_message_ids)
        super().__init__(
            f"{len(self.failed_message_ids)} message(s) left for redelivery",
            failed_message_ids=self.failed_message_ids,
        )
