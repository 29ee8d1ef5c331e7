"""
Event Models

Pydantic models for the payloads the handlers consume:
- SQS records delivered to both Lambdas
- S3 bucket notifications carried in upload-queue message bodies
- Textract job status notifications carried in job-status-queue message bodies
"""

import json
from enum import Enum
from typing import Any
from urllib.parse import unquote_plus

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from textract_pipeline.config import ExtractionApi
from textract_pipeline.exceptions import MalformedMessageError

S3_TEST_EVENT = "s3:TestEvent"


class SQSMessage(BaseModel):
    """One record of an SQS-triggered Lambda event."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    message_id: str = Field(..., alias="messageId")
    receipt_handle: str = Field(..., alias="receiptHandle")
    body: str = Field(..., description="Raw message body")

    def decode_body(self) -> dict[str, Any]:
        """
        Decode the JSON message body.

        Raises:
            MalformedMessageError: If the body is not a JSON object
        """
        try:
            payload = json.loads(self.body)
        except json.JSONDecodeError as e:
            raise MalformedMessageError(self.message_id, f"invalid JSON: {e.msg}") from e
        if not isinstance(payload, dict):
            raise MalformedMessageError(self.message_id, "body is not a JSON object")
        return payload


def parse_sqs_records(event: dict[str, Any]) -> list[SQSMessage]:
    """
    Extract SQS records from a Lambda event.

    Args:
        event: Lambda event payload ({"Records": [...]})

    Returns:
        SQS messages in delivery order

    Raises:
        ValueError: If the event carries no Records list or a record is invalid
    """
    records = event.get("Records")
    if not isinstance(records, list):
        raise ValueError("Event has no Records list")
    return [SQSMessage.model_validate(record) for record in records]


def is_test_event(payload: dict[str, Any]) -> bool:
    """S3 sends a test event when a notification is first configured."""
    return payload.get("Event") == S3_TEST_EVENT


# --- S3 upload notifications ---


class S3ObjectRef(BaseModel):
    """Bucket and decoded key of an uploaded object."""

    model_config = ConfigDict(frozen=True)

    bucket: str
    key: str

    @property
    def uri(self) -> str:
        return f"s3://{self.bucket}/{self.key}"

    @property
    def extension(self) -> str:
        name = self.key.rsplit("/", 1)[-1]
        if "." not in name:
            return ""
        return name.rsplit(".", 1)[-1].lower()


def parse_s3_event(message: SQSMessage) -> list[S3ObjectRef]:
    """
    Parse the S3 bucket notification wrapped in an upload-queue message.

    Object keys arrive URL-encoded and are decoded here.

    Args:
        message: Upload-queue message

    Returns:
        Referenced objects in record order (empty for S3 test events)

    Raises:
        MalformedMessageError: If the body is not a bucket notification
    """
    payload = message.decode_body()

    if is_test_event(payload):
        return []

    records = payload.get("Records")
    if not isinstance(records, list):
        raise MalformedMessageError(message.message_id, "no Records in S3 notification")

    objects = []
    for record in records:
        try:
            s3 = record["s3"]
            bucket = s3["bucket"]["name"]
            key = unquote_plus(s3["object"]["key"])
        except (KeyError, TypeError) as e:
            raise MalformedMessageError(
                message.message_id, f"S3 record missing field {e}"
            ) from e
        objects.append(S3ObjectRef(bucket=bucket, key=key))

    return objects


# --- Textract job status notifications ---


class JobStatus(str, Enum):
    """Status reported by a Textract job completion notification."""

    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    ERROR = "ERROR"


class DocumentLocation(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    s3_bucket: str = Field(..., alias="S3Bucket")
    s3_object_name: str = Field(..., alias="S3ObjectName")


class JobStatusNotification(BaseModel):
    """
    Textract job status notification (the job record).

    Published by Textract to the job status topic once per job.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    job_id: str = Field(..., alias="JobId")
    status: str = Field(..., alias="Status")
    api: ExtractionApi = Field(..., alias="API")
    job_tag: str | None = Field(default=None, alias="JobTag")
    timestamp: int | None = Field(default=None, alias="Timestamp")
    document_location: DocumentLocation = Field(..., alias="DocumentLocation")

    @property
    def succeeded(self) -> bool:
        return self.status == JobStatus.SUCCEEDED.value

    @property
    def source_bucket(self) -> str:
        return self.document_location.s3_bucket

    @property
    def source_key(self) -> str:
        return self.document_location.s3_object_name


def parse_job_status(message: SQSMessage) -> JobStatusNotification | None:
    """
    Parse the Textract notification in a job-status-queue message.

    Accepts raw SNS delivery as well as the SNS envelope
    ({"Type": "Notification", "Message": "..."}).

    Returns:
        The notification, or None for a connectivity test event

    Raises:
        MalformedMessageError: If the body is not a job status notification
    """
    payload = message.decode_body()

    if payload.get("Type") == "Notification" and isinstance(payload.get("Message"), str):
        try:
            payload = json.loads(payload["Message"])
        except json.JSONDecodeError as e:
            raise MalformedMessageError(
                message.message_id, f"invalid JSON in SNS Message: {e.msg}"
            ) from e
        if not isinstance(payload, dict):
            raise MalformedMessageError(message.message_id, "SNS Message is not a JSON object")

    if is_test_event(payload):
        return None

    try:
        return JobStatusNotification.model_validate(payload)
    except ValidationError as e:
        raise MalformedMessageError(
            message.message_id, f"invalid job status notification: {e.error_count()} errors"
        ) from e
