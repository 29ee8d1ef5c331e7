"""
S3 Tools

Writes extraction artifacts. Writes overwrite by key, so repeating one is safe.
"""

from dataclasses import dataclass
from typing import Any

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from textract_pipeline.config import AWSSettings
from textract_pipeline.exceptions import S3Error, describe_aws_error

log = structlog.get_logger()


def get_client(settings: AWSSettings):
    """Get S3 client."""
    return boto3.client("s3", **settings.s3_config)


@dataclass
class ArtifactWriteOutcome:
    """Result of writing one artifact."""

    bucket: str
    key: str
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def uri(self) -> str:
        return f"s3://{self.bucket}/{self.key}"


def put_artifact(
    client: Any,
    bucket: str,
    key: str,
    body: str,
    content_type: str,
    *,
    metadata: dict[str, str] | None = None,
) -> ArtifactWriteOutcome:
    """
    Upload one artifact body as UTF-8.

    Args:
        client: S3 client
        bucket: Destination bucket
        key: Destination key
        body: Artifact content
        content_type: MIME type
        metadata: Optional object metadata

    Returns:
        ArtifactWriteOutcome, with the error if the upload failed
    """
    put_params: dict[str, Any] = {
        "Bucket": bucket,
        "Key": key,
        "Body": body.encode("utf-8"),
        "ContentType": content_type,
    }
    if metadata:
        put_params["Metadata"] = metadata

    try:
        client.put_object(**put_params)
    except (BotoCoreError, ClientError) as e:
        _, error_msg = describe_aws_error(e)
        error = S3Error(
            operation="put",
            bucket=bucket,
            key=key,
            error_message=error_msg,
        )
        log.error("artifact_write_failed", bucket=bucket, key=key, error=str(error))
        return ArtifactWriteOutcome(bucket=bucket, key=key, error=str(error))

    log.info(
        "artifact_written",
        bucket=bucket,
        key=key,
        content_type=content_type,
        size_bytes=len(put_params["Body"]),
    )
    return ArtifactWriteOutcome(bucket=bucket, key=key)
