"""
Textract Tools

Start asynchronous Textract jobs and fetch their paginated results.
"""

import re
from dataclasses import dataclass
from typing import Any

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from textract_pipeline.config import (
    ANALYSIS_API,
    TEXT_DETECTION_API,
    AWSSettings,
    SubmissionSettings,
)
from textract_pipeline.exceptions import TextractError, describe_aws_error
from textract_pipeline.models.events import S3ObjectRef

log = structlog.get_logger()

JOB_TAG_MAX_LENGTH = 64
_JOB_TAG_DISALLOWED = re.compile(r"[^a-zA-Z0-9_.\-:]")

GET_RESULTS_OPERATIONS = {
    TEXT_DETECTION_API: "get_document_text_detection",
    ANALYSIS_API: "get_document_analysis",
}

# Result pages are only readable once a job has finished with these statuses
READABLE_JOB_STATUSES = ("SUCCEEDED", "PARTIAL_SUCCESS")


def get_client(settings: AWSSettings):
    """Get Textract client."""
    return boto3.client("textract", **settings.textract_config)


def build_job_tag(key: str) -> str:
    """Job tag for an object key, within Textract's length and character limits."""
    return _JOB_TAG_DISALLOWED.sub("_", key)[:JOB_TAG_MAX_LENGTH]


@dataclass
class JobStartOutcome:
    """Result of starting one Textract job."""

    document: S3ObjectRef
    job_id: str | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.job_id is not None and self.error is None


def start_extraction_job(
    client: Any,
    document: S3ObjectRef,
    settings: SubmissionSettings,
) -> JobStartOutcome:
    """
    Start a text detection or analysis job for one uploaded object.

    Textract publishes the job status to the configured SNS topic when the
    job finishes.

    Args:
        client: Textract client
        document: Object to extract
        settings: Submission settings (api, feature types, notification channel)

    Returns:
        JobStartOutcome with the job id, or the error if the call failed
    """
    request: dict[str, Any] = {
        "JobTag": build_job_tag(document.key),
        "DocumentLocation": {
            "S3Object": {
                "Bucket": document.bucket,
                "Name": document.key,
            }
        },
        "NotificationChannel": {
            "SNSTopicArn": settings.sns_topic_arn,
            "RoleArn": settings.role_arn,
        },
    }

    if settings.api == ANALYSIS_API:
        request["FeatureTypes"] = settings.feature_type_list
        operation = "start_document_analysis"
    else:
        operation = "start_document_text_detection"

    try:
        response = getattr(client, operation)(**request)
    except (BotoCoreError, ClientError) as e:
        error_code, error_msg = describe_aws_error(e)
        error = TextractError(
            operation=operation,
            target=document.uri,
            error_code=error_code,
            error_message=error_msg,
        )
        log.error(
            "textract_start_failed",
            operation=operation,
            document=document.uri,
            error_code=error.error_code,
            error_message=error.error_message,
        )
        return JobStartOutcome(document=document, error=str(error))

    job_id = response["JobId"]
    log.info(
        "textract_job_started",
        job_id=job_id,
        operation=operation,
        document=document.uri,
    )
    return JobStartOutcome(document=document, job_id=job_id)


def fetch_blocks(client: Any, job_id: str, api: str) -> list[dict[str, Any]]:
    """
    Fetch every block of a finished job.

    Follows NextToken until a page comes back without one. Blocks are
    returned in page order, then in order within each page.

    Args:
        client: Textract client
        job_id: Textract job ID
        api: Start operation the job was created with

    Returns:
        Raw Textract block dicts

    Raises:
        TextractError: If any page request fails or the job is not readable
    """
    operation = GET_RESULTS_OPERATIONS[api]
    get_results = getattr(client, operation)

    all_blocks: list[dict[str, Any]] = []
    next_token = None
    pages = 0

    while True:
        params = {"JobId": job_id}
        if next_token:
            params["NextToken"] = next_token

        try:
            response = get_results(**params)
        except (BotoCoreError, ClientError) as e:
            error_code, error_msg = describe_aws_error(e)
            log.error(
                "textract_get_results_failed",
                job_id=job_id,
                operation=operation,
                page=pages + 1,
                error_code=error_code,
                error_message=error_msg,
            )
            raise TextractError(
                operation=operation,
                target=job_id,
                error_code=error_code,
                error_message=error_msg,
            ) from e

        job_status = response.get("JobStatus", "SUCCEEDED")
        if job_status not in READABLE_JOB_STATUSES:
            raise TextractError(
                operation=operation,
                target=job_id,
                error_message=f"job status is {job_status}",
            )

        blocks = response.get("Blocks", [])
        all_blocks.extend(blocks)
        pages += 1

        log.debug(
            "textract_page_fetched",
            job_id=job_id,
            page=pages,
            blocks_in_page=len(blocks),
            total_blocks=len(all_blocks),
        )

        next_token = response.get("NextToken")
        if not next_token:
            break

    log.info(
        "textract_results_fetched",
        job_id=job_id,
        pages=pages,
        total_blocks=len(all_blocks),
    )
    return all_blocks
