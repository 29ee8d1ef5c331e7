"""
Thin boto3 wrappers for Textract, S3 and SQS.

Calls the handlers make per message return an outcome value instead of
raising, so acknowledgment decisions are explicit. fetch_blocks raises
TextractError; the result handler catches it per message.
"""

from textract_pipeline.tools.s3 import ArtifactWriteOutcome, put_artifact
from textract_pipeline.tools.sqs import AckOutcome, acknowledge
from textract_pipeline.tools.textract import (
    JobStartOutcome,
    build_job_tag,
    fetch_blocks,
    start_extraction_job,
)

__all__ = [
    "AckOutcome",
    "ArtifactWriteOutcome",
    "JobStartOutcome",
    "acknowledge",
    "build_job_tag",
    "fetch_blocks",
    "put_artifact",
    "start_extraction_job",
]
