"""
ExtractionResults Lambda

Triggered by Textract job status notifications delivered through SQS.
Fetches job results, reconstructs text, form data and tables, and writes
them next to the source document.

Trigger: SQS queue subscribed to the Textract job status SNS topic
Output: -<api>.txt / .json / .csv artifacts in S3
"""

from lambdas.extraction_results.artifacts import (
    Artifact,
    ArtifactKind,
    artifact_key,
    build_artifacts,
)
from lambdas.extraction_results.handler import lambda_handler, process_job_status_batch

__all__ = [
    "lambda_handler",
    "process_job_status_batch",
    "Artifact",
    "ArtifactKind",
    "artifact_key",
    "build_artifacts",
]
