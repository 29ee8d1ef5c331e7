"""
ExtractionResults Lambda Handler

Main entry point for processing Textract job status notifications.

Trigger: SQS queue subscribed to the Textract job status SNS topic
Output: Up to three artifacts per job next to the source document
        (<name>-<api>.txt, <name>-<api>.json, <name>-<api>.csv)

Flow:
1. Validate configuration (fatal for the whole batch if invalid)
2. For each message, in delivery order:
   a. Parse the Textract job status notification
   b. Skip test events and jobs that did not succeed (message deleted)
   c. Fetch all result pages for the job
   d. Reconstruct text, form data and tables from the blocks
   e. Write the non-empty artifacts concurrently
   f. Delete the message once every write succeeded
3. Fail the invocation if any message was left on the queue

Redelivery repeats steps c-f. Reconstruction is deterministic and writes
overwrite by key, so a repeat produces the same artifacts.
"""

import asyncio
import time
from typing import Any

import structlog
from pydantic import ValidationError

from lambdas.extraction_results.artifacts import Artifact, build_artifacts
from textract_pipeline.batch import BatchResult, MessageResult, MessageStatus
from textract_pipeline.config import ResultSettings, load_settings
from textract_pipeline.exceptions import MalformedMessageError, PipelineError
from textract_pipeline.log_config import configure_logging
from textract_pipeline.models.blocks import BlockGraph
from textract_pipeline.models.events import (
    JobStatusNotification,
    SQSMessage,
    parse_job_status,
    parse_sqs_records,
)
from textract_pipeline.reconstruction import reconstruct_document
from textract_pipeline.tools import s3 as s3_tools
from textract_pipeline.tools import sqs as sqs_tools
from textract_pipeline.tools import textract as textract_tools

log = structlog.get_logger()


async def _write_artifacts(
    artifacts: list[Artifact],
    notification: JobStatusNotification,
    s3_client: Any,
) -> list[s3_tools.ArtifactWriteOutcome]:
    metadata = {"job-id": notification.job_id, "api": notification.api}
    return await asyncio.gather(
        *(
            asyncio.to_thread(
                s3_tools.put_artifact,
                s3_client,
                artifact.bucket,
                artifact.key,
                artifact.body,
                artifact.content_type,
                metadata=metadata,
            )
            for artifact in artifacts
        )
    )


async def _extract_job_results(
    notification: JobStatusNotification,
    settings: ResultSettings,
    textract_client: Any,
    s3_client: Any,
) -> str | None:
    """
    Fetch, reconstruct and persist one succeeded job.

    Returns:
        None on success, otherwise the reason the message must be redelivered

    Raises:
        TextractError: If fetching results fails
        MissingBlockError: If the block graph references an unknown block
        ValidationError: If Textract returned blocks that do not validate
    """
    raw_blocks = await asyncio.to_thread(
        textract_tools.fetch_blocks,
        textract_client,
        notification.job_id,
        notification.api,
    )
    graph = BlockGraph.from_textract(raw_blocks)
    reconstruction = reconstruct_document(graph)

    artifacts = build_artifacts(
        reconstruction,
        bucket=settings.output_bucket or notification.source_bucket,
        source_key=notification.source_key,
        api=notification.api,
    )
    if not artifacts:
        log.warning("job_produced_no_artifacts", job_id=notification.job_id)
        return None

    outcomes = await _write_artifacts(artifacts, notification, s3_client)
    failed = [outcome for outcome in outcomes if not outcome.succeeded]
    if failed:
        return "; ".join(outcome.error or outcome.uri for outcome in failed)

    log.info(
        "artifacts_written",
        job_id=notification.job_id,
        artifacts=[outcome.uri for outcome in outcomes],
    )
    return None


async def _process_message(
    message: SQSMessage,
    settings: ResultSettings,
    textract_client: Any,
    s3_client: Any,
    sqs_client: Any,
) -> MessageResult:
    try:
        notification = parse_job_status(message)
    except MalformedMessageError as e:
        log.error("malformed_job_status", error=str(e))
        return MessageResult(message.message_id, MessageStatus.FAILED, e.reason)

    status = MessageStatus.PROCESSED
    reason = None

    if notification is None:
        status, reason = MessageStatus.IGNORED, "test event"
    elif not notification.succeeded:
        log.warning(
            "textract_job_not_successful",
            job_id=notification.job_id,
            status=notification.status,
            document=f"s3://{notification.source_bucket}/{notification.source_key}",
        )
        status, reason = MessageStatus.IGNORED, f"job status {notification.status}"
    else:
        log.info(
            "processing_job_results",
            job_id=notification.job_id,
            api=notification.api,
            document=f"s3://{notification.source_bucket}/{notification.source_key}",
        )
        try:
            failure = await _extract_job_results(
                notification, settings, textract_client, s3_client
            )
        except (PipelineError, ValidationError) as e:
            log.error("job_results_failed", job_id=notification.job_id, error=str(e))
            return MessageResult(message.message_id, MessageStatus.FAILED, str(e))
        if failure:
            return MessageResult(message.message_id, MessageStatus.FAILED, failure)

    ack = await asyncio.to_thread(
        sqs_tools.acknowledge, sqs_client, settings.job_status_queue_url, message
    )
    if not ack.succeeded:
        return MessageResult(message.message_id, MessageStatus.FAILED, ack.error)

    return MessageResult(message.message_id, status, reason)


async def process_job_status_batch(
    messages: list[SQSMessage],
    settings: ResultSettings,
    textract_client: Any,
    s3_client: Any,
    sqs_client: Any,
) -> BatchResult:
    """
    Process one batch of job status notifications.

    Messages are handled one at a time in delivery order. A failed message
    does not stop the rest of the batch.

    Args:
        messages: SQS messages from the job status queue
        settings: Validated result settings
        textract_client: Textract client
        s3_client: S3 client
        sqs_client: SQS client

    Returns:
        BatchResult with one entry per message
    """
    start_time = time.time()
    batch = BatchResult()

    for message in messages:
        with structlog.contextvars.bound_contextvars(message_id=message.message_id):
            batch.add(
                await _process_message(
                    message, settings, textract_client, s3_client, sqs_client
                )
            )

    batch.duration_ms = int((time.time() - start_time) * 1000)
    return batch


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    AWS Lambda entry point for the job status queue.

    Args:
        event: SQS event ({"Records": [...]})
        context: Lambda execution context

    Returns:
        Batch summary (batchItemFailures is empty on a normal return)

    Raises:
        ConfigurationError: If required configuration is missing
        BatchFailedError: If any message was left on the queue
        ValueError: If the event is not an SQS batch
    """
    settings = load_settings(ResultSettings)
    configure_logging(settings.log_level)

    try:
        messages = parse_sqs_records(event)
    except ValidationError as e:
        raise ValueError(f"Invalid SQS record in event: {e.error_count()} errors") from e

    log.info("lambda_invoked", message_count=len(messages))

    batch = asyncio.run(
        process_job_status_batch(
            messages,
            settings,
            textract_client=textract_tools.get_client(settings),
            s3_client=s3_tools.get_client(settings),
            sqs_client=sqs_tools.get_client(settings),
        )
    )

    log.info("batch_processed", **batch.summary())
    batch.raise_for_failures()
    return batch.to_response()
