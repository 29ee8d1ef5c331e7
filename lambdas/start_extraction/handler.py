"""
StartExtraction Lambda Handler

Main entry point for starting Textract jobs on uploaded documents.

Trigger: SQS queue receiving S3 ObjectCreated notifications
Output: One async Textract job per uploaded object; Textract publishes
        the job status to SNS when the job finishes

Flow:
1. Validate configuration (fatal for the whole batch if invalid)
2. For each message, in delivery order:
   a. Parse the wrapped S3 bucket notification
   b. Start one Textract job per eligible object record
   c. Delete the message only if every job started
3. Fail the invocation if any message was left on the queue

A message whose records only partly started is redelivered in full, so
those records start again. Job submission is not idempotent.
"""

import asyncio
import time
from typing import Any

import structlog
from pydantic import ValidationError

from textract_pipeline.batch import BatchResult, MessageResult, MessageStatus
from textract_pipeline.config import SubmissionSettings, load_settings
from textract_pipeline.exceptions import MalformedMessageError
from textract_pipeline.log_config import configure_logging
from textract_pipeline.models.events import SQSMessage, parse_s3_event, parse_sqs_records
from textract_pipeline.tools import sqs as sqs_tools
from textract_pipeline.tools import textract as textract_tools

log = structlog.get_logger()


async def _process_message(
    message: SQSMessage,
    settings: SubmissionSettings,
    textract_client: Any,
    sqs_client: Any,
) -> MessageResult:
    """
    Start jobs for every eligible object in one upload notification.

    Stops at the first job that fails to start and leaves the message
    on the queue.
    """
    try:
        documents = parse_s3_event(message)
    except MalformedMessageError as e:
        log.error("malformed_upload_notification", error=str(e))
        return MessageResult(message.message_id, MessageStatus.FAILED, e.reason)

    formats = settings.file_format_list
    eligible = [doc for doc in documents if doc.extension in formats]

    for document in documents:
        if document not in eligible:
            log.info(
                "document_skipped_unsupported_format",
                document=document.uri,
                extension=document.extension,
            )

    for document in eligible:
        outcome = await asyncio.to_thread(
            textract_tools.start_extraction_job, textract_client, document, settings
        )
        if not outcome.succeeded:
            return MessageResult(message.message_id, MessageStatus.FAILED, outcome.error)

    ack = await asyncio.to_thread(
        sqs_tools.acknowledge, sqs_client, settings.s3_notification_queue_url, message
    )
    if not ack.succeeded:
        return MessageResult(message.message_id, MessageStatus.FAILED, ack.error)

    if not eligible:
        reason = "test event" if not documents else "no eligible documents"
        return MessageResult(message.message_id, MessageStatus.IGNORED, reason)

    log.info("upload_notification_processed", jobs_started=len(eligible))
    return MessageResult(message.message_id, MessageStatus.PROCESSED)


async def process_upload_batch(
    messages: list[SQSMessage],
    settings: SubmissionSettings,
    textract_client: Any,
    sqs_client: Any,
) -> BatchResult:
    """
    Process one batch of upload notifications.

    Messages are handled one at a time in delivery order. A failed message
    does not stop the rest of the batch.

    Args:
        messages: SQS messages from the upload queue
        settings: Validated submission settings
        textract_client: Textract client
        sqs_client: SQS client

    Returns:
        BatchResult with one entry per message
    """
    start_time = time.time()
    batch = BatchResult()

    for message in messages:
        with structlog.contextvars.bound_contextvars(message_id=message.message_id):
            batch.add(await _process_message(message, settings, textract_client, sqs_client))

    batch.duration_ms = int((time.time() - start_time) * 1000)
    return batch


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    AWS Lambda entry point for the upload notification queue.

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
    settings = load_settings(SubmissionSettings)
    configure_logging(settings.log_level)

    try:
        messages = parse_sqs_records(event)
    except ValidationError as e:
        raise ValueError(f"Invalid SQS record in event: {e.error_count()} errors") from e

    log.info(
        "lambda_invoked",
        message_count=len(messages),
        api=settings.api,
    )

    batch = asyncio.run(
        process_upload_batch(
            messages,
            settings,
            textract_client=textract_tools.get_client(settings),
            sqs_client=sqs_tools.get_client(settings),
        )
    )

    log.info("batch_processed", **batch.summary())
    batch.raise_for_failures()
    return batch.to_response()
