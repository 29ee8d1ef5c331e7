"""
Pydantic models for Textract blocks and the queue payloads the handlers consume.
"""

from textract_pipeline.models.blocks import (
    Block,
    BlockGraph,
    BlockType,
    CellBlock,
    KeyValueSetBlock,
    LineBlock,
    OtherBlock,
    Relationship,
    RelationshipType,
    SelectionElementBlock,
    SelectionStatus,
    TableBlock,
    WordBlock,
    parse_blocks,
)
from textract_pipeline.models.events import (
    DocumentLocation,
    JobStatus,
    JobStatusNotification,
    S3ObjectRef,
    SQSMessage,
    is_test_event,
    parse_job_status,
    parse_s3_event,
    parse_sqs_records,
)

__all__ = [
    # Blocks
    "Block",
    "BlockGraph",
    "BlockType",
    "CellBlock",
    "KeyValueSetBlock",
    "LineBlock",
    "OtherBlock",
    "Relationship",
    "RelationshipType",
    "SelectionElementBlock",
    "SelectionStatus",
    "TableBlock",
    "WordBlock",
    "parse_blocks",
    # Events
    "DocumentLocation",
    "JobStatus",
    "JobStatusNotification",
    "S3ObjectRef",
    "SQSMessage",
    "is_test_event",
    "parse_job_status",
    "parse_s3_event",
    "parse_sqs_records",
]
