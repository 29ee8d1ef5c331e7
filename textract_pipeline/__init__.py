# Shared Infrastructure for the Textract Extraction Pipeline
"""
Shared infrastructure for the extraction Lambdas.

This package provides:
- Pydantic models for Textract blocks and queue payloads
- Document reconstruction (text, form data, tables)
- Tool implementations for Textract, S3, SQS
- Configuration management
- Custom exceptions
"""

from textract_pipeline.config import (
    ResultSettings,
    SubmissionSettings,
    load_settings,
)
from textract_pipeline.exceptions import (
    BatchFailedError,
    ConfigurationError,
    MalformedMessageError,
    MissingBlockError,
    PipelineError,
    S3Error,
    SQSError,
    TextractError,
)
from textract_pipeline.reconstruction import (
    DocumentReconstruction,
    extract_form_data,
    extract_tables,
    extract_text,
    get_text,
    reconstruct_document,
)

__all__ = [
    # Config
    "ResultSettings",
    "SubmissionSettings",
    "load_settings",
    # Exceptions
    "BatchFailedError",
    "ConfigurationError",
    "MalformedMessageError",
    "MissingBlockError",
    "PipelineError",
    "S3Error",
    "SQSError",
    "TextractError",
    # Reconstruction
    "DocumentReconstruction",
    "extract_form_data",
    "extract_tables",
    "extract_text",
    "get_text",
    "reconstruct_document",
]
