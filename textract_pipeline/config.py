"""
Configuration Management

Pydantic-settings based configuration for the extraction pipeline handlers.
Every setting is read from a PIPELINE_-prefixed environment variable.
Settings are built once per invocation and passed explicitly into the
handlers, so tests can construct them directly.
"""

from typing import Literal, TypeVar

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from textract_pipeline.exceptions import ConfigurationError

TEXT_DETECTION_API = "StartDocumentTextDetection"
ANALYSIS_API = "StartDocumentAnalysis"

ExtractionApi = Literal["StartDocumentTextDetection", "StartDocumentAnalysis"]

SUPPORTED_FEATURE_TYPES = ("TABLES", "FORMS")


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class AWSSettings(BaseSettings):
    """
    Settings shared by both handlers.

    Environment variables are prefixed with PIPELINE_ and are case-insensitive.
    Example: PIPELINE_AWS_REGION=eu-west-1
    """

    model_config = SettingsConfigDict(
        env_prefix="PIPELINE_",
        env_file=[".env.local", ".env"],
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    aws_region: str = Field(
        default="us-west-2",
        description="AWS region",
    )
    textract_endpoint_url: str | None = Field(
        default=None,
        description="Textract endpoint URL (for local development)",
    )
    s3_endpoint_url: str | None = Field(
        default=None,
        description="S3 endpoint URL (for local development)",
    )
    sqs_endpoint_url: str | None = Field(
        default=None,
        description="SQS endpoint URL (for local development)",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    def _client_config(self, endpoint_url: str | None) -> dict:
        config = {"region_name": self.aws_region}
        if endpoint_url:
            config["endpoint_url"] = endpoint_url
        return config

    @property
    def textract_config(self) -> dict:
        """Textract client configuration."""
        return self._client_config(self.textract_endpoint_url)

    @property
    def s3_config(self) -> dict:
        """S3 client configuration."""
        return self._client_config(self.s3_endpoint_url)

    @property
    def sqs_config(self) -> dict:
        """SQS client configuration."""
        return self._client_config(self.sqs_endpoint_url)


class SubmissionSettings(AWSSettings):
    """Settings for the job submission handler."""

    role_arn: str = Field(
        ...,
        min_length=1,
        description="IAM role ARN Textract assumes to publish job status",
    )
    sns_topic_arn: str = Field(
        ...,
        min_length=1,
        description="SNS topic ARN receiving Textract job status notifications",
    )
    api: ExtractionApi = Field(
        ...,
        description="Textract operation used to start jobs",
    )
    feature_types: str = Field(
        default="TABLES,FORMS",
        description="Comma-separated feature types for StartDocumentAnalysis",
    )
    s3_notification_queue_url: str = Field(
        ...,
        min_length=1,
        description="Queue delivering S3 upload notifications (acknowledgment only)",
    )
    file_formats: str = Field(
        default="pdf,png,jpg,jpeg,tiff",
        description="Comma-separated object extensions eligible for extraction",
    )

    @field_validator("feature_types")
    @classmethod
    def _validate_feature_types(cls, value: str) -> str:
        features = [item.upper() for item in _split_csv(value)]
        if not features:
            raise ValueError("at least one feature type is required")
        unsupported = [f for f in features if f not in SUPPORTED_FEATURE_TYPES]
        if unsupported:
            raise ValueError(
                f"unsupported feature types {unsupported}; "
                f"expected a subset of {list(SUPPORTED_FEATURE_TYPES)}"
            )
        return ",".join(features)

    @property
    def feature_type_list(self) -> list[str]:
        """Feature types as passed to StartDocumentAnalysis."""
        return _split_csv(self.feature_types)

    @property
    def file_format_list(self) -> list[str]:
        """Lower-cased extensions, without leading dots."""
        return [item.lower().lstrip(".") for item in _split_csv(self.file_formats)]


class ResultSettings(AWSSettings):
    """Settings for the job result handler."""

    job_status_queue_url: str = Field(
        ...,
        min_length=1,
        description="Queue delivering Textract job status (acknowledgment only)",
    )
    output_bucket: str | None = Field(
        default=None,
        description="Bucket for extraction artifacts (defaults to the source bucket)",
    )


SettingsT = TypeVar("SettingsT", bound=AWSSettings)


def load_settings(settings_cls: type[SettingsT]) -> SettingsT:
    """
    Build settings from the environment.

    Args:
        settings_cls: SubmissionSettings or ResultSettings

    Returns:
        Validated settings instance

    Raises:
        ConfigurationError: If a required value is missing or invalid
    """
    try:
        return settings_cls()
    except ValidationError as e:
        missing = []
        invalid = []
        for error in e.errors():
            name = f"PIPELINE_{'_'.join(str(p) for p in error['loc']).upper()}"
            if error["type"] == "missing":
                missing.append(name)
            else:
                invalid.append(f"{name}: {error['msg']}")
        raise ConfigurationError(missing=missing, invalid=invalid) from e
