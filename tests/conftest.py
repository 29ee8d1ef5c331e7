"""
Pytest Configuration and Shared Fixtures

Provides moto AWS mocking, settings, SQS event builders and test utilities.
"""

import os
from unittest.mock import MagicMock

import boto3
import pytest
from moto import mock_aws

# Set test environment before importing application modules
os.environ["PIPELINE_AWS_REGION"] = "us-west-2"
os.environ["PIPELINE_LOG_LEVEL"] = "DEBUG"
os.environ["AWS_DEFAULT_REGION"] = "us-west-2"
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"

from textract_pipeline.config import ResultSettings, SubmissionSettings  # noqa: E402

from tests.utils.events import (  # noqa: E402
    TEST_BUCKET,
    TEST_ROLE_ARN,
    TEST_STATUS_QUEUE_URL,
    TEST_TOPIC_ARN,
    TEST_UPLOAD_QUEUE_URL,
)


# --- AWS Mocking Fixtures ---


@pytest.fixture
def aws_credentials():
    """Mock AWS credentials for moto."""
    return {
        "aws_access_key_id": "testing",
        "aws_secret_access_key": "testing",
        "region_name": "us-west-2",
    }


@pytest.fixture
def mock_s3(aws_credentials):
    """Create a mocked S3 bucket."""
    with mock_aws():
        s3 = boto3.client("s3", **aws_credentials)
        s3.create_bucket(
            Bucket=TEST_BUCKET,
            CreateBucketConfiguration={"LocationConstraint": "us-west-2"},
        )
        yield s3


@pytest.fixture
def mock_sqs(aws_credentials):
    """Create mocked upload and job status queues."""
    with mock_aws():
        sqs = boto3.client("sqs", **aws_credentials)
        upload_queue_url = sqs.create_queue(QueueName="test-uploads")["QueueUrl"]
        status_queue_url = sqs.create_queue(QueueName="test-job-status")["QueueUrl"]
        yield {
            "client": sqs,
            "upload_queue_url": upload_queue_url,
            "status_queue_url": status_queue_url,
        }


@pytest.fixture
def mock_pipeline_aws(aws_credentials):
    """S3 bucket and both queues inside a single moto context."""
    with mock_aws():
        s3 = boto3.client("s3", **aws_credentials)
        s3.create_bucket(
            Bucket=TEST_BUCKET,
            CreateBucketConfiguration={"LocationConstraint": "us-west-2"},
        )
        sqs = boto3.client("sqs", **aws_credentials)
        yield {
            "s3": s3,
            "sqs": sqs,
            "upload_queue_url": sqs.create_queue(QueueName="test-uploads")["QueueUrl"],
            "status_queue_url": sqs.create_queue(QueueName="test-job-status")["QueueUrl"],
        }


@pytest.fixture
def mock_textract() -> MagicMock:
    """Textract client double; tests script responses with side_effect."""
    client = MagicMock()
    client.start_document_text_detection.return_value = {"JobId": "job-text-1"}
    client.start_document_analysis.return_value = {"JobId": "job-analysis-1"}
    return client


@pytest.fixture
def mock_sqs_client() -> MagicMock:
    """SQS client double recording delete_message calls."""
    client = MagicMock()
    client.delete_message.return_value = {}
    return client


@pytest.fixture
def mock_s3_client() -> MagicMock:
    """S3 client double recording put_object calls."""
    client = MagicMock()
    client.put_object.return_value = {"ETag": '"etag"'}
    return client


# --- Settings Fixtures ---


@pytest.fixture
def submission_settings() -> SubmissionSettings:
    """Submission settings for StartDocumentTextDetection."""
    return SubmissionSettings(
        role_arn=TEST_ROLE_ARN,
        sns_topic_arn=TEST_TOPIC_ARN,
        api="StartDocumentTextDetection",
        s3_notification_queue_url=TEST_UPLOAD_QUEUE_URL,
    )


@pytest.fixture
def analysis_settings() -> SubmissionSettings:
    """Submission settings for StartDocumentAnalysis with default features."""
    return SubmissionSettings(
        role_arn=TEST_ROLE_ARN,
        sns_topic_arn=TEST_TOPIC_ARN,
        api="StartDocumentAnalysis",
        s3_notification_queue_url=TEST_UPLOAD_QUEUE_URL,
    )


@pytest.fixture
def result_settings() -> ResultSettings:
    """Result handler settings writing next to the source document."""
    return ResultSettings(job_status_queue_url=TEST_STATUS_QUEUE_URL)


@pytest.fixture
def pipeline_env(monkeypatch):
    """Complete PIPELINE_ environment for both Lambda entry points."""
    values = {
        "PIPELINE_ROLE_ARN": TEST_ROLE_ARN,
        "PIPELINE_SNS_TOPIC_ARN": TEST_TOPIC_ARN,
        "PIPELINE_API": "StartDocumentAnalysis",
        "PIPELINE_S3_NOTIFICATION_QUEUE_URL": TEST_UPLOAD_QUEUE_URL,
        "PIPELINE_JOB_STATUS_QUEUE_URL": TEST_STATUS_QUEUE_URL,
    }
    for name, env_value in values.items():
        monkeypatch.setenv(name, env_value)
    return values

