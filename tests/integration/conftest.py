"""
Integration test fixtures and configuration.

Integration tests run both handlers against moto S3 and SQS, with the
queues wired the way the deployed pipeline wires them. Textract has no
moto async-job support and is replaced by a scripted client.
"""

from unittest.mock import MagicMock

import pytest

from textract_pipeline.config import ResultSettings, SubmissionSettings
from tests.utils.events import TEST_ROLE_ARN, TEST_TOPIC_ARN


class ScriptedTextract:
    """
    Textract stand-in that hands out job ids and serves results by job id.

    Tests register the blocks a job will return with complete_job().
    """

    def __init__(self, page_size: int = 4):
        self.page_size = page_size
        self.client = MagicMock()
        self.started: list[dict] = []
        self._results: dict[str, list[dict]] = {}

        self.client.start_document_analysis.side_effect = self._start
        self.client.start_document_text_detection.side_effect = self._start
        self.client.get_document_analysis.side_effect = self._get
        self.client.get_document_text_detection.side_effect = self._get

    def _start(self, **request):
        self.started.append(request)
        return {"JobId": f"job-{len(self.started)}"}

    def _get(self, JobId, NextToken=None):
        blocks = self._results[JobId]
        offset = int(NextToken or 0)
        response = {
            "JobStatus": "SUCCEEDED",
            "Blocks": blocks[offset : offset + self.page_size],
        }
        if offset + self.page_size < len(blocks):
            response["NextToken"] = str(offset + self.page_size)
        return response

    def complete_job(self, job_id: str, blocks: list[dict]) -> None:
        self._results[job_id] = blocks


@pytest.fixture
def scripted_textract() -> ScriptedTextract:
    return ScriptedTextract()


@pytest.fixture
def integration_settings(mock_pipeline_aws):
    """Settings for both handlers pointing at the moto queues."""
    submission = SubmissionSettings(
        role_arn=TEST_ROLE_ARN,
        sns_topic_arn=TEST_TOPIC_ARN,
        api="StartDocumentAnalysis",
        s3_notification_queue_url=mock_pipeline_aws["upload_queue_url"],
    )
    result = ResultSettings(job_status_queue_url=mock_pipeline_aws["status_queue_url"])
    return {"submission": submission, "result": result}
