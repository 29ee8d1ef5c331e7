"""
Batch Bookkeeping

Per-message results for one SQS batch invocation and the partial batch
response returned to Lambda.

Every message ends in one of three states:
- PROCESSED: work done and message deleted
- IGNORED: nothing to do (test event, failed job, no eligible objects), message deleted
- FAILED: left on the queue for redelivery; the invocation then fails
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from textract_pipeline.exceptions import BatchFailedError


class MessageStatus(str, Enum):
    PROCESSED = "processed"
    IGNORED = "ignored"
    FAILED = "failed"


@dataclass
class MessageResult:
    """Outcome of one message."""

    message_id: str
    status: MessageStatus
    reason: str | None = None


@dataclass
class BatchResult:
    """Summary of one batch invocation."""

    results: list[MessageResult] = field(default_factory=list)
    duration_ms: int = 0

    def add(self, result: MessageResult) -> None:
        self.results.append(result)

    def _count(self, status: MessageStatus) -> int:
        return sum(1 for result in self.results if result.status == status)

    @property
    def processed(self) -> int:
        return self._count(MessageStatus.PROCESSED)

    @property
    def ignored(self) -> int:
        return self._count(MessageStatus.IGNORED)

    @property
    def acknowledged(self) -> int:
        return self.processed + self.ignored

    @property
    def failed_message_ids(self) -> list[str]:
        return [r.message_id for r in self.results if r.status == MessageStatus.FAILED]

    def summary(self) -> dict[str, Any]:
        return {
            "messages": len(self.results),
            "processed": self.processed,
            "ignored": self.ignored,
            "acknowledged": self.acknowledged,
            "failed": len(self.failed_message_ids),
            "duration_ms": self.duration_ms,
        }

    def raise_for_failures(self) -> None:
        """
        Fail the invocation if any message was left on the queue.

        Raises:
            BatchFailedError: With the ids of the unacknowledged messages
        """
        if self.failed_message_ids:
            raise BatchFailedError(self.failed_message_ids)

    def to_response(self) -> dict[str, Any]:
        """
        Lambda partial batch response.

        Only returned when every message was acknowledged, so
        batchItemFailures is empty unless built directly.
        """
        return {
            "batchItemFailures": [
                {"itemIdentifier": message_id} for message_id in self.failed_message_ids
            ],
            "summary": self.summary(),
        }
