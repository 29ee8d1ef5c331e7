"""
StartExtraction Lambda

Triggered by S3 upload notifications delivered through SQS.
Starts one asynchronous Textract job per uploaded document.

Trigger: SQS queue receiving S3 ObjectCreated notifications
Output: Textract jobs publishing their status to SNS
"""

from lambdas.start_extraction.handler import lambda_handler, process_upload_batch

__all__ = [
    "lambda_handler",
    "process_upload_batch",
]
