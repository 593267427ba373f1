"""Invocation metadata and trigger payload parsing for Lambda entry points."""

import json
from dataclasses import dataclass
from typing import Any
from urllib.parse import unquote_plus

from pydantic import BaseModel, Field

from src.core.errors import EnvelopeValidationError


@dataclass(frozen=True)
class Invocation:
    """Identifies the invocation that publishes an event."""

    request_id: str
    lambda_request_id: str
    function_name: str

    @classmethod
    def from_context(cls, context: Any, *, request_id: str | None = None) -> "Invocation":
        """Build from a Lambda context object.

        Args:
            context: Lambda context (aws_request_id, function_name)
            request_id: Upstream request ID (API Gateway); defaults to the Lambda request ID
        """
        lambda_request_id = getattr(context, "aws_request_id", None) or "local"
        return cls(
            request_id=request_id or lambda_request_id,
            lambda_request_id=lambda_request_id,
            function_name=getattr(context, "function_name", None) or "local",
        )


class S3ObjectRef(BaseModel):
    """Bucket and decoded key named by one storage notification record."""

    bucket: str = Field(..., description="Bucket name")
    key: str = Field(..., description="Object key, URL-decoded")


def parse_s3_records(event: dict[str, Any]) -> list[S3ObjectRef]:
    """Extract the uploaded objects from an S3 notification event.

    Keys arrive URL-encoded with ``+`` for spaces.
    """
    refs = []
    for record in event.get("Records", []):
        s3 = record["s3"]
        refs.append(S3ObjectRef(bucket=s3["bucket"]["name"], key=unquote_plus(s3["object"]["key"])))
    return refs


def parse_sns_messages(event: dict[str, Any]) -> list[str]:
    """Return the raw message text of every record in an SNS event."""
    try:
        return [record["Sns"]["Message"] for record in event.get("Records", [])]
    except (KeyError, TypeError) as e:
        msg = f"Invalid SNS record: {e}"
        raise EnvelopeValidationError(msg) from e


class QueueMessage(BaseModel):
    """SQS record carrying an SNS notification in its body."""

    message_id: str
    sns_message: str


def parse_sqs_messages(event: dict[str, Any]) -> list[QueueMessage]:
    """Unwrap SQS records whose body is an SNS notification JSON document."""
    messages = []
    for record in event.get("Records", []):
        try:
            body = json.loads(record["body"])
            messages.append(QueueMessage(message_id=record["messageId"], sns_message=body["Message"]))
        except (KeyError, TypeError, json.JSONDecodeError) as e:
            msg = f"Invalid SQS record: {e}"
            raise EnvelopeValidationError(msg) from e
    return messages
