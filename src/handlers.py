"""
Lambda Handlers - Entry points for AWS Lambda functions.

This module provides Lambda handlers for:
1. Task API (via Mangum) - HTTP requests through API Gateway
2. Batch Import - S3 object-created notifications for uploaded task files
3. Event Recorder - SNS task events written to the event table
4. Notifier - SQS-buffered task events sent as email

Each handler builds its dependencies once per process and runs the async
service for the invocation. Failures are not caught here: they fail the
invocation so the trigger's retry / dead-letter policy applies.
"""

import asyncio
import logging

from mangum import Mangum

from src.core.config import Constants
from src.core.dependencies import get_dependencies
from src.core.logging import configure_logfire, log_invocation
from src.interface.lambda_context import Invocation, parse_s3_records, parse_sns_messages, parse_sqs_messages
from src.main import app


configure_logfire()
logger = logging.getLogger(__name__)

_asgi_handler = Mangum(app, lifespan="off")


def api_handler(event, context):
    """
    AWS Lambda handler for HTTP requests via API Gateway.

    Uses Mangum to wrap the FastAPI application; the authorizer context stays
    available to the app through the ASGI scope.
    """
    return _asgi_handler(event, context)


def batch_import_handler(event, context) -> dict:
    """
    S3 handler: import uploaded task files.

    One record per uploaded file. Events are consolidated per owner across all
    files of the invocation before publishing.
    """
    invocation = Invocation.from_context(context)
    refs = parse_s3_records(event)
    log_invocation(logger, "info", "Batch import triggered", invocation, files=len(refs))

    service = get_dependencies().batch_import_service
    published = asyncio.run(service.import_files(refs, invocation=invocation))

    return {"files": len(refs), "publishedEvents": len(published)}


def event_recorder_handler(event, context) -> dict:
    """
    SNS handler: write an audit row for every published task event.
    """
    invocation = Invocation.from_context(context)
    messages = parse_sns_messages(event)
    log_invocation(logger, "info", "Recording task events", invocation, records=len(messages))

    service = get_dependencies().event_recorder_service
    records = asyncio.run(service.record_messages(messages))

    return {"recorded": len(records)}


def notify_handler(event, context) -> dict:
    """
    SQS handler: email the owner of every task event in the batch.

    Queue configuration (deployed): batch size 8, 60s batching window,
    3 receives before dead-lettering.
    """
    invocation = Invocation.from_context(context)
    messages = parse_sqs_messages(event)
    if len(messages) > Constants.NOTIFY_BATCH_SIZE:
        logger.warning("Notify batch of %d exceeds configured batch size %d", len(messages), Constants.NOTIFY_BATCH_SIZE)
    log_invocation(logger, "info", "Sending task notifications", invocation, records=len(messages))

    service = get_dependencies().notification_service
    sent = asyncio.run(service.notify(messages))

    return {"sent": len(sent)}
