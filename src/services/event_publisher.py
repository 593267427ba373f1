"""Publishes task events to the SNS topic."""

import asyncio
import logging
import time
from typing import Any

from src.core.logging import log_invocation
from src.domain.event import SnsEnvelope, TodoTaskEvent
from src.interface.lambda_context import Invocation


logger = logging.getLogger(__name__)


class EventPublisher:
    """Wraps events in an envelope and publishes one message per event."""

    def __init__(self, sns_client: Any, topic_arn: str) -> None:
        self._sns = sns_client
        self._topic_arn = topic_arn

    async def publish(self, event: TodoTaskEvent, *, invocation: Invocation) -> str:
        """Publish one event and return the SNS message ID."""
        envelope = SnsEnvelope.wrap(
            event,
            request_id=invocation.request_id,
            request_lambda_id=invocation.lambda_request_id,
            origin=invocation.function_name,
            date=int(time.time() * 1000),
        )
        response = await asyncio.to_thread(
            self._sns.publish,
            TopicArn=self._topic_arn,
            Message=envelope.to_json(),
            MessageAttributes={
                "eventType": {"DataType": "String", "StringValue": str(event.event_type)},
                "actionType": {"DataType": "String", "StringValue": str(event.action_type)},
            },
        )
        log_invocation(
            logger,
            "info",
            "Published task event",
            invocation,
            event_type=str(event.event_type),
            action_type=str(event.action_type),
            task_id=event.task_id,
            message_id=response["MessageId"],
        )
        return response["MessageId"]

    async def publish_all(self, events: list[TodoTaskEvent], *, invocation: Invocation) -> list[str]:
        """Publish events concurrently; any failure fails the whole call."""
        return list(await asyncio.gather(*(self.publish(event, invocation=invocation) for event in events)))
