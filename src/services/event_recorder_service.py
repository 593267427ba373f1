"""Event recorder: persists every published task event as an audit row."""

import asyncio
import logging

from src.core.logging import span
from src.domain.event import EventRecord, SnsEnvelope
from src.repositories.event_repository import EventRepository
from src.services.task_service import now_millis


logger = logging.getLogger(__name__)


class EventRecorderService:
    """Turns topic messages into event table rows."""

    def __init__(self, event_repository: EventRepository) -> None:
        self._events = event_repository

    async def record_message(self, message: str) -> EventRecord:
        """Validate one envelope and write its audit row.

        Raises:
            EnvelopeValidationError: If the envelope or its event content is malformed
        """
        envelope = SnsEnvelope.from_json(message)
        event = envelope.unwrap()
        record = EventRecord.from_event(event, timestamp=now_millis())

        logger.info(
            "Recording %s/%s for %d task(s) %s (origin: %s, request: %s)",
            event.event_type,
            event.action_type,
            len(event.task_ids),
            event.task_id,
            envelope.origin,
            envelope.request_id,
        )
        return await self._events.create(record)

    async def record_messages(self, messages: list[str]) -> list[EventRecord]:
        """Record all messages of a delivery concurrently; any failure fails the delivery."""
        with span("event_recorder_service.record_messages"):
            return list(await asyncio.gather(*(self.record_message(message) for message in messages)))
