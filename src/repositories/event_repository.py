"""DynamoDB repository for task event audit rows."""

import asyncio
import logging
from typing import Any

from src.domain.event import EventRecord


logger = logging.getLogger(__name__)


class EventRepository:
    """Append-only writes to the event table.

    No idempotency is enforced: a redelivered event produces a second row.
    """

    def __init__(self, table: Any) -> None:
        self._table = table

    async def create(self, record: EventRecord) -> EventRecord:
        await asyncio.to_thread(self._table.put_item, Item=record.to_item())
        logger.info(
            "Recorded task event",
            extra={"pk": record.pk, "event_type": str(record.event_type), "action_type": str(record.action_type)},
        )
        return record
