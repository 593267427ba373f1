"""Batch import of uploaded task files and per-owner event consolidation.

Flow for one invocation:
1. Each uploaded file is read, parsed and bulk-created independently (concurrently)
2. Every created task becomes a BATCH_TASK/INSERT event
3. Events from all files are consolidated into one event per owner
4. Consolidated events are published, so an owner gets one email and one audit
   row per invocation instead of one per row
"""

import asyncio
import logging

from pydantic import ValidationError

from src.core.config import Constants
from src.core.errors import BatchLimitExceededError, FileEmptyError, TaskValidationError
from src.core.logging import log_invocation, span
from src.domain.event import ActionType, EventType, TodoTaskEvent
from src.domain.task import Task
from src.interface.file_storage import FileStorage
from src.interface.lambda_context import Invocation, S3ObjectRef
from src.interface.task_file_parser import ImportRow, parse_import_file
from src.repositories.task_repository import TaskRepository
from src.services.event_publisher import EventPublisher
from src.services.task_service import build_task, generate_task_id, now_millis


logger = logging.getLogger(__name__)


def consolidate_events(events: list[TodoTaskEvent]) -> list[TodoTaskEvent]:
    """Merge events that share an owner into one event per owner.

    Owners are emitted in the order their first event appears. Each merged
    event carries the comma-joined task ids and titles of that owner's events
    in input order; every other field comes from the owner's first event.

    Args:
        events: Per-task events, in file/row order

    Returns:
        One event per distinct owner email
    """
    groups: dict[str, list[TodoTaskEvent]] = {}
    for event in events:
        groups.setdefault(event.owner.email, []).append(event)

    consolidated = []
    for owner_events in groups.values():
        first = owner_events[0]
        consolidated.append(
            first.model_copy(
                update={
                    "task_id": ",".join(e.task_id for e in owner_events),
                    "title": ",".join(e.title for e in owner_events),
                }
            )
        )
    return consolidated


def _build_tasks(rows: list[ImportRow], used_ids: set[str]) -> list[Task]:
    """Build one pending task per row, recording each id in ``used_ids``.

    ``used_ids`` is shared by every file of an invocation so ids stay unique
    across files as well as within one.
    """
    tasks: list[Task] = []
    for row in rows:
        try:
            task = build_task(row.to_request())
        except ValidationError as e:
            msg = f"Invalid task at line {row.line_number}: {e}"
            raise TaskValidationError(msg) from e

        # Ids only carry a 0..9999 suffix, so rows built in the same millisecond can collide
        while task.pk in used_ids:
            task = task.model_copy(update={"pk": generate_task_id(now_millis())})
        used_ids.add(task.pk)
        tasks.append(task)
    return tasks


class BatchImportService:
    """Imports uploaded task files and publishes consolidated events."""

    def __init__(
        self,
        task_repository: TaskRepository,
        file_storage: FileStorage,
        publisher: EventPublisher,
    ) -> None:
        self._tasks = task_repository
        self._storage = file_storage
        self._publisher = publisher

    async def import_file(self, ref: S3ObjectRef, *, used_ids: set[str] | None = None) -> list[TodoTaskEvent]:
        """Create the tasks of one file and return one event per created task.

        Args:
            ref: Uploaded object to import
            used_ids: Task ids already taken in this invocation; new ids are added to it

        Raises:
            FileEmptyError: If the file has no content or no task rows
            MalformedRowError: If a row does not have six fields
            BatchLimitExceededError: If the file holds more than 25 tasks; nothing is written
        """
        with span("batch_import_service.import_file"):
            content = await self._storage.read_text(bucket=ref.bucket, key=ref.key)
            rows = parse_import_file(content)
            if not rows:
                msg = f"Import file has no task rows: s3://{ref.bucket}/{ref.key}"
                raise FileEmptyError(msg)

            if len(rows) > Constants.BATCH_WRITE_LIMIT:
                logger.error("Import file %s has %d rows, limit is %d", ref.key, len(rows), Constants.BATCH_WRITE_LIMIT)
                raise BatchLimitExceededError(count=len(rows))

            tasks = _build_tasks(rows, used_ids if used_ids is not None else set())
            created = await self._tasks.create_batch(tasks)
            logger.info("Imported %d tasks from %s", len(created), ref.key)

            return [
                TodoTaskEvent.from_task(task, event_type=EventType.BATCH_TASK, action_type=ActionType.INSERT)
                for task in created
            ]

    async def import_files(self, refs: list[S3ObjectRef], *, invocation: Invocation) -> list[TodoTaskEvent]:
        """Import every uploaded file, consolidate events across all of them and publish.

        Files are imported concurrently; if any file fails the invocation fails
        (tasks already written by other files are not rolled back).

        Returns:
            The consolidated events that were published
        """
        with span("batch_import_service.import_files"):
            used_ids: set[str] = set()
            per_file = await asyncio.gather(*(self.import_file(ref, used_ids=used_ids) for ref in refs))
            events = [event for file_events in per_file for event in file_events]

            consolidated = consolidate_events(events)
            await self._publisher.publish_all(consolidated, invocation=invocation)

            log_invocation(
                logger,
                "info",
                "Batch import complete",
                invocation,
                files=len(refs),
                tasks=len(events),
                published_events=len(consolidated),
            )
            return consolidated
