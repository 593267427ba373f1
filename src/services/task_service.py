"""Task service: authorization, task mutations and single-task events."""

import logging
import random
import time

from src.core.config import Constants
from src.core.errors import ForbiddenError
from src.core.logging import span
from src.domain.event import ActionType, EventType, TodoTaskEvent
from src.domain.task import Person, Task, TaskCreateRequest, TaskStatus
from src.interface.lambda_context import Invocation
from src.repositories.task_repository import TaskRepository
from src.services.auth_service import Caller
from src.services.event_publisher import EventPublisher


logger = logging.getLogger(__name__)


def now_millis() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def generate_task_id(timestamp: int | None = None) -> str:
    """Generate a task id of the form TID-{millis}-{0..9999}."""
    timestamp = timestamp if timestamp is not None else now_millis()
    suffix = random.randrange(Constants.TASK_ID_RANDOM_BOUND)  # noqa: S311 - not security sensitive
    return f"{Constants.TASK_ID_PREFIX}-{timestamp}-{suffix}"


def build_task(request: TaskCreateRequest, *, timestamp: int | None = None) -> Task:
    """Build a new pending task from a draft."""
    timestamp = timestamp if timestamp is not None else now_millis()
    return Task(
        pk=generate_task_id(timestamp),
        sk=request.owner.email,
        email=request.owner.email,
        title=request.title,
        description=request.description,
        task_status=TaskStatus.PENDING,
        archived=False,
        created_at=timestamp,
        owner=request.owner,
        assigned_by=request.assigned_by,
    )


def _authorize(caller: Caller, owner_email: str) -> None:
    if not caller.can_access(owner_email):
        logger.warning("Forbidden: %s attempted to access tasks of %s", caller.email, owner_email)
        msg = "You are not allowed to access tasks of another user"
        raise ForbiddenError(msg)


def _caller_as_person(caller: Caller) -> Person:
    return Person(name=caller.email, email=caller.email)


class TaskService:
    """Operations behind the task HTTP API.

    Every operation checks that the caller owns the tasks involved or is an
    admin before touching the repository.
    """

    def __init__(self, task_repository: TaskRepository, publisher: EventPublisher) -> None:
        self._tasks = task_repository
        self._publisher = publisher

    def authorize(self, caller: Caller, *, email: str) -> None:
        """Raise ForbiddenError unless the caller may act on tasks owned by ``email``."""
        _authorize(caller, email)

    async def list_all_tasks(self, caller: Caller) -> list[Task]:
        """Full table scan (admin only)."""
        with span("task_service.list_all_tasks"):
            if not caller.is_admin:
                logger.warning("Forbidden: non-admin %s requested all tasks", caller.email)
                msg = "Only admins can list all tasks"
                raise ForbiddenError(msg)
            return await self._tasks.get_all()

    async def list_tasks(self, caller: Caller, *, email: str) -> list[Task]:
        """List the tasks of one owner."""
        with span("task_service.list_tasks"):
            _authorize(caller, email)
            return await self._tasks.get_by_email(email)

    async def get_task(self, caller: Caller, *, email: str, task_id: str) -> Task:
        """Fetch one task.

        Raises:
            ForbiddenError: If the caller may not read this owner's tasks
            TaskNotFoundError: If the task does not exist
        """
        with span("task_service.get_task"):
            _authorize(caller, email)
            return await self._tasks.get_by_id_and_email(email, task_id)

    async def create_task(self, caller: Caller, request: TaskCreateRequest, *, invocation: Invocation) -> Task:
        """Create a task and publish a SINGLE_TASK/INSERT event.

        Authorization is checked before anything is written or published.
        """
        with span("task_service.create_task"):
            task = build_task(request)
            _authorize(caller, task.owner.email)

            created = await self._tasks.create(task)
            await self._publisher.publish(
                TodoTaskEvent.from_task(created, event_type=EventType.SINGLE_TASK, action_type=ActionType.INSERT),
                invocation=invocation,
            )
            logger.info("Created task %s for %s", created.pk, created.email)
            return created

    async def update_task_status(
        self,
        caller: Caller,
        *,
        email: str,
        task_id: str,
        new_status: TaskStatus,
        invocation: Invocation,
    ) -> Task:
        """Change a task's status and publish a SINGLE_TASK/UPDATE event."""
        with span("task_service.update_task_status"):
            _authorize(caller, email)

            updated = await self._tasks.update(email, task_id, new_status)
            await self._publisher.publish(
                TodoTaskEvent.from_task(
                    updated,
                    event_type=EventType.SINGLE_TASK,
                    action_type=ActionType.UPDATE,
                    created_by=_caller_as_person(caller),
                ),
                invocation=invocation,
            )
            logger.info("Updated task %s to %s", task_id, new_status)
            return updated

    async def delete_task(self, caller: Caller, *, email: str, task_id: str, invocation: Invocation) -> Task:
        """Delete a task and publish a SINGLE_TASK/DELETE event."""
        with span("task_service.delete_task"):
            _authorize(caller, email)

            deleted = await self._tasks.delete(email, task_id)
            await self._publisher.publish(
                TodoTaskEvent.from_task(
                    deleted,
                    event_type=EventType.SINGLE_TASK,
                    action_type=ActionType.DELETE,
                    created_by=_caller_as_person(caller),
                ),
                invocation=invocation,
            )
            logger.info("Deleted task %s", task_id)
            return deleted
