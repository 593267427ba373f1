"""DynamoDB repository for todo tasks."""

import asyncio
import logging
from typing import Any

from botocore.exceptions import ClientError

from src.core.config import Constants
from src.core.errors import BatchLimitExceededError, TaskNotFoundError
from src.domain.task import Task, TaskStatus


logger = logging.getLogger(__name__)

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"


class TaskRepository:
    """CRUD and batch writes over the task table.

    Items are keyed by ``pk`` (task id) and ``sk`` (owner email). The table is a
    boto3 ``Table`` resource; blocking calls run in a worker thread.
    """

    def __init__(self, table: Any) -> None:
        self._table = table

    @property
    def table_name(self) -> str:
        return self._table.name

    async def _scan(self, **kwargs: Any) -> list[dict[str, Any]]:
        """Scan the table following LastEvaluatedKey until exhausted."""
        items: list[dict[str, Any]] = []
        while True:
            response = await asyncio.to_thread(self._table.scan, **kwargs)
            items.extend(response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return items
            kwargs["ExclusiveStartKey"] = last_key

    async def get_all(self) -> list[Task]:
        """Return every task in the table."""
        items = await self._scan()
        logger.info("Scanned tasks", extra={"table": self.table_name, "count": len(items)})
        return [Task.model_validate(item) for item in items]

    async def get_by_email(self, email: str) -> list[Task]:
        """Return all tasks owned by ``email``."""
        items = await self._scan(
            FilterExpression="email = :email",
            ExpressionAttributeValues={":email": email},
        )
        logger.info("Listed tasks for owner", extra={"owner_email": email, "count": len(items)})
        return [Task.model_validate(item) for item in items]

    async def get_by_id_and_email(self, email: str, task_id: str) -> Task:
        """Fetch one task, raising TaskNotFoundError if absent."""
        response = await asyncio.to_thread(self._table.get_item, Key={"pk": task_id, "sk": email})
        item = response.get("Item")
        if not item:
            raise TaskNotFoundError()
        return Task.model_validate(item)

    async def create(self, task: Task) -> Task:
        """Insert a single task."""
        await asyncio.to_thread(self._table.put_item, Item=task.to_item())
        logger.info("Created task", extra={"task_id": task.pk, "owner_email": task.email})
        return task

    async def update(self, email: str, task_id: str, new_status: TaskStatus) -> Task:
        """Set a new status and archive the task.

        The write is conditional on the item existing so a concurrent delete is
        never resurrected.

        Raises:
            TaskNotFoundError: If no task has this key
        """
        try:
            response = await asyncio.to_thread(
                self._table.update_item,
                Key={"pk": task_id, "sk": email},
                ConditionExpression="attribute_exists(pk)",
                UpdateExpression="SET taskStatus = :taskStatus, archived = :archived",
                ExpressionAttributeValues={
                    ":taskStatus": str(new_status),
                    ":archived": True,
                },
                ReturnValues="ALL_NEW",
            )
        except ClientError as e:
            if e.response["Error"]["Code"] == CONDITIONAL_CHECK_FAILED:
                raise TaskNotFoundError() from e
            logger.error(
                "update_task_failed",
                extra={"task_id": task_id, "error_code": e.response["Error"]["Code"]},
            )
            raise

        attributes = response.get("Attributes")
        if not attributes:
            raise TaskNotFoundError()
        logger.info("Updated task status", extra={"task_id": task_id, "status": str(new_status)})
        return Task.model_validate(attributes)

    async def delete(self, email: str, task_id: str) -> Task:
        """Delete a task and return it as it was before deletion.

        Raises:
            TaskNotFoundError: If no task has this key
        """
        response = await asyncio.to_thread(
            self._table.delete_item,
            Key={"pk": task_id, "sk": email},
            ReturnValues="ALL_OLD",
        )
        attributes = response.get("Attributes")
        if not attributes:
            raise TaskNotFoundError()
        logger.info("Deleted task", extra={"task_id": task_id, "owner_email": email})
        return Task.model_validate(attributes)

    async def create_batch(self, tasks: list[Task]) -> list[Task]:
        """Insert up to 25 tasks unconditionally.

        Raises:
            BatchLimitExceededError: If more than 25 tasks are passed; nothing is written
        """
        if len(tasks) > Constants.BATCH_WRITE_LIMIT:
            raise BatchLimitExceededError(count=len(tasks))

        def _write() -> None:
            with self._table.batch_writer() as batch:
                for task in tasks:
                    batch.put_item(Item=task.to_item())

        await asyncio.to_thread(_write)
        logger.info("Created task batch", extra={"table": self.table_name, "count": len(tasks)})
        return tasks
