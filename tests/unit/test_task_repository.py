"""Tests for the DynamoDB task repository."""

import pytest

from src.core.errors import BatchLimitExceededError, TaskNotFoundError
from src.domain.task import TaskStatus
from src.repositories.task_repository import TaskRepository
from src.services.task_service import build_task
from tests.unit.mocks import InMemoryTable


@pytest.fixture
def make_task(task_request):
    """Factory for tasks with distinct ids."""
    counter = iter(range(1_000_000))

    def _make(**overrides):
        task = build_task(task_request)
        return task.model_copy(update={"pk": f"TID-1-{next(counter)}", **overrides})

    return _make


@pytest.mark.unit
class TestTaskRepositoryReads:
    """Scan and get operations."""

    @pytest.mark.asyncio
    async def test_get_all_returns_every_task(self, task_repository, make_task):
        await task_repository.create(make_task())
        await task_repository.create(make_task())

        tasks = await task_repository.get_all()

        assert len(tasks) == 2

    @pytest.mark.asyncio
    async def test_get_all_follows_pagination(self, make_task):
        table = InMemoryTable("tasks", page_size=2)
        repository = TaskRepository(table)
        for _ in range(5):
            await repository.create(make_task())

        tasks = await repository.get_all()

        assert len(tasks) == 5
        assert table.scan_calls == 3

    @pytest.mark.asyncio
    async def test_get_by_email_filters_owner(self, task_repository, task_request, bob):
        await task_repository.create(build_task(task_request))
        bob_request = task_request.model_copy(update={"owner": bob})
        await task_repository.create(build_task(bob_request))

        tasks = await task_repository.get_by_email("alice@example.com")

        assert [task.email for task in tasks] == ["alice@example.com"]

    @pytest.mark.asyncio
    async def test_get_by_id_and_email(self, task_repository, make_task):
        created = await task_repository.create(make_task())

        fetched = await task_repository.get_by_id_and_email(created.email, created.pk)

        assert fetched == created

    @pytest.mark.asyncio
    async def test_get_by_id_and_email_not_found(self, task_repository):
        with pytest.raises(TaskNotFoundError, match="Task not found"):
            await task_repository.get_by_id_and_email("alice@example.com", "TID-missing")

    @pytest.mark.asyncio
    async def test_get_by_id_requires_matching_owner(self, task_repository, make_task):
        created = await task_repository.create(make_task())

        with pytest.raises(TaskNotFoundError):
            await task_repository.get_by_id_and_email("bob@example.com", created.pk)


@pytest.mark.unit
class TestTaskRepositoryMutations:
    """Create, update, delete and batch operations."""

    @pytest.mark.asyncio
    async def test_create_stores_camel_case_item(self, task_repository, task_table, make_task):
        await task_repository.create(make_task())

        item = task_table.items[0]
        assert item["taskStatus"] == "PENDING"
        assert item["assignedBy"] == {"name": "Bob", "email": "bob@example.com"}
        assert item["sk"] == item["email"] == "alice@example.com"

    @pytest.mark.asyncio
    async def test_update_sets_status_and_archives(self, task_repository, make_task):
        created = await task_repository.create(make_task())

        updated = await task_repository.update(created.email, created.pk, TaskStatus.COMPLETED)

        assert updated.task_status == TaskStatus.COMPLETED
        assert updated.archived is True
        assert updated.title == created.title

    @pytest.mark.asyncio
    async def test_update_missing_task_leaves_store_untouched(self, task_repository, task_table, make_task):
        await task_repository.create(make_task())
        before = task_table.items

        with pytest.raises(TaskNotFoundError):
            await task_repository.update("alice@example.com", "TID-missing", TaskStatus.ABANDONED)

        assert task_table.items == before

    @pytest.mark.asyncio
    async def test_delete_returns_previous_record(self, task_repository, task_table, make_task):
        created = await task_repository.create(make_task())

        deleted = await task_repository.delete(created.email, created.pk)

        assert deleted == created
        assert task_table.items == []

    @pytest.mark.asyncio
    async def test_delete_twice_fails_not_found(self, task_repository, make_task):
        created = await task_repository.create(make_task())
        await task_repository.delete(created.email, created.pk)

        with pytest.raises(TaskNotFoundError):
            await task_repository.delete(created.email, created.pk)

    @pytest.mark.asyncio
    async def test_create_batch_writes_all_in_one_batch(self, task_repository, task_table, make_task):
        tasks = [make_task() for _ in range(25)]

        created = await task_repository.create_batch(tasks)

        assert created == tasks
        assert len(task_table.batch_writes) == 1
        assert len(task_table.items) == 25

    @pytest.mark.asyncio
    async def test_create_batch_over_limit_writes_nothing(self, task_repository, task_table, make_task):
        tasks = [make_task() for _ in range(26)]

        with pytest.raises(BatchLimitExceededError) as exc_info:
            await task_repository.create_batch(tasks)

        assert exc_info.value.count == 26
        assert task_table.batch_writes == []
        assert task_table.items == []
