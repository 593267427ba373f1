"""Pytest configuration and shared fixtures."""

import os

import pytest


# Settings are read at import time; keep tests independent of any local .env
os.environ.setdefault("TASK_DDB", "tasks-test")
os.environ.setdefault("EVENT_DDB", "events-test")
os.environ.setdefault("SNS_TOPIC_ARN", "arn:aws:sns:us-east-1:123456789012:task-events")
os.environ.setdefault("BUCKET_NAME", "task-imports-test")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")

from src.domain.event import ActionType, EventType, TodoTaskEvent  # noqa: E402
from src.domain.task import Person, TaskCreateRequest  # noqa: E402
from src.interface.lambda_context import Invocation  # noqa: E402
from src.services.auth_service import Caller  # noqa: E402


@pytest.fixture
def invocation() -> Invocation:
    """Invocation metadata stamped on published envelopes."""
    return Invocation(request_id="req-123", lambda_request_id="lambda-456", function_name="TaskFunction")


@pytest.fixture
def alice() -> Person:
    return Person(name="Alice", email="alice@example.com")


@pytest.fixture
def bob() -> Person:
    return Person(name="Bob", email="bob@example.com")


@pytest.fixture
def alice_caller(alice: Person) -> Caller:
    return Caller(email=alice.email, is_admin=False)


@pytest.fixture
def admin_caller() -> Caller:
    return Caller(email="admin@example.com", is_admin=True)


@pytest.fixture
def task_request(alice: Person, bob: Person) -> TaskCreateRequest:
    """Draft of a task owned by Alice, assigned by Bob."""
    return TaskCreateRequest(title="Buy milk", description="Two litres", owner=alice, assigned_by=bob)


@pytest.fixture
def make_event(bob: Person):
    """Factory for BATCH_TASK/INSERT events."""

    def _make(task_id: str, title: str, owner: Person) -> TodoTaskEvent:
        return TodoTaskEvent(
            event_type=EventType.BATCH_TASK,
            action_type=ActionType.INSERT,
            task_id=task_id,
            title=title,
            owner=owner,
            created_by=bob,
        )

    return _make
