"""Pytest configuration and fixtures for unit tests."""

import pytest

from src.interface.file_storage import FileStorage
from src.interface.mail_sender import MailSender
from src.repositories.event_repository import EventRepository
from src.repositories.task_repository import TaskRepository
from src.services.auth_service import AuthService
from src.services.batch_import_service import BatchImportService
from src.services.event_publisher import EventPublisher
from src.services.event_recorder_service import EventRecorderService
from src.services.notification_service import NotificationService
from src.services.task_service import TaskService
from tests.unit.mocks import (
    InMemoryCognitoClient,
    InMemoryS3Client,
    InMemorySesClient,
    InMemorySnsClient,
    InMemoryTable,
)


TOPIC_ARN = "arn:aws:sns:us-east-1:123456789012:task-events"
IMPORT_BUCKET = "task-imports-test"


@pytest.fixture
def task_table():
    """Provides a fresh in-memory task table for each test."""
    return InMemoryTable("tasks")


@pytest.fixture
def event_table():
    """Provides a fresh in-memory event table for each test."""
    return InMemoryTable("events")


@pytest.fixture
def sns_client():
    return InMemorySnsClient()


@pytest.fixture
def s3_client():
    return InMemoryS3Client()


@pytest.fixture
def ses_client():
    return InMemorySesClient()


@pytest.fixture
def task_repository(task_table):
    return TaskRepository(task_table)


@pytest.fixture
def event_repository(event_table):
    return EventRepository(event_table)


@pytest.fixture
def publisher(sns_client):
    return EventPublisher(sns_client, TOPIC_ARN)


@pytest.fixture
def file_storage(s3_client):
    return FileStorage(s3_client, bucket=IMPORT_BUCKET)


@pytest.fixture
def mail_sender(ses_client):
    return MailSender(ses_client, source="tasks@example.com")


@pytest.fixture
def task_service(task_repository, publisher):
    return TaskService(task_repository, publisher)


@pytest.fixture
def batch_import_service(task_repository, file_storage, publisher):
    return BatchImportService(task_repository, file_storage, publisher)


@pytest.fixture
def event_recorder_service(event_repository):
    return EventRecorderService(event_repository)


@pytest.fixture
def notification_service(mail_sender):
    return NotificationService(mail_sender)


@pytest.fixture
def cognito_client():
    """Cognito pool with one regular user."""
    return InMemoryCognitoClient(
        {("us-east-1_Pool1", "alice"): {"email": "alice@example.com", "email_verified": "true"}},
    )


@pytest.fixture
def auth_service(cognito_client):
    return AuthService(cognito_client)
