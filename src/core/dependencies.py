"""Per-process dependency container.

AWS clients, repositories and services are built once per process and passed
explicitly into the services that use them. Each component is created on first
access, so a function only needs the environment variables for the resources
it actually touches.
"""

import logging
from functools import cached_property, lru_cache

import boto3

from src.core.config import Settings, settings
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


logger = logging.getLogger(__name__)


class Dependencies:
    """Lazily built clients, repositories and services for one process."""

    def __init__(self, app_settings: Settings) -> None:
        self._settings = app_settings

    @cached_property
    def session(self) -> boto3.session.Session:
        logger.info("Creating AWS session", extra={"region": self._settings.aws_region})
        return boto3.session.Session(region_name=self._settings.aws_region)

    @cached_property
    def _dynamodb(self):
        return self.session.resource("dynamodb")

    @cached_property
    def task_repository(self) -> TaskRepository:
        table_name = self._settings.require_setting("task_ddb", "Task table")
        return TaskRepository(self._dynamodb.Table(table_name))

    @cached_property
    def event_repository(self) -> EventRepository:
        table_name = self._settings.require_setting("event_ddb", "Event table")
        return EventRepository(self._dynamodb.Table(table_name))

    @cached_property
    def auth_service(self) -> AuthService:
        return AuthService(self.session.client("cognito-idp"))

    @cached_property
    def publisher(self) -> EventPublisher:
        topic_arn = self._settings.require_setting("sns_topic_arn", "Event topic")
        return EventPublisher(self.session.client("sns"), topic_arn)

    @cached_property
    def mail_sender(self) -> MailSender:
        return MailSender(
            self.session.client("ses"),
            source=self._settings.mail_source,
            reply_to=self._settings.mail_reply_to,
        )

    @cached_property
    def file_storage(self) -> FileStorage:
        return FileStorage(self.session.client("s3"), bucket=self._settings.bucket_name)

    @cached_property
    def task_service(self) -> TaskService:
        return TaskService(self.task_repository, self.publisher)

    @cached_property
    def batch_import_service(self) -> BatchImportService:
        return BatchImportService(self.task_repository, self.file_storage, self.publisher)

    @cached_property
    def event_recorder_service(self) -> EventRecorderService:
        return EventRecorderService(self.event_repository)

    @cached_property
    def notification_service(self) -> NotificationService:
        return NotificationService(self.mail_sender)


@lru_cache(maxsize=1)
def get_dependencies() -> Dependencies:
    """Get the process-wide dependency container (singleton pattern)."""
    return Dependencies(settings)
