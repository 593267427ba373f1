from src.services.auth_service import AuthService, Caller
from src.services.batch_import_service import BatchImportService, consolidate_events
from src.services.event_publisher import EventPublisher
from src.services.event_recorder_service import EventRecorderService
from src.services.notification_service import NotificationService
from src.services.task_service import TaskService


__all__ = [
    "AuthService",
    "BatchImportService",
    "Caller",
    "EventPublisher",
    "EventRecorderService",
    "NotificationService",
    "TaskService",
    "consolidate_events",
]
