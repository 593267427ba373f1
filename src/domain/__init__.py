"""Domain models and DTOs."""

from src.domain.event import ActionType, EventRecord, EventType, SnsEnvelope, TodoTaskEvent
from src.domain.mail import MailMessage
from src.domain.task import Person, Task, TaskCreateRequest, TaskStatus, TaskStatusUpdate


__all__ = [
    "ActionType",
    "EventRecord",
    "EventType",
    "MailMessage",
    "Person",
    "SnsEnvelope",
    "Task",
    "TaskCreateRequest",
    "TaskStatus",
    "TaskStatusUpdate",
    "TodoTaskEvent",
]
