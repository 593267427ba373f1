"""Table repositories."""

from src.repositories.event_repository import EventRepository
from src.repositories.task_repository import TaskRepository


__all__ = [
    "EventRepository",
    "TaskRepository",
]
