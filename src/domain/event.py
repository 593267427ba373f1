"""Task event models: domain event, transport envelope and audit record."""

from enum import StrEnum

from pydantic import ConfigDict, Field, ValidationError

from src.core.config import Constants
from src.core.errors import EnvelopeValidationError
from src.domain.task import CamelModel, Person, Task


class EventType(StrEnum):
    """Whether an event comes from a single request or a batch import."""

    BATCH_TASK = "BATCH_TASK"
    SINGLE_TASK = "SINGLE_TASK"


class ActionType(StrEnum):
    """Mutation the event describes."""

    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class TodoTaskEvent(CamelModel):
    """Domain event describing a task mutation.

    ``task_id`` and ``title`` hold a single value, or comma-joined lists once
    events for the same owner have been consolidated.
    """

    model_config = ConfigDict(frozen=True)

    event_type: EventType
    action_type: ActionType
    task_id: str = Field(..., min_length=1)
    title: str
    owner: Person
    created_by: Person

    @classmethod
    def from_task(
        cls,
        task: Task,
        *,
        event_type: EventType,
        action_type: ActionType,
        created_by: Person | None = None,
    ) -> "TodoTaskEvent":
        """Build the event for a task mutation; the creator defaults to the assigner."""
        return cls(
            event_type=event_type,
            action_type=action_type,
            task_id=task.pk,
            title=task.title,
            owner=task.owner,
            created_by=created_by or task.assigned_by,
        )

    @property
    def task_ids(self) -> list[str]:
        """Individual task ids carried by this event."""
        return self.task_id.split(",")

    def to_json(self) -> str:
        """Serialize to the JSON text carried in an envelope."""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, raw: str) -> "TodoTaskEvent":
        """Parse envelope content, raising EnvelopeValidationError on shape mismatch."""
        try:
            return cls.model_validate_json(raw)
        except ValidationError as e:
            msg = f"Invalid task event content: {e}"
            raise EnvelopeValidationError(msg) from e


class SnsEnvelope(CamelModel):
    """Transport wrapper published to the event topic."""

    request_id: str
    request_lambda_id: str
    origin: str
    date: int
    content: str

    @classmethod
    def wrap(
        cls,
        event: TodoTaskEvent,
        *,
        request_id: str,
        request_lambda_id: str,
        origin: str,
        date: int,
    ) -> "SnsEnvelope":
        """Wrap a domain event with invocation metadata."""
        return cls(
            request_id=request_id,
            request_lambda_id=request_lambda_id,
            origin=origin,
            date=date,
            content=event.to_json(),
        )

    def to_json(self) -> str:
        """Serialize to the message body published to the topic."""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, raw: str) -> "SnsEnvelope":
        """Parse a topic message, raising EnvelopeValidationError on shape mismatch."""
        try:
            return cls.model_validate_json(raw)
        except ValidationError as e:
            msg = f"Invalid envelope: {e}"
            raise EnvelopeValidationError(msg) from e

    def unwrap(self) -> TodoTaskEvent:
        """Parse the contained domain event."""
        return TodoTaskEvent.from_json(self.content)


class EventRecord(CamelModel):
    """Audit row written to the event table; expires via ``ttl`` (epoch seconds)."""

    pk: str
    sk: str
    event_type: EventType
    action_type: ActionType
    task_id: str
    created_at: int
    ttl: int
    owner: Person
    created_by: Person

    @classmethod
    def from_event(cls, event: TodoTaskEvent, *, timestamp: int) -> "EventRecord":
        """Build the audit row for an event received at ``timestamp`` (epoch millis)."""
        return cls(
            pk=f"#EVENT_{timestamp}",
            sk=f"#{timestamp}_{event.created_by.email}",
            event_type=event.event_type,
            action_type=event.action_type,
            task_id=event.task_id,
            created_at=timestamp,
            ttl=timestamp // 1000 + Constants.EVENT_TTL_SECONDS,
            owner=event.owner,
            created_by=event.created_by,
        )

    def to_item(self) -> dict:
        """Serialize to a table item (camelCase attribute names)."""
        return self.model_dump(mode="json", by_alias=True)
