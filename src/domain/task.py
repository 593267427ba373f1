"""Task domain models and enums."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class TaskStatus(StrEnum):
    """Task lifecycle status."""

    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    ABANDONED = "ABANDONED"


class CamelModel(BaseModel):
    """Base model whose wire and table field names are camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Person(CamelModel):
    """Name and email of a task owner, assigner or event creator."""

    name: str = Field(..., description="Display name")
    email: str = Field(..., min_length=1, description="Email address")


class Task(CamelModel):
    """Todo task as stored in the task table.

    ``sk`` and ``email`` always hold the owner's email; they are the sort key
    and the attribute used for per-owner lookups.
    """

    pk: str = Field(..., description="Unique task ID (TID-{millis}-{n})")
    sk: str = Field(..., description="Owner email, table sort key")
    email: str = Field(..., description="Owner email, used for per-owner queries")
    title: str = Field(..., description="Task title")
    description: str = Field(default="", description="Detailed task description")
    task_status: TaskStatus = Field(default=TaskStatus.PENDING, description="Current status")
    archived: bool = Field(default=False, description="Set once the status changes")
    created_at: int = Field(..., description="Creation time (epoch millis)")
    owner: Person = Field(..., description="Task owner")
    assigned_by: Person = Field(..., description="Who assigned the task")

    @model_validator(mode="after")
    def validate_owner_keys(self) -> "Task":
        """Ensure the key attributes match the owner's email."""
        if not (self.sk == self.email == self.owner.email):
            msg = "Task sk and email must equal owner.email"
            raise ValueError(msg)
        return self

    def to_item(self) -> dict:
        """Serialize to a table item (camelCase attribute names)."""
        return self.model_dump(mode="json", by_alias=True)


class TaskCreateRequest(CamelModel):
    """Body of POST /tasks."""

    title: str = Field(..., min_length=1, description="Task title")
    description: str = Field(default="", description="Detailed task description")
    owner: Person = Field(..., description="Task owner")
    assigned_by: Person = Field(..., description="Who assigned the task")


class TaskStatusUpdate(CamelModel):
    """Body of PUT /tasks/{email}/{id}."""

    new_status: TaskStatus = Field(..., description="Status to move the task to")
