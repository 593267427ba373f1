"""Outbound mail message derived from a task event."""

from pydantic import BaseModel, Field

from src.domain.event import TodoTaskEvent


class MailMessage(BaseModel):
    """Email sent to a task owner for one event. Never persisted."""

    message_id: str = Field(..., description="Queue message ID the mail was built from")
    to: str = Field(..., description="Recipient address (task owner)")
    subject: str = Field(..., description="Subject line without the outbound prefix")
    tasks: str = Field(..., description="Task id or comma-joined task ids")
    created_by: str = Field(..., description="Email of whoever triggered the event")
    body: str = Field(..., description="Plain-text body")

    @classmethod
    def from_event(cls, event: TodoTaskEvent, *, message_id: str) -> "MailMessage":
        """Render the notification for an event."""
        body = (
            f"Operation: {event.action_type}\n"
            f"Your tasks: {event.task_id} - {event.title}\n"
            f"Created by: {event.created_by.email}\n"
        )
        return cls(
            message_id=message_id,
            to=event.owner.email,
            subject=f"{event.event_type} - {event.action_type}",
            tasks=event.task_id,
            created_by=event.created_by.email,
            body=body,
        )
