"""Notification service for emailing task owners about task events."""

import asyncio
import logging

from src.core.logging import span
from src.domain.event import SnsEnvelope
from src.domain.mail import MailMessage
from src.interface.lambda_context import QueueMessage
from src.interface.mail_sender import MailSender


logger = logging.getLogger(__name__)


class NotificationService:
    """Sends one email per queued task event."""

    def __init__(self, mail_sender: MailSender) -> None:
        self._sender = mail_sender

    @staticmethod
    def build_mail(message: QueueMessage) -> MailMessage:
        """Unwrap a queued event and render its email.

        Raises:
            EnvelopeValidationError: If the envelope or its event content is malformed
        """
        event = SnsEnvelope.from_json(message.sns_message).unwrap()
        return MailMessage.from_event(event, message_id=message.message_id)

    async def notify(self, messages: list[QueueMessage]) -> list[str]:
        """Send all emails of a queue batch concurrently.

        Every message is parsed before any email goes out. A failed send does
        not cancel the others; its error propagates and fails the batch back
        to the queue.

        Args:
            messages: Unwrapped queue records

        Returns:
            SES message IDs, in input order
        """
        with span("notification_service.notify"):
            mails = [self.build_mail(message) for message in messages]
            logger.info("Sending %d task notifications", len(mails))
            return list(await asyncio.gather(*(self._sender.send(mail) for mail in mails)))
