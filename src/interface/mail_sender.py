"""Outbound email through Amazon SES."""

import asyncio
import logging
from typing import Any

from src.core.config import Constants
from src.domain.mail import MailMessage


logger = logging.getLogger(__name__)


class MailSender:
    """Sends plain-text task notifications with SES.

    Failures are not caught: a rejected send fails the queue batch so the
    messages are redelivered.
    """

    def __init__(self, ses_client: Any, *, source: str, reply_to: str | None = None) -> None:
        self._ses = ses_client
        self._source = source
        self._reply_to = reply_to or source

    async def send(self, mail: MailMessage) -> str:
        """Send one message and return the SES message ID."""
        response = await asyncio.to_thread(
            self._ses.send_email,
            Destination={"ToAddresses": [mail.to]},
            Message={
                "Subject": {
                    "Charset": Constants.MAIL_CHARSET,
                    "Data": f"{Constants.MAIL_SUBJECT_PREFIX} {mail.subject}",
                },
                "Body": {
                    "Text": {
                        "Charset": Constants.MAIL_CHARSET,
                        "Data": mail.body,
                    },
                },
            },
            Source=self._source,
            ReplyToAddresses=[self._reply_to],
        )
        logger.info("Sent task notification to %s (tasks: %s)", mail.to, mail.tasks)
        return response["MessageId"]
