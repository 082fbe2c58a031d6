"""
SMTP notifier adapter - Implements Notifier protocol over SMTP.

Delivery failures (connection refused, rejected recipient, timeout)
propagate as smtplib.SMTPException or OSError; the domain turns them
into NotificationFailed.
"""

import logging
import smtplib
from email.message import EmailMessage

logger = logging.getLogger(__name__)


class SmtpNotifier:
    """
    Implements Notifier protocol via an SMTP relay.

    Opens one connection per message; the notifier holds no state
    between calls and is safe to share between threads.
    """

    def __init__(self, host: str, port: int, sender: str, timeout: float = 10.0) -> None:
        self._host = host
        self._port = port
        self._sender = sender
        self._timeout = timeout

    def send(self, address: str, subject: str, body: str) -> None:
        message = EmailMessage()
        message["From"] = self._sender
        message["To"] = address
        message["Subject"] = subject
        message.set_content(body)

        with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as smtp:
            smtp.send_message(message)

        logger.info("Sent '%s' to %s via %s:%d", subject, address, self._host, self._port)
