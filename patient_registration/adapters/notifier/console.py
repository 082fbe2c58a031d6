"""
Console notifier adapter - Implements Notifier protocol.

This module provides a console-based implementation of the domain's
notifier port, logging messages to stdout for demo purposes.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleNotifier:
    """
    Implements Notifier protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - prints messages (and so pincodes) to stdout.
    """

    def send(self, address: str, subject: str, body: str) -> None:
        """
        Log the message to console (simulates email delivery).

        The message is logged at INFO level to be visible in docker-compose logs.

        Args:
            address: Recipient email address
            subject: Message subject
            body: Message body
        """
        logger.info("[NOTIFICATION] To: %s Subject: %s Body: %s", address, subject, body)
