"""Console mail sender for local development.

Writes the code to the application log instead of sending an email. Never
enable outside development: the code is a password-reset credential.
"""

import logging

from user_register.providers.mail.base import MailSender, format_code

logger = logging.getLogger(__name__)


class ConsoleMailSender(MailSender):
    """Logs verification codes instead of delivering them."""

    async def send(self, email: str, code: int) -> None:
        logger.warning(
            "Verification code for %s: %s (console mail sender)",
            email,
            format_code(code),
        )
