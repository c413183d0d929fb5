"""Mock mail sender for testing."""

from typing import Any

from user_register.providers.mail.base import MailSender


class MockMailSender(MailSender):
    """Records sent codes instead of delivering them.

    Attributes:
        sent: (email, code) pairs in send order.
        calls: Record of all method invocations for test assertions.
        error: When set, every send raises it and nothing is recorded in sent.
    """

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.sent: list[tuple[str, int]] = []
        self.calls: list[dict[str, Any]] = []

    async def send(self, email: str, code: int) -> None:
        self.calls.append({"method": "send", "email": email, "code": code})
        if self.error is not None:
            raise self.error
        self.sent.append((email, code))

    def last_code_for(self, email: str) -> int:
        """Return the most recent code sent to an address.

        Raises:
            LookupError: Nothing was sent to that address.
        """
        for recipient, code in reversed(self.sent):
            if recipient == email:
                return code
        raise LookupError(f"No code sent to {email}")
