"""Mail verification engine.

Issues one-time numeric codes, delivers them by email, and validates them.

Per email a code moves through: absent -> active -> expired -> absent.
A request while a code is active is refused; a request after expiry issues
a fresh code. A successful validation consumes the code.
"""

import logging
import secrets
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Protocol

from user_register.providers.errors import ProviderError
from user_register.providers.mail.base import MailSender
from user_register.services.errors import (
    CodeAlreadySentError,
    CodeExpiredError,
    InvalidCodeError,
    MailDeliveryError,
    VerificationCodeNotFoundError,
)
from user_register.services.session_tokens import utc_now

logger = logging.getLogger(__name__)

# Codes are drawn from [0, CODE_UPPER_BOUND)
CODE_UPPER_BOUND = 999999


class StoredCode(Protocol):
    """A persisted verification code."""

    email: str
    code: int
    expires_at: datetime


class VerificationCodeStore(Protocol):
    """Persistence the engine needs for verification codes."""

    async def upsert(self, email: str, code: int, expires_at: datetime) -> None:
        """Insert the code, replacing any existing row for the email."""
        ...

    async def get_by_email(self, email: str) -> StoredCode | None:
        """Fetch the row for an email, expired or not."""
        ...

    async def delete_if_matches(self, email: str, code: int, now: datetime) -> bool:
        """Delete the row when code matches and it is unexpired at ``now``."""
        ...

    async def delete_expired(self, now: datetime) -> int:
        """Delete every row that expired before ``now``; return the count."""
        ...


def generate_code() -> int:
    """Draw a code uniformly from [0, 999998] using a CSPRNG."""
    return secrets.randbelow(CODE_UPPER_BOUND)


class MailVerificationEngine:
    """Issues, delivers and validates one-time verification codes.

    Args:
        codes: Verification code store.
        sender: Delivers the code to the email address.
        ttl: Lifetime of an issued code.
        clock: Returns the current aware UTC time.
        code_generator: Source of new codes (overridable in tests).
    """

    def __init__(
        self,
        *,
        codes: VerificationCodeStore,
        sender: MailSender,
        ttl: timedelta,
        clock: Callable[[], datetime] = utc_now,
        code_generator: Callable[[], int] = generate_code,
    ) -> None:
        self._codes = codes
        self._sender = sender
        self._ttl = ttl
        self._clock = clock
        self._code_generator = code_generator

    async def request_code(self, email: str) -> None:
        """Issue and deliver a code unless one is already active.

        The code is sent before it is stored, so a delivery failure leaves
        the previous state untouched.

        Args:
            email: Address to deliver the code to.

        Raises:
            CodeAlreadySentError: An unexpired code exists for the email.
            MailDeliveryError: The mail sender failed.
            StoreError: The store failed.
        """
        now = self._clock()
        existing = await self._codes.get_by_email(email)
        if existing is not None and now <= existing.expires_at:
            raise CodeAlreadySentError(email)

        code = self._code_generator()
        try:
            await self._sender.send(email, code)
        except ProviderError as exc:
            raise MailDeliveryError(f"failed to deliver verification code: {exc}") from exc

        await self._codes.upsert(email, code, now + self._ttl)
        logger.info("Verification code issued (replaced_expired=%s)", existing is not None)

    async def validate_code(self, email: str, code: int) -> None:
        """Check a presented code and consume it on success.

        The code comparison happens before the expiry check, so a wrong code
        is reported as invalid even when the stored one has expired.

        Raises:
            VerificationCodeNotFoundError: No code on record, or a concurrent
                validation consumed it first.
            InvalidCodeError: The code does not match.
            CodeExpiredError: The code matches but has expired.
            StoreError: The store failed.
        """
        now = self._clock()
        stored = await self._codes.get_by_email(email)
        if stored is None:
            raise VerificationCodeNotFoundError(email)
        if stored.code != code:
            raise InvalidCodeError(email)
        if now > stored.expires_at:
            raise CodeExpiredError(email)

        consumed = await self._codes.delete_if_matches(email, code, now)
        if not consumed:
            raise VerificationCodeNotFoundError(email)

    async def purge_expired(self) -> int:
        """Delete every expired code.

        Returns:
            Number of rows removed.
        """
        removed = await self._codes.delete_expired(self._clock())
        if removed:
            logger.info("Purged %d expired verification codes", removed)
        return removed
