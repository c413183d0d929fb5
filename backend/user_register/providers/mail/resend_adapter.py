"""Email delivery via the Resend API.

Simple HTTP POST to Resend with a plain-text body carrying the
password-recovery code. Unlike fire-and-forget notifications, failures are
raised: the verification engine must not record a code that was never sent.
"""

import httpx
import structlog
from pydantic import SecretStr

from user_register.providers.errors import ProviderError, TransientError
from user_register.providers.mail.base import MailSender, format_code

logger = structlog.get_logger()

RESEND_API_URL = "https://api.resend.com/emails"


class ResendMailSender(MailSender):
    """Sends verification codes through Resend."""

    def __init__(
        self,
        *,
        api_key: SecretStr,
        from_address: str,
        ttl_minutes: int,
        timeout: float,
        api_url: str = RESEND_API_URL,
    ) -> None:
        """Initialize Resend adapter.

        Args:
            api_key: Resend API key.
            from_address: Sender address.
            ttl_minutes: Code lifetime, quoted in the email body.
            timeout: Upper bound in seconds for the request.
            api_url: Resend endpoint (overridable for tests).
        """
        self._api_key = api_key
        self._from_address = from_address
        self._ttl_minutes = ttl_minutes
        self._timeout = timeout
        self._api_url = api_url

    async def send(self, email: str, code: int) -> None:
        """Send the code by email.

        Args:
            email: Recipient address.
            code: Numeric verification code.

        Raises:
            TransientError: Network failure, timeout or 5xx from Resend.
            ProviderError: Resend rejected the message.
        """
        try:
            async with httpx.AsyncClient() as client:
                resp = await client.post(
                    self._api_url,
                    headers={
                        "Authorization": f"Bearer {self._api_key.get_secret_value()}",
                    },
                    json={
                        "from": self._from_address,
                        "to": email,
                        "subject": "Your password recovery code",
                        "text": (
                            f"Your password recovery code is {format_code(code)}.\n\n"
                            f"It expires in {self._ttl_minutes} minutes. "
                            "If you didn't request this, you can safely ignore this email."
                        ),
                    },
                    timeout=self._timeout,
                )
        except httpx.HTTPError as e:
            logger.error(
                "mail_delivery_failed",
                provider="resend",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise TransientError(f"Resend request failed: {e}") from e

        if resp.status_code >= 500:
            raise TransientError(f"Resend returned {resp.status_code}")
        if resp.is_error:
            logger.error(
                "mail_delivery_rejected",
                provider="resend",
                status_code=resp.status_code,
            )
            raise ProviderError(f"Resend rejected the message ({resp.status_code})")

        logger.info("mail_delivery_complete", provider="resend")
