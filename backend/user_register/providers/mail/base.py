"""Abstract base class for verification-code delivery."""

from abc import ABC, abstractmethod

# Codes live in [0, 999998]; they are always shown with six digits.
CODE_DIGITS = 6


def format_code(code: int) -> str:
    """Render a numeric code as the six-digit string the user types back.

    Args:
        code: Numeric verification code.

    Returns:
        Zero-padded code, e.g. 42 -> "000042".
    """
    return f"{code:0{CODE_DIGITS}d}"


class MailSender(ABC):
    """Delivers a verification code to an email address."""

    @abstractmethod
    async def send(self, email: str, code: int) -> None:
        """Deliver the code.

        Must only return once the provider accepted the message.

        Args:
            email: Recipient address.
            code: Numeric verification code.

        Raises:
            ProviderError: Delivery could not be completed.
        """
        ...
