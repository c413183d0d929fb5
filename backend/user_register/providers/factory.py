"""Provider factory functions.

Singleton pattern for provider instances. Tests inject mocks by assigning
the module globals and call ``reset_providers()`` afterwards.
"""

from user_register.core.config import Settings, settings
from user_register.providers.address.base import AddressResolver
from user_register.providers.address.viacep_adapter import ViaCepAddressResolver
from user_register.providers.mail.base import MailSender
from user_register.providers.mail.console_adapter import ConsoleMailSender
from user_register.providers.mail.resend_adapter import ResendMailSender

_address_resolver: AddressResolver | None = None
_mail_sender: MailSender | None = None


def get_address_resolver(config: Settings | None = None) -> AddressResolver:
    """Get or create the address resolver singleton.

    Args:
        config: Optional settings. Defaults to the application settings.

    Returns:
        AddressResolver instance.
    """
    global _address_resolver

    if _address_resolver is None:
        config = config or settings
        _address_resolver = ViaCepAddressResolver(
            config.viacep_base_url,
            timeout=config.outbound_timeout_seconds,
        )

    return _address_resolver


def get_mail_sender(config: Settings | None = None) -> MailSender:
    """Get or create the mail sender singleton.

    Args:
        config: Optional settings. Defaults to the application settings.

    Returns:
        MailSender instance.

    Raises:
        ValueError: If the configured sender is unknown.
    """
    global _mail_sender

    if _mail_sender is None:
        config = config or settings

        if config.mail_sender == "console":
            _mail_sender = ConsoleMailSender()
        elif config.mail_sender == "resend":
            _mail_sender = ResendMailSender(
                api_key=config.resend_api_key,
                from_address=config.email_from,
                ttl_minutes=config.mail_validation_ttl_minutes,
                timeout=config.outbound_timeout_seconds,
            )
        else:
            raise ValueError(f"Unknown mail sender: {config.mail_sender}")

    return _mail_sender


def reset_providers() -> None:
    """Reset provider singletons.

    Used in tests to ensure isolation between test cases.
    """
    global _address_resolver, _mail_sender
    _address_resolver = None
    _mail_sender = None
