"""Provider abstraction layer.

Exports:
    Error classes for provider error handling
    Capability interfaces and the Address value type
    Factory functions for provider instances
"""

from user_register.providers.address.base import Address, AddressResolver
from user_register.providers.errors import (
    AddressResolutionError,
    InvalidZipCodeError,
    ProviderError,
    TransientError,
    ZipCodeNotFoundError,
)
from user_register.providers.factory import get_address_resolver, get_mail_sender
from user_register.providers.mail.base import MailSender

__all__ = [
    # Types
    "Address",
    "AddressResolver",
    "MailSender",
    # Errors
    "ProviderError",
    "TransientError",
    "AddressResolutionError",
    "InvalidZipCodeError",
    "ZipCodeNotFoundError",
    # Factory
    "get_address_resolver",
    "get_mail_sender",
]
