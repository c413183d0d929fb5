"""Address resolution providers."""

from user_register.providers.address.base import Address, AddressResolver

__all__ = ["Address", "AddressResolver"]
