"""Mock address resolver for testing."""

from typing import Any

from user_register.providers.address.base import Address, AddressResolver


class MockAddressResolver(AddressResolver):
    """Resolver returning canned answers keyed by zip code.

    Unknown zip codes resolve to ``default`` when one is given; otherwise
    they raise the configured ``error``.

    Attributes:
        calls: Record of all method invocations for test assertions.
    """

    def __init__(
        self,
        addresses: dict[str, Address] | None = None,
        *,
        default: Address | None = None,
        error: Exception | None = None,
    ) -> None:
        self.addresses = dict(addresses or {})
        self.default = default
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def resolve(self, zip_code: str) -> Address:
        """Return the canned address or raise the configured error."""
        self.calls.append({"method": "resolve", "zip_code": zip_code})

        if zip_code in self.addresses:
            return self.addresses[zip_code]
        if self.error is not None:
            raise self.error
        if self.default is not None:
            return self.default
        return Address(zip_code=zip_code)
