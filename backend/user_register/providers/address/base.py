"""Abstract base class and types for address resolution."""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class Address:
    """Postal address attached to an account.

    Attributes:
        street: Street name.
        neighborhood: Neighborhood / district.
        number: House number (not provided by postal lookups, empty by default).
        city: City name.
        state: State abbreviation.
        zip_code: Zip code as returned by the provider.
    """

    street: str = ""
    neighborhood: str = ""
    number: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""

    def to_dict(self) -> dict[str, str]:
        """Serialize for JSON storage."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "Address":
        """Build from a stored JSON object, ignoring unknown keys.

        Args:
            data: Stored address mapping (may be None or partial).

        Returns:
            Address with missing fields left empty.
        """
        if not data:
            return cls()
        return cls(
            street=str(data.get("street", "")),
            neighborhood=str(data.get("neighborhood", "")),
            number=str(data.get("number", "")),
            city=str(data.get("city", "")),
            state=str(data.get("state", "")),
            zip_code=str(data.get("zip_code", "")),
        )


class AddressResolver(ABC):
    """Resolves a zip code into a postal address."""

    @abstractmethod
    async def resolve(self, zip_code: str) -> Address:
        """Look up the address for a zip code.

        Args:
            zip_code: Eight-digit zip code.

        Returns:
            Resolved Address.

        Raises:
            InvalidZipCodeError: Provider rejected the zip code format.
            ZipCodeNotFoundError: Zip code is unknown.
            ProviderError: Lookup could not be completed.
        """
        ...
