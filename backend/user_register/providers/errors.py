"""Provider error taxonomy.

Error classes for the outbound capability adapters (address lookup, mail
delivery). Transport-level failures are ``ProviderError``s; answers the
upstream gave about the input itself are ``AddressResolutionError``s.
"""

__all__ = [
    "ProviderError",
    "TransientError",
    "AddressResolutionError",
    "InvalidZipCodeError",
    "ZipCodeNotFoundError",
]


class ProviderError(Exception):
    """Base class for upstream transport and protocol failures.

    Raised when the provider could not produce an answer at all: network
    error, timeout, unexpected status code, unparseable body.
    """

    pass


class TransientError(ProviderError):
    """Network blip, timeout or 5xx from the provider. Retry is reasonable."""

    pass


class AddressResolutionError(Exception):
    """Base class for address lookups the provider answered negatively.

    Attributes:
        zip_code: The zip code that was looked up.
    """

    def __init__(self, message: str, zip_code: str):
        """Initialize AddressResolutionError.

        Args:
            message: Error description.
            zip_code: The zip code that was looked up.
        """
        super().__init__(message)
        self.zip_code = zip_code


class InvalidZipCodeError(AddressResolutionError):
    """The zip code is malformed according to the provider."""

    def __init__(self, zip_code: str):
        super().__init__("invalid zip code", zip_code)


class ZipCodeNotFoundError(AddressResolutionError):
    """The zip code is well formed but unknown to the provider."""

    def __init__(self, zip_code: str):
        super().__init__("zip code not found", zip_code)
