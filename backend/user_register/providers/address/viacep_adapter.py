"""ViaCEP address adapter.

Resolves Brazilian zip codes (CEP) through the public ViaCEP JSON API:
``GET {base_url}/{zip_code}/json``.

Response handling:
- 200 with ``"erro": true`` (bool or string): zip code not found
- 200 otherwise: address fields (logradouro, bairro, localidade, uf, cep)
- 400: zip code format rejected
- anything else, timeouts, bad JSON: ProviderError
"""

import time

import httpx
import structlog

from user_register.providers.address.base import Address, AddressResolver
from user_register.providers.errors import (
    InvalidZipCodeError,
    ProviderError,
    TransientError,
    ZipCodeNotFoundError,
)

logger = structlog.get_logger()


class ViaCepAddressResolver(AddressResolver):
    """Address resolver backed by viacep.com.br."""

    def __init__(self, base_url: str, *, timeout: float) -> None:
        """Initialize ViaCEP adapter.

        Args:
            base_url: API root, e.g. ``https://viacep.com.br/ws``.
            timeout: Upper bound in seconds for the whole request.
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    async def resolve(self, zip_code: str) -> Address:
        """Look up the address for a zip code.

        Args:
            zip_code: Eight-digit zip code.

        Returns:
            Resolved Address (number is always empty, ViaCEP does not know it).

        Raises:
            InvalidZipCodeError: ViaCEP answered 400.
            ZipCodeNotFoundError: ViaCEP flagged the zip code as unknown.
            TransientError: Network failure, timeout or 5xx.
            ProviderError: Any other unexpected answer.
        """
        url = f"{self._base_url}/{zip_code}/json"
        start_time = time.monotonic()

        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(url, timeout=self._timeout)
        except httpx.HTTPError as e:
            logger.error(
                "address_lookup_failed",
                provider="viacep",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise TransientError(f"ViaCEP request failed: {e}") from e

        latency_ms = (time.monotonic() - start_time) * 1000
        logger.info(
            "address_lookup_complete",
            provider="viacep",
            status_code=response.status_code,
            latency_ms=round(latency_ms, 1),
        )

        if response.status_code == httpx.codes.BAD_REQUEST:
            raise InvalidZipCodeError(zip_code)
        if response.status_code >= 500:
            raise TransientError(f"ViaCEP returned {response.status_code}")
        if response.status_code != httpx.codes.OK:
            raise ProviderError(f"ViaCEP returned {response.status_code}")

        try:
            body = response.json()
        except ValueError as e:
            raise ProviderError("ViaCEP returned an invalid JSON body") from e
        if not isinstance(body, dict):
            raise ProviderError("ViaCEP returned an unexpected JSON body")

        if str(body.get("erro", "")).lower() == "true":
            raise ZipCodeNotFoundError(zip_code)

        return _parse_response(body)


def _parse_response(body: dict) -> Address:
    """Map ViaCEP field names onto Address."""
    return Address(
        street=body.get("logradouro", "") or "",
        neighborhood=body.get("bairro", "") or "",
        city=body.get("localidade", "") or "",
        state=body.get("uf", "") or "",
        zip_code=body.get("cep", "") or "",
    )
