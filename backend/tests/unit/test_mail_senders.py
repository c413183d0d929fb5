"""Tests for the mail senders and code formatting."""

import logging
from unittest.mock import patch

import httpx
import pytest
from pydantic import SecretStr

from user_register.providers.errors import ProviderError, TransientError
from user_register.providers.mail.base import format_code
from user_register.providers.mail.console_adapter import ConsoleMailSender
from user_register.providers.mail.mock_adapter import MockMailSender
from user_register.providers.mail.resend_adapter import ResendMailSender

_REAL_ASYNC_CLIENT = httpx.AsyncClient
_API_URL = "https://resend.test/emails"


def _mock_client(handler):
    """Patch httpx.AsyncClient so every client uses a MockTransport."""

    def factory(*_args, **_kwargs):
        return _REAL_ASYNC_CLIENT(transport=httpx.MockTransport(handler))

    return patch.object(httpx, "AsyncClient", factory)


def _sender() -> ResendMailSender:
    return ResendMailSender(
        api_key=SecretStr("re_test_key"),
        from_address="noreply@example.com",
        ttl_minutes=60,
        timeout=1,
        api_url=_API_URL,
    )


class TestFormatCode:
    """Tests for format_code()."""

    @pytest.mark.parametrize(
        ("code", "expected"),
        [(0, "000000"), (42, "000042"), (999998, "999998")],
    )
    def test_zero_pads_to_six_digits(self, code, expected):
        """Codes are always rendered with six digits."""
        assert format_code(code) == expected


class TestResendMailSender:
    """Tests for ResendMailSender.send()."""

    async def test_posts_padded_code_with_bearer_key(self):
        """The request carries the API key and the six-digit code."""
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"id": "email_123"})

        with _mock_client(handler):
            await _sender().send("a@x.com", 42)

        assert len(requests) == 1
        request = requests[0]
        assert str(request.url) == _API_URL
        assert request.headers["authorization"] == "Bearer re_test_key"
        body = request.read().decode()
        assert "000042" in body
        assert "a@x.com" in body

    async def test_rejection_raises_provider_error(self):
        """4xx from Resend raises ProviderError."""
        with _mock_client(lambda _r: httpx.Response(422, json={"message": "bad"})):
            with pytest.raises(ProviderError):
                await _sender().send("a@x.com", 1)

    async def test_server_error_raises_transient(self):
        """5xx from Resend raises TransientError."""
        with _mock_client(lambda _r: httpx.Response(502)):
            with pytest.raises(TransientError):
                await _sender().send("a@x.com", 1)

    async def test_network_error_raises_transient(self):
        """Transport failures raise TransientError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with _mock_client(handler):
            with pytest.raises(TransientError):
                await _sender().send("a@x.com", 1)


class TestConsoleMailSender:
    """Tests for ConsoleMailSender.send()."""

    async def test_logs_padded_code(self, caplog):
        """The code is written to the log for local development."""
        with caplog.at_level(logging.WARNING):
            await ConsoleMailSender().send("a@x.com", 7)

        assert "000007" in caplog.text
        assert "a@x.com" in caplog.text


class TestMockMailSender:
    """Tests for MockMailSender."""

    async def test_records_sent_codes(self):
        """Sent codes are recorded and retrievable per address."""
        sender = MockMailSender()
        await sender.send("a@x.com", 1)
        await sender.send("a@x.com", 2)

        assert sender.last_code_for("a@x.com") == 2

    async def test_configured_error_is_raised(self):
        """A configured error is raised and nothing is recorded."""
        sender = MockMailSender(error=ProviderError("down"))

        with pytest.raises(ProviderError):
            await sender.send("a@x.com", 1)

        assert sender.sent == []
        with pytest.raises(LookupError):
            sender.last_code_for("a@x.com")
