"""Tests for AccountService.

End-to-end through the real repositories on in-memory SQLite, with mock
address resolver and mail sender.
"""

import pytest

from user_register.providers.address.base import Address
from user_register.providers.errors import (
    InvalidZipCodeError,
    TransientError,
    ZipCodeNotFoundError,
)
from user_register.services.errors import (
    AddressLookupError,
    CodeExpiredError,
    InvalidCodeError,
    InvalidLoginError,
    MailAlreadyExistsError,
    PasswordMismatchError,
    PasswordTooLongError,
    UserNotFoundError,
    VerificationCodeNotFoundError,
)

_FIXED_ADDRESS = Address(
    street="Rua Exemplo",
    neighborhood="Centro",
    city="Goiânia",
    state="GO",
    zip_code="74360-400",
)
_PASSWORD = "secret1"  # nosec B105


@pytest.fixture
def fixed_resolver(address_resolver):
    """Resolver that answers _FIXED_ADDRESS for 74360400."""
    address_resolver.addresses["74360400"] = _FIXED_ADDRESS
    return address_resolver


async def _register(service, email: str = "a@x.com", password: str = _PASSWORD):
    return await service.register(
        name="A",
        email=email,
        password=password,
        confirm_password=password,
        zip_code="74360400",
    )


class TestRegister:
    """Tests for AccountService.register()."""

    async def test_creates_account_with_resolved_address(
        self, account_service, fixed_resolver
    ):
        """Account has an id, the resolved address and no digest."""
        account = await _register(account_service)

        assert account.id > 0
        assert account.name == "A"
        assert account.email == "a@x.com"
        assert account.address == _FIXED_ADDRESS
        assert account.credential_digest == ""
        assert fixed_resolver.calls == [{"method": "resolve", "zip_code": "74360400"}]

    async def test_digest_is_stored(self, account_service, account_repo, hasher):
        """The store holds a digest that verifies against the password."""
        await _register(account_service)

        stored = await account_repo.get_by_email("a@x.com")
        assert stored.credential_digest != ""
        assert hasher.verify(_PASSWORD, stored.credential_digest) is True

    async def test_password_mismatch_writes_nothing(
        self, account_service, account_repo, address_resolver
    ):
        """Mismatched confirmation fails before resolving or storing."""
        with pytest.raises(PasswordMismatchError):
            await account_service.register(
                name="A",
                email="a@x.com",
                password="secret1",
                confirm_password="secret2",
                zip_code="74360400",
            )

        assert address_resolver.calls == []
        assert await account_repo.get_by_email("a@x.com") is None

    async def test_unhashable_password_writes_nothing(
        self, account_service, account_repo, fixed_resolver
    ):
        """A password too long to hash with the pepper is refused and not stored."""
        with pytest.raises(PasswordTooLongError):
            await _register(account_service, password="a" * 80)

        assert await account_repo.get_by_email("a@x.com") is None

    async def test_duplicate_email_raises_conflict(self, account_service):
        """Registering the same email twice raises MailAlreadyExistsError."""
        await _register(account_service)

        with pytest.raises(MailAlreadyExistsError):
            await _register(account_service)

    async def test_email_is_case_sensitive(self, account_service, account_repo):
        """Emails differing only in case are distinct accounts."""
        await _register(account_service, email="a@x.com")
        await _register(account_service, email="A@x.com")

        assert len(await account_repo.list_page(limit=10, offset=0)) == 2

    @pytest.mark.parametrize(
        "error",
        [InvalidZipCodeError("00000000"), ZipCodeNotFoundError("99999999")],
    )
    async def test_resolution_errors_propagate(
        self, account_service, address_resolver, account_repo, error
    ):
        """Invalid and unknown zip codes surface unchanged; nothing is stored."""
        address_resolver.error = error
        address_resolver.default = None
        address_resolver.addresses.clear()

        with pytest.raises(type(error)):
            await _register(account_service)

        assert await account_repo.get_by_email("a@x.com") is None

    async def test_transport_failure_is_wrapped(
        self, account_service, address_resolver
    ):
        """Provider transport errors become AddressLookupError."""
        address_resolver.error = TransientError("timeout")
        address_resolver.default = None
        address_resolver.addresses.clear()

        with pytest.raises(AddressLookupError):
            await _register(account_service)


class TestLogin:
    """Tests for AccountService.login()."""

    async def test_valid_credentials_return_verifiable_token(
        self, account_service, token_issuer
    ):
        """Login returns a token the issuer accepts."""
        await _register(account_service)

        token = await account_service.login(email="a@x.com", password=_PASSWORD)

        assert token_issuer.identity_of(token) == "a@x.com"

    async def test_token_expires_with_clock(self, account_service, token_issuer, clock):
        """The login token is rejected once its lifetime has elapsed."""
        await _register(account_service)
        token = await account_service.login(email="a@x.com", password=_PASSWORD)

        clock.advance(minutes=11)

        assert token_issuer.verify(token) is False

    async def test_wrong_password_raises_invalid_login(self, account_service):
        """Wrong password raises InvalidLoginError."""
        await _register(account_service)

        with pytest.raises(InvalidLoginError):
            await account_service.login(email="a@x.com", password="wrong")

    async def test_unknown_email_raises_user_not_found(self, account_service):
        """Unknown email raises UserNotFoundError."""
        with pytest.raises(UserNotFoundError):
            await account_service.login(email="nobody@x.com", password=_PASSWORD)


class TestRequestPasswordReset:
    """Tests for AccountService.request_password_reset()."""

    async def test_mails_code_to_registered_account(self, account_service, mail_sender):
        """A registered email receives a code."""
        await _register(account_service)

        await account_service.request_password_reset(email="a@x.com")

        assert [email for email, _ in mail_sender.sent] == ["a@x.com"]

    async def test_unknown_email_raises_user_not_found(
        self, account_service, mail_sender
    ):
        """No code is sent for an unknown email."""
        with pytest.raises(UserNotFoundError):
            await account_service.request_password_reset(email="nobody@x.com")

        assert mail_sender.sent == []


class TestResetPassword:
    """Tests for AccountService.reset_password()."""

    async def _registered_with_code(self, account_service, mail_sender) -> int:
        await _register(account_service)
        await account_service.request_password_reset(email="a@x.com")
        return mail_sender.last_code_for("a@x.com")

    async def test_resets_password(self, account_service, mail_sender):
        """Correct code replaces the password; the old one stops working."""
        code = await self._registered_with_code(account_service, mail_sender)

        await account_service.reset_password(
            email="a@x.com",
            code=code,
            new_password="newsecret",
            confirm_password="newsecret",
        )

        await account_service.login(email="a@x.com", password="newsecret")
        with pytest.raises(InvalidLoginError):
            await account_service.login(email="a@x.com", password=_PASSWORD)

    async def test_no_code_raises_not_found(self, account_service):
        """Reset without a requested code raises not found."""
        await _register(account_service)

        with pytest.raises(VerificationCodeNotFoundError):
            await account_service.reset_password(
                email="a@x.com",
                code=123456,
                new_password="newsecret",
                confirm_password="newsecret",
            )

    async def test_expired_code_raises_expired(self, account_service, mail_sender, clock):
        """A code used after its TTL raises CodeExpiredError."""
        code = await self._registered_with_code(account_service, mail_sender)
        clock.advance(hours=2)

        with pytest.raises(CodeExpiredError):
            await account_service.reset_password(
                email="a@x.com",
                code=code,
                new_password="newsecret",
                confirm_password="newsecret",
            )

    async def test_wrong_code_raises_invalid(self, account_service, mail_sender):
        """A wrong code raises InvalidCodeError."""
        code = await self._registered_with_code(account_service, mail_sender)

        with pytest.raises(InvalidCodeError):
            await account_service.reset_password(
                email="a@x.com",
                code=(code + 1) % 999999,
                new_password="newsecret",
                confirm_password="newsecret",
            )

    async def test_mismatch_does_not_consume_code(self, account_service, mail_sender):
        """Password mismatch fails first and the code stays usable."""
        code = await self._registered_with_code(account_service, mail_sender)

        with pytest.raises(PasswordMismatchError):
            await account_service.reset_password(
                email="a@x.com",
                code=code,
                new_password="newsecret",
                confirm_password="different",
            )

        await account_service.reset_password(
            email="a@x.com",
            code=code,
            new_password="newsecret",
            confirm_password="newsecret",
        )

    async def test_unhashable_password_does_not_consume_code(
        self, account_service, mail_sender
    ):
        """A password too long to hash fails before the code is consumed."""
        code = await self._registered_with_code(account_service, mail_sender)

        with pytest.raises(PasswordTooLongError):
            await account_service.reset_password(
                email="a@x.com",
                code=code,
                new_password="b" * 80,
                confirm_password="b" * 80,
            )

        await account_service.reset_password(
            email="a@x.com",
            code=code,
            new_password="secret2",
            confirm_password="secret2",
        )
        await account_service.login(email="a@x.com", password="secret2")

    async def test_code_for_vanished_account_raises_user_not_found(
        self, account_service, mail_verification, mail_sender
    ):
        """A valid code for an email with no account raises UserNotFoundError."""
        await mail_verification.request_code("ghost@x.com")
        code = mail_sender.last_code_for("ghost@x.com")

        with pytest.raises(UserNotFoundError):
            await account_service.reset_password(
                email="ghost@x.com",
                code=code,
                new_password="newsecret",
                confirm_password="newsecret",
            )


class TestListAccounts:
    """Tests for AccountService.list_accounts()."""

    async def test_returns_accounts_in_registration_order(self, account_service):
        """Accounts come back in id order with digests intact."""
        for i in range(3):
            await _register(account_service, email=f"user{i}@x.com")

        accounts = await account_service.list_accounts(limit=10, offset=0)

        assert [a.email for a in accounts] == [
            "user0@x.com",
            "user1@x.com",
            "user2@x.com",
        ]
        assert all(a.credential_digest for a in accounts)

    async def test_limit_and_offset(self, account_service):
        """limit and offset select a window."""
        for i in range(5):
            await _register(account_service, email=f"user{i}@x.com")

        accounts = await account_service.list_accounts(limit=2, offset=1)

        assert [a.email for a in accounts] == ["user1@x.com", "user2@x.com"]

    async def test_empty_store_returns_empty_list(self, account_service):
        """No accounts yields an empty list."""
        assert await account_service.list_accounts(limit=10, offset=0) == []
