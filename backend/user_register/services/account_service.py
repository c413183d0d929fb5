"""Account service.

Registration, login, password recovery and listing. Orchestrates the
address resolver, the credential hasher, the session token issuer, the mail
verification engine and the account store. Domain errors from collaborators
pass through unchanged; transport failures are wrapped in infrastructure
errors.
"""

import dataclasses
import logging
from typing import Protocol

from user_register.providers.address.base import Address, AddressResolver
from user_register.providers.errors import ProviderError
from user_register.services.account_types import Account
from user_register.services.credential_hasher import CredentialHasher
from user_register.services.errors import (
    AddressLookupError,
    InvalidLoginError,
    PasswordMismatchError,
    UserNotFoundError,
)
from user_register.services.mail_verification import MailVerificationEngine
from user_register.services.session_tokens import SessionTokenIssuer

logger = logging.getLogger(__name__)


class AccountStore(Protocol):
    """Persistence the service needs for accounts."""

    async def create(
        self, *, name: str, email: str, address: Address, credential_digest: str
    ) -> Account:
        """Insert an account.

        Raises:
            MailAlreadyExistsError: The email is already registered.
        """
        ...

    async def get_by_email(self, email: str) -> Account | None: ...

    async def update_credential_digest(self, email: str, digest: str) -> int:
        """Replace the digest; return the number of rows updated."""
        ...

    async def list_page(self, *, limit: int, offset: int) -> list[Account]: ...


class AccountService:
    """Account lifecycle operations.

    Args:
        accounts: Account store.
        hasher: Creates and verifies credential digests.
        tokens: Issues session tokens on login.
        address_resolver: Turns a zip code into an address.
        mail_verification: Issues and validates password-reset codes.
    """

    def __init__(
        self,
        *,
        accounts: AccountStore,
        hasher: CredentialHasher,
        tokens: SessionTokenIssuer,
        address_resolver: AddressResolver,
        mail_verification: MailVerificationEngine,
    ) -> None:
        self._accounts = accounts
        self._hasher = hasher
        self._tokens = tokens
        self._address_resolver = address_resolver
        self._mail_verification = mail_verification

    async def register(
        self,
        *,
        name: str,
        email: str,
        password: str,
        confirm_password: str,
        zip_code: str,
    ) -> Account:
        """Create an account.

        Args:
            name: Display name.
            email: Email address (stored as given).
            password: Plain-text password.
            confirm_password: Must equal password.
            zip_code: Zip code resolved into the stored address.

        Returns:
            The stored account, with an empty credential_digest.

        Raises:
            PasswordMismatchError: Passwords differ. Nothing is resolved,
                hashed or stored.
            InvalidZipCodeError: The address provider rejected the zip code.
            ZipCodeNotFoundError: The zip code is unknown.
            AddressLookupError: The address provider could not be reached.
            PasswordTooLongError: The password cannot be hashed.
            CredentialHashError: Hashing failed.
            MailAlreadyExistsError: The email is already registered.
            StoreError: The store failed.
        """
        if password != confirm_password:
            raise PasswordMismatchError()

        try:
            address = await self._address_resolver.resolve(zip_code)
        except ProviderError as exc:
            raise AddressLookupError(f"address lookup failed: {exc}") from exc

        digest = self._hasher.create(password)
        account = await self._accounts.create(
            name=name,
            email=email,
            address=address,
            credential_digest=digest,
        )
        logger.info("Account %d registered", account.id)
        return dataclasses.replace(account, credential_digest="")

    async def login(self, *, email: str, password: str) -> str:
        """Authenticate and issue a session token.

        Raises:
            UserNotFoundError: No account for the email.
            InvalidLoginError: Wrong password.
            TokenSigningError: The token could not be signed.
            StoreError: The store failed.
        """
        account = await self._accounts.get_by_email(email)
        if account is None:
            self._hasher.burn_verify(password)
            raise UserNotFoundError(email)

        if not self._hasher.verify(password, account.credential_digest):
            raise InvalidLoginError()

        return self._tokens.issue(account.email)

    async def request_password_reset(self, *, email: str) -> None:
        """Mail a password-reset code to a registered address.

        Raises:
            UserNotFoundError: No account for the email.
            CodeAlreadySentError: An unexpired code was already sent.
            MailDeliveryError: The code could not be delivered.
            StoreError: The store failed.
        """
        account = await self._accounts.get_by_email(email)
        if account is None:
            raise UserNotFoundError(email)

        await self._mail_verification.request_code(account.email)

    async def reset_password(
        self,
        *,
        email: str,
        code: int,
        new_password: str,
        confirm_password: str,
    ) -> None:
        """Replace the password after validating a mailed code.

        The password pair is checked and the new digest computed before the
        code is touched, so neither a typo nor an unhashable password burns
        the code.

        Raises:
            PasswordMismatchError: Passwords differ.
            PasswordTooLongError: The new password cannot be hashed.
            CredentialHashError: Hashing failed.
            VerificationCodeNotFoundError: No code on record.
            InvalidCodeError: Wrong code.
            CodeExpiredError: The code expired.
            UserNotFoundError: No account to update.
            StoreError: The store failed.
        """
        if new_password != confirm_password:
            raise PasswordMismatchError()

        digest = self._hasher.create(new_password)
        await self._mail_verification.validate_code(email, code)

        updated = await self._accounts.update_credential_digest(email, digest)
        if updated == 0:
            raise UserNotFoundError(email)
        logger.info("Password reset completed")

    async def list_accounts(self, *, limit: int, offset: int) -> list[Account]:
        """Return a page of accounts in id order.

        Digests are returned intact; callers that expose accounts must
        drop them.
        """
        return await self._accounts.list_page(limit=limit, offset=offset)
