"""Domain error taxonomy for the account and verification-code services.

Two families:

- ``AccountDomainError``: an expected outcome the caller can act on
  (mismatch, conflict, not found, expired, already sent, bad credentials).
  These pass through the service layer unchanged so the HTTP boundary can
  map each one to a precise response.
- ``InfrastructureError``: the store, a provider, or a crypto primitive
  failed. Raised with context and chained to the original exception; the
  boundary reports them as an opaque internal failure.
"""

__all__ = [
    "AccountDomainError",
    "PasswordMismatchError",
    "MailAlreadyExistsError",
    "UserNotFoundError",
    "InvalidLoginError",
    "PasswordTooLongError",
    "VerificationCodeError",
    "VerificationCodeNotFoundError",
    "InvalidCodeError",
    "CodeExpiredError",
    "CodeAlreadySentError",
    "InfrastructureError",
    "StoreError",
    "CredentialHashError",
    "TokenSigningError",
    "MailDeliveryError",
    "AddressLookupError",
]


class AccountDomainError(Exception):
    """Base class for expected business outcomes."""

    pass


class PasswordMismatchError(AccountDomainError):
    """Password and confirmation differ."""

    def __init__(self) -> None:
        super().__init__("password and confirm password do not match")


class MailAlreadyExistsError(AccountDomainError):
    """An account with this email already exists."""

    def __init__(self, email: str) -> None:
        super().__init__("mail already exists")
        self.email = email


class UserNotFoundError(AccountDomainError):
    """No account exists for the email."""

    def __init__(self, email: str) -> None:
        super().__init__("user not found")
        self.email = email


class InvalidLoginError(AccountDomainError):
    """The password does not match the stored credential."""

    def __init__(self) -> None:
        super().__init__("invalid email or password")


class PasswordTooLongError(AccountDomainError):
    """The password plus the server pepper exceeds what bcrypt can hash.

    Attributes:
        limit: Maximum peppered length in bytes.
    """

    def __init__(self, limit: int) -> None:
        super().__init__(f"password is too long (limit {limit} bytes including pepper)")
        self.limit = limit


class VerificationCodeError(AccountDomainError):
    """Base class for verification-code lifecycle outcomes.

    Attributes:
        email: Address the code belongs to.
    """

    def __init__(self, message: str, email: str) -> None:
        super().__init__(message)
        self.email = email


class VerificationCodeNotFoundError(VerificationCodeError):
    """No code is on record for the email (never issued, or already used)."""

    def __init__(self, email: str) -> None:
        super().__init__("record not found", email)


class InvalidCodeError(VerificationCodeError):
    """The presented code differs from the stored one."""

    def __init__(self, email: str) -> None:
        super().__init__("invalid code", email)


class CodeExpiredError(VerificationCodeError):
    """The presented code matches but is past its expiry."""

    def __init__(self, email: str) -> None:
        super().__init__("code expired, try again", email)


class CodeAlreadySentError(VerificationCodeError):
    """An unexpired code was already issued; wait before requesting again."""

    def __init__(self, email: str) -> None:
        super().__init__("code already sent, wait to send again", email)


class InfrastructureError(Exception):
    """Base class for failures of the store, providers or primitives."""

    pass


class StoreError(InfrastructureError):
    """A database statement failed."""

    pass


class CredentialHashError(InfrastructureError):
    """The password hashing primitive rejected its input."""

    pass


class TokenSigningError(InfrastructureError):
    """A session token could not be signed (missing or invalid key)."""

    pass


class MailDeliveryError(InfrastructureError):
    """The verification code could not be delivered."""

    pass


class AddressLookupError(InfrastructureError):
    """The address provider could not be reached or answered garbage."""

    pass
