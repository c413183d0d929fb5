"""Shared dependencies for API endpoints.

Services are assembled from the application settings, the shared session
factory and the provider singletons. Tests replace them through
``app.dependency_overrides``.
"""

from datetime import timedelta
from typing import Annotated

from fastapi import Depends, Request

from user_register.core.config import settings
from user_register.core.database import async_session_factory
from user_register.core.errors import UnauthorizedError
from user_register.providers.factory import get_address_resolver, get_mail_sender
from user_register.repositories.account_repository import AccountRepository
from user_register.repositories.verification_code_repository import (
    VerificationCodeRepository,
)
from user_register.services.account_service import AccountService
from user_register.services.credential_hasher import CredentialHasher
from user_register.services.mail_verification import MailVerificationEngine
from user_register.services.session_tokens import SessionTokenIssuer

_hasher: CredentialHasher | None = None
_token_issuer: SessionTokenIssuer | None = None


def get_credential_hasher() -> CredentialHasher:
    """Get or create the credential hasher singleton."""
    global _hasher

    if _hasher is None:
        _hasher = CredentialHasher(
            current_pepper=settings.password_pepper_current.get_secret_value(),
            previous_pepper=settings.password_pepper_previous.get_secret_value(),
            rounds=settings.bcrypt_rounds,
        )
    return _hasher


def get_session_token_issuer() -> SessionTokenIssuer:
    """Get or create the session token issuer singleton."""
    global _token_issuer

    if _token_issuer is None:
        _token_issuer = SessionTokenIssuer(
            secret=settings.token_secret.get_secret_value(),
            issuer=settings.token_issuer,
            audience=settings.token_audience,
            lifetime=timedelta(minutes=settings.token_expire_minutes),
        )
    return _token_issuer


def build_mail_verification() -> MailVerificationEngine:
    """Mail verification engine over the SQLite code store and configured sender."""
    return MailVerificationEngine(
        codes=VerificationCodeRepository(async_session_factory),
        sender=get_mail_sender(),
        ttl=timedelta(minutes=settings.mail_validation_ttl_minutes),
    )


def get_account_service(
    hasher: Annotated[CredentialHasher, Depends(get_credential_hasher)],
    tokens: Annotated[SessionTokenIssuer, Depends(get_session_token_issuer)],
) -> AccountService:
    """Assemble the account service for one request.

    Args:
        hasher: Credential hasher (injected).
        tokens: Session token issuer (injected).

    Returns:
        AccountService wired to the SQLite repositories and the configured
        providers.
    """
    return AccountService(
        accounts=AccountRepository(async_session_factory),
        hasher=hasher,
        tokens=tokens,
        address_resolver=get_address_resolver(),
        mail_verification=build_mail_verification(),
    )


async def get_current_identity(
    request: Request,
    tokens: Annotated[SessionTokenIssuer, Depends(get_session_token_issuer)],
) -> str:
    """Resolve the caller's identity from the Authorization header.

    Expects ``Authorization: Bearer <token>``.

    Returns:
        Email carried in the token's ``sub`` claim.

    Raises:
        UnauthorizedError: Header missing, wrong scheme, or the token is
            invalid or expired. The reason is never disclosed.
    """
    scheme, _, token = request.headers.get("authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise UnauthorizedError()

    identity = tokens.identity_of(token.strip())
    if identity is None:
        raise UnauthorizedError()
    return identity


# Reusable type aliases for dependency injection
AccountServiceDep = Annotated[AccountService, Depends(get_account_service)]
CurrentIdentity = Annotated[str, Depends(get_current_identity)]
