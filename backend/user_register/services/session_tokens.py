"""Stateless session tokens.

HS256 JWTs carrying ``sub`` (the account email), ``iat``, ``exp``, ``iss`` and
``aud``. There is no revocation list; a token is valid until it expires.
"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import jwt

from user_register.services.errors import TokenSigningError

_ALGORITHM = "HS256"
_REQUIRED_CLAIMS = ["sub", "exp", "iat", "iss", "aud"]


def utc_now() -> datetime:
    return datetime.now(UTC)


class SessionTokenIssuer:
    """Issues and verifies signed session tokens.

    Args:
        secret: HMAC signing key.
        issuer: Value of the ``iss`` claim.
        audience: Value of the ``aud`` claim.
        lifetime: Time from issue to expiry.
        clock: Returns the current aware UTC time. Injected so tests can
            move time forward.
    """

    def __init__(
        self,
        *,
        secret: str,
        issuer: str,
        audience: str,
        lifetime: timedelta,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._secret = secret
        self._issuer = issuer
        self._audience = audience
        self._lifetime = lifetime
        self._clock = clock

    def issue(self, identity: str) -> str:
        """Create a token for an identity.

        Args:
            identity: Account email placed in ``sub``.

        Returns:
            Encoded JWT string.

        Raises:
            TokenSigningError: No signing secret is configured or signing failed.
        """
        if not self._secret:
            raise TokenSigningError("token signing secret is not configured")

        now = self._clock()
        payload = {
            "sub": identity,
            "aud": self._audience,
            "iss": self._issuer,
            "exp": now + self._lifetime,
            "iat": now,
        }
        try:
            return jwt.encode(payload, self._secret, algorithm=_ALGORITHM)
        except (jwt.PyJWTError, TypeError, ValueError) as exc:
            raise TokenSigningError("failed to sign session token") from exc

    def verify(self, token: str) -> bool:
        """Check that a token is authentic and unexpired.

        Expiry is compared against the injected clock rather than the
        wall clock, so PyJWT's own ``exp`` and ``iat`` checks are disabled.

        Returns:
            True if valid. Malformed, tampered, foreign and expired tokens
            all return False.
        """
        return self.identity_of(token) is not None

    def identity_of(self, token: str) -> str | None:
        """Return the ``sub`` of a valid token, or None."""
        if not self._secret:
            return None
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[_ALGORITHM],
                audience=self._audience,
                issuer=self._issuer,
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": _REQUIRED_CLAIMS,
                },
            )
        except jwt.PyJWTError:
            return None

        exp = payload.get("exp")
        if not isinstance(exp, int | float):
            return None
        if self._clock() > datetime.fromtimestamp(exp, UTC):
            return None

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            return None
        return subject
