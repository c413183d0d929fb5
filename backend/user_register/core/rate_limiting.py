"""Request throttling with slowapi.

Guards the unauthenticated endpoints (login, register, forgot-password)
against credential guessing and code spamming. Limits are strings such as
``"5/15minute"`` taken from settings, applied in the routers with
``@limiter.limit(settings.rate_limit_login)``; decorated endpoints must take
a ``request: Request`` parameter.

Counters live in process memory.
"""

import jwt
from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from user_register.core.config import settings
from user_register.core.responses import error_response

_DEFAULT_RETRY_AFTER_SECONDS = 60


def _bearer_subject(request: Request) -> str | None:
    """Return the subject of a valid bearer token, if the request has one."""
    scheme, _, token = request.headers.get("authorization", "").partition(" ")
    secret = settings.token_secret.get_secret_value()
    if scheme.lower() != "bearer" or not token or not secret:
        return None

    try:
        claims = jwt.decode(
            token.strip(),
            secret,
            algorithms=["HS256"],
            audience=settings.token_audience,
            issuer=settings.token_issuer,
        )
    except jwt.InvalidTokenError:
        return None
    return claims.get("sub")


def rate_limit_key(request: Request) -> str:
    """Bucket authenticated callers by account, everyone else by address.

    Returns:
        ``"user:{sub}"`` for a valid bearer token, otherwise ``"ip:{addr}"``.
    """
    subject = _bearer_subject(request)
    if subject:
        return f"user:{subject}"
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(key_func=rate_limit_key, enabled=settings.rate_limit_enabled)


def _retry_after_seconds(exc: RateLimitExceeded) -> int:
    limit = getattr(exc, "limit", None)
    item = getattr(limit, "limit", None)
    if item is None:
        return _DEFAULT_RETRY_AFTER_SECONDS
    return int(item.get_expiry())


def rate_limit_exceeded_handler(_request: Request, exc: RateLimitExceeded) -> Response:
    """Render 429 with the error envelope and a Retry-After header.

    Retry-After is the length of the exceeded window in seconds.
    """
    return error_response(
        429,
        "RATE_LIMITED",
        f"Rate limit exceeded: {exc.detail}",
        headers={"Retry-After": str(_retry_after_seconds(exc))},
    )
