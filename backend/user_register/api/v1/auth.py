"""Login endpoint.

Unknown email and wrong password produce the same 401 so the response does
not reveal which accounts exist.
"""

from fastapi import APIRouter, Request

from user_register.api.deps import AccountServiceDep
from user_register.core.config import settings
from user_register.core.errors import UnauthorizedError
from user_register.core.rate_limiting import limiter
from user_register.core.responses import DataResponse
from user_register.schemas.account import LoginRequest, TokenResponse
from user_register.services.errors import InvalidLoginError, UserNotFoundError

router = APIRouter()


@router.post("/login")
@limiter.limit(settings.rate_limit_login)
async def login(
    request: Request,  # noqa: ARG001 - required by @limiter.limit()
    body: LoginRequest,
    service: AccountServiceDep,
) -> DataResponse[TokenResponse]:
    """Exchange email + password for a bearer token.

    Rate limit: settings.rate_limit_login per IP.
    """
    try:
        token = await service.login(email=body.email, password=body.password)
    except (UserNotFoundError, InvalidLoginError):
        raise UnauthorizedError(
            "INVALID_CREDENTIALS", "Invalid email or password"
        ) from None

    return DataResponse(data=TokenResponse(token=token))
