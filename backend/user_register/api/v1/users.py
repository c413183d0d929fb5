"""Account endpoints.

POST /users                  register
GET  /users                  list (bearer token required)
PUT  /users/password         reset password with a mailed code
POST /users/forgot-password  mail a reset code

Domain errors from AccountService are translated here into API errors;
anything else falls through to the catch-all 500 handler.
"""

from fastapi import APIRouter, Request

from user_register.api.deps import AccountServiceDep, CurrentIdentity
from user_register.core.config import settings
from user_register.core.errors import (
    BadRequestError,
    ConflictError,
    NotFoundError,
    ServiceUnavailableError,
)
from user_register.core.pagination import Pagination
from user_register.core.rate_limiting import limiter
from user_register.core.responses import DataResponse, ListResponse
from user_register.providers.errors import InvalidZipCodeError, ZipCodeNotFoundError
from user_register.schemas.account import (
    AccountResponse,
    CreateAccountRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
)
from user_register.services.errors import (
    AddressLookupError,
    CodeAlreadySentError,
    CodeExpiredError,
    InvalidCodeError,
    MailAlreadyExistsError,
    MailDeliveryError,
    PasswordMismatchError,
    PasswordTooLongError,
    UserNotFoundError,
    VerificationCodeNotFoundError,
)

router = APIRouter()

_PASSWORD_MISMATCH_MSG = "Password and confirm password do not match"  # nosec B105
_PASSWORD_TOO_LONG_MSG = "Password is too long"  # nosec B105


# ===================================================================
# POST /users
# ===================================================================


@router.post("", status_code=201)
@limiter.limit(settings.rate_limit_register)
async def create_account(
    request: Request,  # noqa: ARG001 - required by @limiter.limit()
    body: CreateAccountRequest,
    service: AccountServiceDep,
) -> DataResponse[AccountResponse]:
    """Register a new account.

    The zip code is resolved into a postal address before anything is
    stored. Rate limit: settings.rate_limit_register per IP.
    """
    try:
        account = await service.register(
            name=body.name,
            email=body.email,
            password=body.password,
            confirm_password=body.confirm_password,
            zip_code=body.zip_code,
        )
    except PasswordMismatchError:
        raise BadRequestError("PASSWORD_MISMATCH", _PASSWORD_MISMATCH_MSG) from None
    except PasswordTooLongError:
        raise BadRequestError("PASSWORD_TOO_LONG", _PASSWORD_TOO_LONG_MSG) from None
    except InvalidZipCodeError:
        raise BadRequestError("INVALID_ZIP_CODE", "Invalid zip code") from None
    except ZipCodeNotFoundError:
        raise NotFoundError("ZIP_CODE_NOT_FOUND", "Zip code not found") from None
    except MailAlreadyExistsError:
        raise ConflictError(
            code="EMAIL_ALREADY_EXISTS",
            message="Email already registered",
        ) from None
    except AddressLookupError:
        raise ServiceUnavailableError("Address lookup is unavailable") from None

    return DataResponse(data=AccountResponse.from_account(account))


# ===================================================================
# GET /users
# ===================================================================


@router.get("")
async def list_accounts(
    _identity: CurrentIdentity,
    service: AccountServiceDep,
    page: Pagination,
) -> ListResponse[AccountResponse]:
    """List accounts in registration order.

    Requires a valid bearer token. Credential digests are never returned.
    """
    accounts = await service.list_accounts(limit=page.limit, offset=page.offset)
    return ListResponse(
        data=[AccountResponse.from_account(a) for a in accounts],
        meta=page.meta(len(accounts)),
    )


# ===================================================================
# PUT /users/password
# ===================================================================


@router.put("/password", status_code=204)
async def reset_password(
    body: ResetPasswordRequest,
    service: AccountServiceDep,
) -> None:
    """Set a new password using a mailed verification code.

    A password mismatch is reported before the code is checked, so the
    code remains usable.
    """
    try:
        await service.reset_password(
            email=body.email,
            code=body.code,
            new_password=body.password,
            confirm_password=body.confirm_password,
        )
    except PasswordMismatchError:
        raise BadRequestError("PASSWORD_MISMATCH", _PASSWORD_MISMATCH_MSG) from None
    except PasswordTooLongError:
        raise BadRequestError("PASSWORD_TOO_LONG", _PASSWORD_TOO_LONG_MSG) from None
    except VerificationCodeNotFoundError:
        raise BadRequestError(
            "CODE_NOT_FOUND", "No verification code was requested"
        ) from None
    except InvalidCodeError:
        raise BadRequestError("INVALID_CODE", "Invalid verification code") from None
    except CodeExpiredError:
        raise BadRequestError(
            "CODE_EXPIRED", "Verification code expired, request a new one"
        ) from None
    except UserNotFoundError:
        raise NotFoundError("USER_NOT_FOUND", "User not found") from None


# ===================================================================
# POST /users/forgot-password
# ===================================================================


@router.post("/forgot-password", status_code=204)
@limiter.limit(settings.rate_limit_forgot_password)
async def forgot_password(
    request: Request,  # noqa: ARG001 - required by @limiter.limit()
    body: ForgotPasswordRequest,
    service: AccountServiceDep,
) -> None:
    """Mail a password-reset code.

    Unknown emails get a 404, which discloses whether an address is
    registered. Rate limit: settings.rate_limit_forgot_password per IP.
    """
    try:
        await service.request_password_reset(email=body.email)
    except UserNotFoundError:
        raise NotFoundError("USER_NOT_FOUND", "User not found") from None
    except CodeAlreadySentError:
        raise ConflictError(
            code="CODE_ALREADY_SENT",
            message="A code was already sent, wait before requesting another",
        ) from None
    except MailDeliveryError:
        raise ServiceUnavailableError("Mail delivery is unavailable") from None
