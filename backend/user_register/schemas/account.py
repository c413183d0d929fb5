"""Account request and response schemas.

Field bounds mirror what the stored columns and the hashing primitive
accept: names of 3-100 characters, eight-digit zip codes, and new
passwords of at least 6 characters and at most 72 UTF-8 bytes (bcrypt's
input limit). The server pepper is appended before hashing, so a password
that passes here can still be refused by the service as too long.
"""

from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field

from user_register.services.account_types import Account

_ZIP_CODE_PATTERN = r"^\d{8}$"
_MAX_CODE = 999998
_BCRYPT_MAX_BYTES = 72


def _fits_bcrypt(value: str) -> str:
    if len(value.encode()) > _BCRYPT_MAX_BYTES:
        raise ValueError(f"must be at most {_BCRYPT_MAX_BYTES} bytes")
    return value


NewPassword = Annotated[
    str,
    Field(min_length=6, max_length=_BCRYPT_MAX_BYTES),
    AfterValidator(_fits_bcrypt),
]

# ===================================================================
# Request models
# ===================================================================


class CreateAccountRequest(BaseModel):
    """Request body for POST /users."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=3, max_length=100)
    email: EmailStr
    password: NewPassword
    confirm_password: NewPassword
    zip_code: str = Field(pattern=_ZIP_CODE_PATTERN)


class LoginRequest(BaseModel):
    """Request body for POST /login."""

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=6, max_length=100)


class ForgotPasswordRequest(BaseModel):
    """Request body for POST /users/forgot-password."""

    model_config = ConfigDict(extra="forbid")

    email: EmailStr


class ResetPasswordRequest(BaseModel):
    """Request body for PUT /users/password."""

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    code: int = Field(ge=0, le=_MAX_CODE)
    password: NewPassword
    confirm_password: NewPassword


# ===================================================================
# Response models
# ===================================================================


class AddressResponse(BaseModel):
    """Postal address as returned to clients."""

    street: str
    neighborhood: str
    number: str
    city: str
    state: str
    zip_code: str


class AccountResponse(BaseModel):
    """Public view of an account. Never carries the credential digest."""

    id: int
    name: str
    email: str
    address: AddressResponse

    @classmethod
    def from_account(cls, account: Account) -> "AccountResponse":
        """Build the public view of a domain account."""
        return cls(
            id=account.id,
            name=account.name,
            email=account.email,
            address=AddressResponse(**account.address.to_dict()),
        )


class TokenResponse(BaseModel):
    """Session token issued on login."""

    token: str
    token_type: str = "bearer"
