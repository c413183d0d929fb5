"""Pydantic request/response schemas for API endpoints."""

from user_register.schemas.account import (
    AccountResponse,
    AddressResponse,
    CreateAccountRequest,
    ForgotPasswordRequest,
    LoginRequest,
    ResetPasswordRequest,
    TokenResponse,
)

__all__ = [
    # Requests
    "CreateAccountRequest",
    "ForgotPasswordRequest",
    "LoginRequest",
    "ResetPasswordRequest",
    # Responses
    "AccountResponse",
    "AddressResponse",
    "TokenResponse",
]
