"""SQLAlchemy ORM models for user-register.

All models are exported from this module for convenient imports:
    from user_register.models import AccountRecord, VerificationCode

- account.py: AccountRecord (registered users)
- verification_code.py: VerificationCode (password recovery codes)
"""

from user_register.models.account import AccountRecord
from user_register.models.base import Base, UTCDateTime
from user_register.models.verification_code import VerificationCode

__all__ = [
    "AccountRecord",
    "Base",
    "UTCDateTime",
    "VerificationCode",
]
