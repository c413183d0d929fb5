"""Verification code model - password recovery codes.

At most one row per email: the email is the primary key and issuing a new
code overwrites the previous row. Rows are deleted when consumed.
"""

from datetime import datetime

from sqlalchemy import Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from user_register.models.base import Base


class VerificationCode(Base):
    """One-time numeric code mailed to an account holder.

    Attributes:
        email: Recipient address (primary key).
        code: Numeric code in [0, 999998].
        expires_at: UTC instant after which the code is no longer accepted.
    """

    __tablename__ = "verification_codes"
    __table_args__ = (Index("idx_verification_codes_expires_at", "expires_at"),)

    email: Mapped[str] = mapped_column(
        String(255),
        primary_key=True,
    )
    code: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    expires_at: Mapped[datetime] = mapped_column(
        nullable=False,
    )
