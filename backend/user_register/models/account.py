"""Account model - registered users.

One row per email. The address resolved at registration is stored as a JSON
object; the credential digest is a peppered bcrypt hash.
"""

from typing import Any

from sqlalchemy import JSON, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from user_register.models.base import Base


class AccountRecord(Base):
    """Persisted user account.

    Attributes:
        id: Autoincrement integer primary key.
        name: Display name.
        email: Unique email address, compared exactly as stored.
        address: Postal address fields (street, neighborhood, number, city,
            state, zip_code).
        credential_digest: bcrypt digest of password + pepper.
    """

    __tablename__ = "accounts"
    __table_args__ = (UniqueConstraint("email", name="uq_accounts_email"),)

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    address: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
    )
    credential_digest: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
