"""Create accounts and verification_codes tables.

Revision ID: 001_accounts_verification_codes
Revises:
Create Date: 2026-10-18
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "001_accounts_verification_codes"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # Accounts: email is the identity key, compared exactly as stored
    op.create_table(
        "accounts",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("address", sa.JSON(), nullable=False),
        sa.Column("credential_digest", sa.String(255), nullable=False),
        sa.UniqueConstraint("email", name="uq_accounts_email"),
    )

    # Verification codes: at most one row per email
    op.create_table(
        "verification_codes",
        sa.Column("email", sa.String(255), primary_key=True),
        sa.Column("code", sa.Integer(), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
    )
    op.create_index(
        "idx_verification_codes_expires_at",
        "verification_codes",
        ["expires_at"],
    )


def downgrade() -> None:
    op.drop_index(
        "idx_verification_codes_expires_at",
        table_name="verification_codes",
    )
    op.drop_table("verification_codes")
    op.drop_table("accounts")
