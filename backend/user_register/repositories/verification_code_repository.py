"""Repository for verification code persistence.

One row per email. Issuing a code is a single INSERT ... ON CONFLICT DO
UPDATE; consuming one is a single conditional DELETE, so two concurrent
validations of the same code cannot both succeed.
"""

from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from user_register.models.verification_code import VerificationCode
from user_register.services.errors import StoreError


class VerificationCodeRepository:
    """Verification code table operations.

    Args:
        session_factory: Factory for short-lived async sessions.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def upsert(self, email: str, code: int, expires_at: datetime) -> None:
        """Store a code for an email, replacing any existing row.

        Raises:
            StoreError: The statement failed.
        """
        stmt = insert(VerificationCode).values(
            email=email,
            code=code,
            expires_at=expires_at,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[VerificationCode.email],
            set_={"code": stmt.excluded.code, "expires_at": stmt.excluded.expires_at},
        )
        try:
            async with self._session_factory() as db:
                await db.execute(stmt)
                await db.commit()
        except SQLAlchemyError as exc:
            raise StoreError("failed to store verification code") from exc

    async def get_by_email(self, email: str) -> VerificationCode | None:
        """Fetch the code row for an email, expired or not.

        Raises:
            StoreError: The query failed.
        """
        stmt = select(VerificationCode).where(VerificationCode.email == email)
        try:
            async with self._session_factory() as db:
                result = await db.execute(stmt)
                return result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise StoreError("failed to fetch verification code") from exc

    async def delete_if_matches(self, email: str, code: int, now: datetime) -> bool:
        """Consume a code if it matches and has not expired at ``now``.

        Returns:
            True if a row was deleted.

        Raises:
            StoreError: The statement failed.
        """
        stmt = delete(VerificationCode).where(
            VerificationCode.email == email,
            VerificationCode.code == code,
            VerificationCode.expires_at >= now,
        )
        try:
            async with self._session_factory() as db:
                result = await db.execute(stmt)
                await db.commit()
        except SQLAlchemyError as exc:
            raise StoreError("failed to consume verification code") from exc
        row_count: int = result.rowcount  # type: ignore[attr-defined]
        return row_count > 0

    async def delete_expired(self, now: datetime) -> int:
        """Delete all codes that expired before ``now``.

        Returns:
            Number of deleted rows.

        Raises:
            StoreError: The statement failed.
        """
        stmt = delete(VerificationCode).where(VerificationCode.expires_at < now)
        try:
            async with self._session_factory() as db:
                result = await db.execute(stmt)
                await db.commit()
        except SQLAlchemyError as exc:
            raise StoreError("failed to purge verification codes") from exc
        row_count: int = result.rowcount  # type: ignore[attr-defined]
        return row_count
