"""Repository for account persistence.

Each method opens its own session from the factory and commits a single
statement, so no call depends on a caller-managed transaction.
"""

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from user_register.models.account import AccountRecord
from user_register.providers.address.base import Address
from user_register.services.account_types import Account
from user_register.services.errors import MailAlreadyExistsError, StoreError


def _to_account(record: AccountRecord) -> Account:
    return Account(
        id=record.id,
        name=record.name,
        email=record.email,
        address=Address.from_dict(record.address),
        credential_digest=record.credential_digest,
    )


class AccountRepository:
    """Account table operations.

    Args:
        session_factory: Factory for short-lived async sessions.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create(
        self,
        *,
        name: str,
        email: str,
        address: Address,
        credential_digest: str,
    ) -> Account:
        """Insert a new account.

        Args:
            name: Display name.
            email: Email address, stored exactly as given.
            address: Resolved postal address.
            credential_digest: Peppered bcrypt digest.

        Returns:
            Created Account with its assigned id.

        Raises:
            MailAlreadyExistsError: The email is already registered.
            StoreError: Any other database failure.
        """
        record = AccountRecord(
            name=name,
            email=email,
            address=address.to_dict(),
            credential_digest=credential_digest,
        )
        try:
            async with self._session_factory() as db:
                db.add(record)
                await db.commit()
        except IntegrityError:
            raise MailAlreadyExistsError(email) from None
        except SQLAlchemyError as exc:
            raise StoreError("failed to create account") from exc
        return _to_account(record)

    async def get_by_email(self, email: str) -> Account | None:
        """Fetch an account by exact email.

        Returns:
            Account if found, None otherwise.

        Raises:
            StoreError: The query failed.
        """
        stmt = select(AccountRecord).where(AccountRecord.email == email)
        try:
            async with self._session_factory() as db:
                result = await db.execute(stmt)
                record = result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise StoreError("failed to fetch account") from exc
        return _to_account(record) if record is not None else None

    async def update_credential_digest(self, email: str, digest: str) -> int:
        """Replace the credential digest of an account.

        Returns:
            Number of rows updated (0 when no account has the email).

        Raises:
            StoreError: The update failed.
        """
        stmt = (
            update(AccountRecord)
            .where(AccountRecord.email == email)
            .values(credential_digest=digest)
        )
        try:
            async with self._session_factory() as db:
                result = await db.execute(stmt)
                await db.commit()
        except SQLAlchemyError as exc:
            raise StoreError("failed to update credential digest") from exc
        row_count: int = result.rowcount  # type: ignore[attr-defined]
        return row_count

    async def list_page(self, *, limit: int, offset: int) -> list[Account]:
        """Fetch a page of accounts ordered by id.

        Raises:
            StoreError: The query failed.
        """
        stmt = (
            select(AccountRecord)
            .order_by(AccountRecord.id)
            .limit(limit)
            .offset(offset)
        )
        try:
            async with self._session_factory() as db:
                result = await db.execute(stmt)
                records = result.scalars().all()
        except SQLAlchemyError as exc:
            raise StoreError("failed to list accounts") from exc
        return [_to_account(r) for r in records]
