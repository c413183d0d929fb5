"""Shared test fixtures.

Every test gets its own in-memory SQLite database, mock providers and a
controllable clock. API tests drive the real FastAPI app through
httpx.ASGITransport with the services swapped in via dependency overrides.
"""

from collections.abc import AsyncGenerator, Iterator
from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from user_register.models import Base
from user_register.providers import factory
from user_register.providers.address.base import Address
from user_register.providers.address.mock_adapter import MockAddressResolver
from user_register.providers.mail.mock_adapter import MockMailSender
from user_register.repositories.account_repository import AccountRepository
from user_register.repositories.verification_code_repository import (
    VerificationCodeRepository,
)
from user_register.services.account_service import AccountService
from user_register.services.credential_hasher import CredentialHasher
from user_register.services.mail_verification import MailVerificationEngine
from user_register.services.session_tokens import SessionTokenIssuer

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Security: test-only values. Production reads these from the environment.
TEST_TOKEN_SECRET = "test-secret-key-that-is-at-least-32-characters-long"  # nosec B105
TEST_PEPPER = "test-pepper-current"  # nosec B105
TEST_ISSUER = "user-register"
TEST_AUDIENCE = "user-register"

TOKEN_LIFETIME = timedelta(minutes=10)
CODE_TTL = timedelta(minutes=60)
BCRYPT_TEST_ROUNDS = 4  # Low cost factor for fast tests

START_TIME = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)

SAMPLE_ZIP_CODE = "01001000"
SAMPLE_ADDRESS = Address(
    street="Praça da Sé",
    neighborhood="Sé",
    city="São Paulo",
    state="SP",
    zip_code="01001-000",
)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


# =============================================================================
# Clock and Database
# =============================================================================


@pytest.fixture
def clock() -> FakeClock:
    """Clock fixed at START_TIME until advanced."""
    return FakeClock(START_TIME)


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with the schema created.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def account_repo(session_factory) -> AccountRepository:
    return AccountRepository(session_factory)


@pytest.fixture
def code_repo(session_factory) -> VerificationCodeRepository:
    return VerificationCodeRepository(session_factory)


# =============================================================================
# Providers
# =============================================================================


@pytest.fixture
def mail_sender() -> MockMailSender:
    """Mail sender that records codes instead of sending them."""
    return MockMailSender()


@pytest.fixture
def address_resolver() -> MockAddressResolver:
    """Resolver answering SAMPLE_ADDRESS for SAMPLE_ZIP_CODE."""
    return MockAddressResolver({SAMPLE_ZIP_CODE: SAMPLE_ADDRESS}, default=SAMPLE_ADDRESS)


# =============================================================================
# Services
# =============================================================================


@pytest.fixture
def hasher() -> CredentialHasher:
    return CredentialHasher(current_pepper=TEST_PEPPER, rounds=BCRYPT_TEST_ROUNDS)


@pytest.fixture
def token_issuer(clock: FakeClock) -> SessionTokenIssuer:
    return SessionTokenIssuer(
        secret=TEST_TOKEN_SECRET,
        issuer=TEST_ISSUER,
        audience=TEST_AUDIENCE,
        lifetime=TOKEN_LIFETIME,
        clock=clock,
    )


@pytest.fixture
def mail_verification(
    code_repo: VerificationCodeRepository,
    mail_sender: MockMailSender,
    clock: FakeClock,
) -> MailVerificationEngine:
    return MailVerificationEngine(
        codes=code_repo,
        sender=mail_sender,
        ttl=CODE_TTL,
        clock=clock,
    )


@pytest.fixture
def account_service(
    account_repo: AccountRepository,
    hasher: CredentialHasher,
    token_issuer: SessionTokenIssuer,
    address_resolver: MockAddressResolver,
    mail_verification: MailVerificationEngine,
) -> AccountService:
    return AccountService(
        accounts=account_repo,
        hasher=hasher,
        tokens=token_issuer,
        address_resolver=address_resolver,
        mail_verification=mail_verification,
    )


# =============================================================================
# API Test Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def client(
    account_service: AccountService,
    token_issuer: SessionTokenIssuer,
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against the app with test services injected.

    App exceptions are not re-raised so the 500 handler can be asserted on.
    """
    from user_register.api.deps import get_account_service, get_session_token_issuer
    from user_register.main import app

    app.dependency_overrides[get_account_service] = lambda: account_service
    app.dependency_overrides[get_session_token_issuer] = lambda: token_issuer

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# =============================================================================
# Autouse Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def disable_rate_limiting() -> Iterator[None]:
    """Disable rate limiting during tests.

    Rate limiting is tested separately; disable for other tests to avoid
    flaky failures from rate limit triggers.
    """
    from user_register.core.rate_limiting import limiter

    original_enabled = limiter.enabled
    limiter.enabled = False

    yield

    limiter.enabled = original_enabled


@pytest.fixture(autouse=True)
def reset_provider_singletons() -> Iterator[None]:
    """Reset provider factory singletons around each test."""
    factory.reset_providers()
    yield
    factory.reset_providers()
