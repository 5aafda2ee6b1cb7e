"""
Test fixtures and configuration.
"""

import base64
from typing import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from nacl.signing import SigningKey
from sqlalchemy.ext.asyncio import AsyncSession

from huissier.config.settings import Settings, override_settings, reset_settings
from huissier.domain.value_objects.wallet_address import WalletAddress
from huissier.infrastructure.persistence.database import Database
from huissier.infrastructure.persistence.models import Base

# In-memory SQLite, one shared connection per Database instance
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Deterministic test keypair (seed 0x00..0x1f)
TEST_SEED = bytes(range(32))

TEST_ORIGIN = "http://localhost:3000"


@pytest.fixture
def test_settings() -> Settings:
    """Provide isolated settings and install them globally."""
    settings = Settings(
        ENV="test",
        DATABASE_URL=TEST_DATABASE_URL,
        IDENTITY_BACKEND="local",
        JWT_SECRET_KEY="test-secret-key",
        CORS_ORIGINS=[TEST_ORIGIN, "https://dgfun.xyz"],
        LOG_LEVEL="WARNING",
        NONCE_LENGTH=12,
        NONCE_TTL_SECONDS=300,
        REQUIRE_ISSUED_NONCE=True,
    )
    override_settings(settings)
    yield settings
    reset_settings()


@pytest.fixture
def signing_key() -> SigningKey:
    """Provide deterministic Ed25519 signing key."""
    return SigningKey(TEST_SEED)


@pytest.fixture
def wallet_address(signing_key: SigningKey) -> str:
    """Base58 address of the test signing key."""
    return WalletAddress.from_public_key(bytes(signing_key.verify_key)).address


@pytest.fixture
def sign(signing_key: SigningKey) -> Callable[[bytes], str]:
    """Sign bytes and return base64 signature."""

    def _sign(message: bytes) -> str:
        signature = signing_key.sign(message).signature
        return base64.b64encode(signature).decode("ascii")

    return _sign


@pytest_asyncio.fixture(scope="function")
async def test_db() -> AsyncGenerator[Database, None]:
    """
    Create test database and tables.

    Each test gets a clean database.
    """
    db = Database(database_url=TEST_DATABASE_URL, echo=False)
    await db.connect()
    await db.create_tables(Base.metadata)

    yield db

    await db.disconnect()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_db: Database) -> AsyncGenerator[AsyncSession, None]:
    """Provide database session for tests."""
    async with test_db.session() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def app(test_settings: Settings, test_db: Database):
    """
    Provide application wired to the test database.

    ASGITransport does not run lifespan, so the container is prepared here.
    """
    from huissier.di.container import get_container, shutdown_container
    from huissier.main import create_app

    application = create_app(test_settings)
    container = get_container()
    container._database = test_db

    yield application

    await shutdown_container()


@pytest_asyncio.fixture(scope="function")
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide HTTP client for API testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"Origin": TEST_ORIGIN},
    ) as http_client:
        yield http_client
