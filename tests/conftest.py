import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from cardledger.config import Settings
from cardledger.db.database import get_session
from cardledger.main import app
from cardledger.models import failure as failure_module
from cardledger.models.db import Base
from cardledger.services.ledger import CardLedger

ADMIN = "SP1ADMIN000000000000000000000000000"


@pytest.fixture(autouse=True)
def clear_finalized_responses():
    """Clear the finalized responses set between tests.

    Python reuses memory addresses for new objects, so id() values from
    one test can collide with responses finalized in another.
    """
    failure_module._finalized_responses.clear()
    yield
    failure_module._finalized_responses.clear()


@pytest.fixture
def ledger_settings() -> Settings:
    """Settings with both registries bootstrapped to ADMIN."""
    return Settings(card_registry_admin=ADMIN, grading_registry_admin=ADMIN)


@pytest.fixture
def ledger(ledger_settings: Settings) -> CardLedger:
    """A fresh, empty ledger."""
    return CardLedger.from_settings(ledger_settings)


@pytest.fixture
def failing_write():
    """A write-through stand-in that fails the way a dropped connection does."""

    async def write(*args, **kwargs):
        raise OperationalError("INSERT", {}, ConnectionError("connection lost"))

    return write


@pytest.fixture
async def async_engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def session(async_engine) -> AsyncSession:
    """Provide a database session for tests."""
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session


@pytest.fixture
async def client(async_engine, ledger: CardLedger):
    """Provide an async test client with a fresh ledger and overridden database session."""
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_session():
        async with async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    app.state.ledger = ledger

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
