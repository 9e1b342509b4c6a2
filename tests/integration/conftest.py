import pytest
import pytest_asyncio
from sqlmodel import SQLModel

import src.domain  # noqa: F401  registers the tables on SQLModel.metadata
from src.depends import StoreCreditUseCases, create_session_factory
from src.domain.store_credit_category import StoreCreditCategory
from src.domain.store_credit_type import StoreCreditType


class IntegrationConfig:
    STORE_CREDIT_CREDIT_TO_NEW_ALLOCATION = False
    STORE_CREDIT_NON_EXPIRING_CATEGORIES = ["Gift Card"]
    RECONCILIATION_ENABLED = True
    RECONCILIATION_INTERVAL_SECONDS = 60


@pytest.fixture
def db_uri(tmp_path):
    """Throwaway SQLite file per test"""
    return f"sqlite+aiosqlite:///{tmp_path / 'store_credit_test.db'}"


@pytest_asyncio.fixture(scope="function")
async def session_factory(db_uri):
    """Create the tables and a session factory on the test database"""
    engine, factory = create_session_factory(db_uri)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield factory

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a new database session for each test"""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def seed(db_session):
    """Categories and the two credit types"""
    exchange = StoreCreditCategory(name="Exchange")
    gift_card = StoreCreditCategory(name="Gift Card")
    expiring = StoreCreditType(name="Expiring", priority=1)
    non_expiring = StoreCreditType(name="Non-expiring", priority=2)
    db_session.add_all([exchange, gift_card, expiring, non_expiring])
    await db_session.commit()
    for entity in (exchange, gift_card, expiring, non_expiring):
        await db_session.refresh(entity)

    # Ids only; a rollback in a test expires the entities themselves
    return {
        "exchange": exchange.id,
        "gift_card": gift_card.id,
        "expiring": expiring.id,
        "non_expiring": non_expiring.id,
    }


@pytest.fixture
def integration_config():
    return IntegrationConfig


@pytest_asyncio.fixture
async def use_cases(db_session, seed, integration_config):
    return StoreCreditUseCases(db_session, config=integration_config)
