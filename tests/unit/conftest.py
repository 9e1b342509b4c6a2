import pytest
from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.domain.store_credit import StoreCredit
from src.domain.store_credit_event import StoreCreditAction, StoreCreditEvent


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def make_store_credit():
    """Factory for StoreCredit entities"""
    def _make(
        store_credit_id: int = 1,
        amount: str = "100.00",
        amount_used: str = "0.00",
        amount_authorized: str = "0.00",
        currency: str = "USD",
        user_id: int = 42,
    ) -> StoreCredit:
        return StoreCredit(
            id=store_credit_id,
            user_id=user_id,
            created_by_id=1,
            category_id=3,
            type_id=1,
            amount=Decimal(amount),
            amount_used=Decimal(amount_used),
            amount_authorized=Decimal(amount_authorized),
            currency=currency,
            created_at=datetime.utcnow(),
            updated_at=datetime.utcnow(),
        )
    return _make


@pytest.fixture
def make_event():
    """Factory for StoreCreditEvent entities"""
    def _make(
        action: StoreCreditAction,
        amount: str,
        authorization_code: str = "1-SC-20240101000000000000",
        event_id: int = 10,
        store_credit_id: int = 1,
        user_total_amount: str = "100.00",
    ) -> StoreCreditEvent:
        return StoreCreditEvent(
            id=event_id,
            store_credit_id=store_credit_id,
            action=action,
            amount=Decimal(amount),
            user_total_amount=Decimal(user_total_amount),
            authorization_code=authorization_code,
            created_at=datetime(2024, 1, 15, 10, 30, 0),
        )
    return _make


@pytest.fixture
def mock_store_credit_repo():
    """Mock store credit repository"""
    repo = MagicMock()
    repo.update_amounts = AsyncMock()
    repo.get_user_total_amount = AsyncMock(return_value=Decimal("100.00"))
    repo.lock_user = AsyncMock()
    return repo


@pytest.fixture
def mock_event_repo():
    """Mock store credit event repository; create() echoes the event back with an id"""
    repo = MagicMock()

    async def _create(event):
        event.id = 500
        return event

    repo.create = AsyncMock(side_effect=_create)
    repo.get_latest_by_authorization_code = AsyncMock(return_value=None)
    repo.get_credited_amount = AsyncMock(return_value=Decimal("0.00"))
    repo.get_creation_event = AsyncMock(return_value=None)
    return repo
