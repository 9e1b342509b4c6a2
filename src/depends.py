from typing import Tuple
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.repositories.payment_repository import SqlAlchemyPaymentRepository
from src.adapter.repositories.store_credit_category_repository import (
    SqlAlchemyStoreCreditCategoryRepository,
    SqlAlchemyStoreCreditTypeRepository,
)
from src.adapter.repositories.store_credit_event_repository import SqlAlchemyStoreCreditEventRepository
from src.adapter.repositories.store_credit_repository import SqlAlchemyStoreCreditRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.store_credit_allocator import StoreCreditAllocator
from src.app.use_cases.store_credit import (
    AuthorizeStoreCredit,
    CaptureStoreCredit,
    CreateStoreCredit,
    CreditStoreCredit,
    DestroyStoreCredit,
    GetEventOrder,
    GetPaymentActions,
    GetStoreCredit,
    ListStoreCreditEvents,
    ReconcileStoreCredits,
    ValidateAuthorization,
    VoidStoreCredit,
)


def create_session_factory(db_uri: str) -> Tuple[AsyncEngine, sessionmaker]:
    engine = create_async_engine(db_uri, echo=False, future=True)
    session_factory = sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )
    return engine, session_factory


class StoreCreditUseCases:
    """
    Store credit use cases wired to one session

    Configuration values are read once here and passed to the use cases
    explicitly.
    """

    def __init__(self, session: AsyncSession, config=ApplicationConfig):
        self.session = session
        self.uow = SqlAlchemyUnitOfWork(session)
        self.store_credit_repo = SqlAlchemyStoreCreditRepository(session)
        self.event_repo = SqlAlchemyStoreCreditEventRepository(session)
        self.payment_repo = SqlAlchemyPaymentRepository(session)
        self.allocator = StoreCreditAllocator(
            store_credit_repo=self.store_credit_repo,
            event_repo=self.event_repo,
            category_repo=SqlAlchemyStoreCreditCategoryRepository(session),
            type_repo=SqlAlchemyStoreCreditTypeRepository(session),
            non_expiring_categories=config.STORE_CREDIT_NON_EXPIRING_CATEGORIES,
        )

        self.create = CreateStoreCredit(self.uow, self.allocator)
        self.authorize = AuthorizeStoreCredit(self.uow, self.store_credit_repo, self.event_repo)
        self.capture = CaptureStoreCredit(self.uow, self.store_credit_repo, self.event_repo)
        self.void = VoidStoreCredit(self.uow, self.store_credit_repo, self.event_repo)
        self.credit = CreditStoreCredit(
            self.uow,
            self.store_credit_repo,
            self.event_repo,
            self.allocator,
            credit_to_new_allocation=config.STORE_CREDIT_CREDIT_TO_NEW_ALLOCATION,
        )
        self.validate_authorization = ValidateAuthorization(self.store_credit_repo)
        self.get = GetStoreCredit(self.store_credit_repo)
        self.destroy = DestroyStoreCredit(self.uow, self.store_credit_repo)
        self.list_events = ListStoreCreditEvents(self.event_repo)
        self.get_event_order = GetEventOrder(self.event_repo, self.payment_repo)
        self.get_payment_actions = GetPaymentActions(self.store_credit_repo, self.payment_repo)
        self.reconcile = ReconcileStoreCredits(self.store_credit_repo, self.event_repo)
