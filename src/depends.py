from functools import lru_cache
from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.repositories.ledger_aggregate_repository import SqlAlchemyLedgerAggregateRepository
from src.adapter.repositories.membership_directory import SqlAlchemyMembershipDirectory
from src.adapter.repositories.period_repository import SqlAlchemyPeriodRepository
from src.adapter.services.cache_backend import create_cache_backend
from src.adapter.services.notification_service import create_notification_service
from src.app.services.balance_engine import BalanceEngine
from src.app.services.cache_service import CacheService
from src.app.services.notification_service import NotificationService
from src.app.services.period_guard import PeriodGuard
from src.app.services.permission_gate import PermissionGate
from src.domain.room_settings import PeriodMode

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


def get_session_factory():
    """Factory for read paths that open one session per concurrent query"""
    return AsyncSessionLocal


@lru_cache
def get_cache_service() -> CacheService:
    backend = create_cache_backend(ApplicationConfig.CACHE_BACKEND, ApplicationConfig.REDIS_URL)
    return CacheService(backend)


@lru_cache
def get_notifier() -> NotificationService:
    return create_notification_service(ApplicationConfig.NOTIFICATION_WEBHOOK_URL)


def get_actor_id(x_user_id: str = Header(..., min_length=1, description="Authenticated user id")) -> str:
    return x_user_id


def get_permission_gate(session_factory=Depends(get_session_factory)) -> PermissionGate:
    directory = SqlAlchemyMembershipDirectory(session_factory)
    return PermissionGate(directory, ApplicationConfig.PRIVILEGED_ROLES)


def get_balance_engine(
    session_factory=Depends(get_session_factory),
    gate: PermissionGate = Depends(get_permission_gate),
) -> BalanceEngine:
    return BalanceEngine(SqlAlchemyLedgerAggregateRepository(session_factory), gate.directory)


def get_period_guard(session: AsyncSession = Depends(get_session)) -> PeriodGuard:
    return PeriodGuard(SqlAlchemyPeriodRepository(session))


def default_period_mode() -> PeriodMode:
    return PeriodMode(str(ApplicationConfig.DEFAULT_PERIOD_MODE).upper())
