import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain  # noqa: F401  registers every table on SQLModel.metadata
from src.adapter.services.cache_backend import MemoryCacheBackend
from src.adapter.services.notification_service import LoggingNotificationService
from src.app.services.cache_service import CacheService
from src.depends import get_cache_service, get_notifier, get_session, get_session_factory
from src.domain.room_member import RoomMember
from tests.factories import ROLES, ROOM_ID


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Create a file-backed SQLite engine so separate sessions share one database"""
    test_db_url = f"sqlite+aiosqlite:///{tmp_path}/ledger_test.db"

    engine = create_async_engine(test_db_url, echo=False, future=True)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a new database session for each test"""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def members(db_session):
    """Seed ROOM_ID with admin_1, manager_1, member_1 and member_2"""
    rows = [RoomMember(room_id=ROOM_ID, user_id=user_id, role=role) for user_id, role in ROLES.items()]
    db_session.add_all(rows)
    await db_session.commit()
    return rows


@pytest_asyncio.fixture
async def cache():
    return CacheService(MemoryCacheBackend())


@pytest_asyncio.fixture
async def client(session_factory, cache, members):
    """Create test client with session, cache and notifier overrides"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_cache_service] = lambda: cache
    app.dependency_overrides[get_notifier] = LoggingNotificationService

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def services(db_session, session_factory, cache, members):
    from tests.integration.wiring import Services

    return Services(db_session, session_factory, cache)
