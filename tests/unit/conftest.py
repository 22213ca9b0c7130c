import pytest
from datetime import date
from unittest.mock import AsyncMock, MagicMock

from src.adapter.services.cache_backend import MemoryCacheBackend
from src.app.services.cache_service import CacheService
from src.app.services.permission_gate import PermissionGate
from src.domain.period import PeriodStatus
from src.domain.room_member import RoomMember
from tests.factories import ROLES, ROOM_ID, make_period


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def mock_directory():
    """Membership directory answering from ROLES for ROOM_ID only"""
    directory = MagicMock()

    async def resolve_role(user_id, room_id):
        return ROLES.get(user_id) if room_id == ROOM_ID else None

    async def list_members(room_id):
        if room_id != ROOM_ID:
            return []
        return [RoomMember(room_id=room_id, user_id=user_id, role=role) for user_id, role in ROLES.items()]

    directory.resolve_role = AsyncMock(side_effect=resolve_role)
    directory.list_members = AsyncMock(side_effect=list_members)
    return directory


@pytest.fixture
def gate(mock_directory):
    return PermissionGate(mock_directory)


@pytest.fixture
def cache_backend():
    return MemoryCacheBackend()


@pytest.fixture
def cache(cache_backend):
    return CacheService(cache_backend)


@pytest.fixture
def mock_notifier():
    notifier = MagicMock()
    notifier.notify_room = AsyncMock(return_value=True)
    return notifier


@pytest.fixture
def active_period():
    return make_period()


@pytest.fixture
def ended_period():
    return make_period(id="period_0", name="September 2026", start_date=date(2026, 9, 1),
                       end_date=date(2026, 9, 30), status=PeriodStatus.ENDED)
