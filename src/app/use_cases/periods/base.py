"""Shared plumbing for period lifecycle use cases"""

import logging
from typing import Optional
from src.app.repositories.period_repository import PeriodRepository
from src.app.services.cache_service import CacheService, room_tag
from src.app.services.notification_service import NotificationKind, NotificationService
from src.app.services.permission_gate import PermissionGate
from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import NotFoundError
from src.domain.period import Period

logger = logging.getLogger(__name__)


async def unique_period_name(period_repo: PeriodRepository, room_id: str, name: str) -> str:
    """``name``, or ``name (2)``, ``name (3)``... whichever is free in the room"""
    name = name.strip()
    taken = set(await period_repo.names_like(room_id, name))
    if name not in taken:
        return name

    suffix = 2
    while f"{name} ({suffix})" in taken:
        suffix += 1
    return f"{name} ({suffix})"


class PeriodCommand:
    """
    Base for use cases that change a room's periods

    Subclasses commit through the unit of work, then call ``_announce`` so
    every cached lookup and aggregation of the room is dropped before the
    result is returned.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        period_repo: PeriodRepository,
        gate: PermissionGate,
        cache: CacheService,
        notifier: Optional[NotificationService] = None,
    ):
        self.uow = uow
        self.period_repo = period_repo
        self.gate = gate
        self.cache = cache
        self.notifier = notifier

    async def _load(self, room_id: str, period_id: Optional[str]) -> Period:
        if period_id:
            period = await self.period_repo.get_by_id(period_id)
            if period is None or period.room_id != room_id:
                raise NotFoundError(f"Period {period_id} not found in room {room_id}")
            return period

        period = await self.period_repo.get_active(room_id)
        if period is None:
            raise NotFoundError(f"Room {room_id} has no active period")
        return period

    async def _announce(self, room_id: str, kind: NotificationKind, message: str) -> None:
        await self.cache.invalidate(room_tag(room_id))
        logger.info(f"Room {room_id}: {message}")
        if self.notifier is not None:
            await self.notifier.notify_room(room_id, kind, message)
