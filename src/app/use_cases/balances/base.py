"""Shared plumbing for balance reads"""

from typing import Optional
from src.app.services.balance_engine import BalanceEngine
from src.app.services.cache_service import CacheService
from src.app.services.period_guard import PeriodGuard
from src.app.services.permission_gate import PermissionGate
from src.domain.errors import NotFoundError
from src.domain.period import Period, PeriodStatus
from .dtos import BalanceQueryDTO


class BalanceQuery:
    """
    Base for cached balance reads

    Read path: check access, resolve the period, then cache lookup with the
    engine computing on a miss. Entries for periods that can no longer
    change live longer.
    """

    def __init__(
        self,
        guard: PeriodGuard,
        engine: BalanceEngine,
        gate: PermissionGate,
        cache: CacheService,
        ttl: int = 180,
        closed_ttl: int = 3600,
    ):
        self.guard = guard
        self.engine = engine
        self.gate = gate
        self.cache = cache
        self.ttl = ttl
        self.closed_ttl = closed_ttl

    async def _resolve(self, query: BalanceQueryDTO) -> Optional[Period]:
        return await self.guard.readable_period(query.room_id, query.period_id, query.require_period)

    def _ttl_for(self, period: Optional[Period]) -> int:
        if period is not None and (period.is_locked or period.status == PeriodStatus.ARCHIVED):
            return self.closed_ttl
        return self.ttl

    async def _require_target_member(self, user_id: str, room_id: str) -> str:
        role = await self.gate.directory.resolve_role(user_id, room_id)
        if role is None:
            raise NotFoundError(f"User {user_id} is not a member of room {room_id}")
        return role
