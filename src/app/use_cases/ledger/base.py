"""Shared plumbing for ledger writes"""

import logging
from src.app.services.cache_service import CacheService, period_tag
from src.app.services.period_guard import PeriodGuard
from src.app.services.permission_gate import PermissionGate
from src.app.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class LedgerCommand:
    """
    Base for ledger writes

    Write path: permission gate, period guard, ledger write, commit, then
    synchronous invalidation of the period's aggregations before returning.
    """

    def __init__(self, uow: UnitOfWork, guard: PeriodGuard, gate: PermissionGate, cache: CacheService):
        self.uow = uow
        self.guard = guard
        self.gate = gate
        self.cache = cache

    async def _commit(self, period_id: str) -> None:
        await self.uow.commit()
        await self.cache.invalidate(period_tag(period_id))
