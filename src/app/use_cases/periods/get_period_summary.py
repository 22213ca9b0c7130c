"""GetPeriodSummary Use Case

Ledger totals for one period: meals, guest meals, expenses, purchased
shopping, credits received and member count.
"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.balance_engine import BalanceEngine
from src.app.services.cache_service import CacheKey, CacheScope, CacheService, aggregation_tags
from src.app.services.period_guard import PeriodGuard
from src.app.services.permission_gate import PermissionGate
from src.domain.errors import LedgerError, NotFoundError
from .dtos import PeriodDTO, PeriodQueryDTO, PeriodSummaryDTO

logger = logging.getLogger(__name__)


class GetPeriodSummary:

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

    async def execute(self, query: PeriodQueryDTO) -> Result[PeriodSummaryDTO]:
        try:
            if query.actor_id:
                await self.gate.require_member(query.actor_id, query.room_id, "view period summaries")

            period = await self.guard.resolve(query.room_id, query.period_id)
            if period is None:
                raise NotFoundError(f"Room {query.room_id} has no active period")

            period_dto = PeriodDTO.from_entity(period)
            summary: Optional[PeriodSummaryDTO] = await self.cache.get_or_set(
                CacheKey(CacheScope.PERIOD_SUMMARY, query.room_id, period.id),
                lambda: self._compute(period_dto),
                PeriodSummaryDTO,
                ttl=self.closed_ttl if period_dto.is_closed else self.ttl,
                tags=aggregation_tags(query.room_id, period.id),
            )
            return Return.ok(summary)

        except LedgerError as e:
            return Return.err(e.to_error())
        except Exception as e:
            logger.error(f"Failed to summarize period in room {query.room_id}: {e}")
            return Return.err(Error(code="GET_PERIOD_SUMMARY_FAILED", message="Failed to get period summary", reason=str(e)))

    async def _compute(self, period: PeriodDTO) -> PeriodSummaryDTO:
        totals = await self.engine.period_totals(period.room_id, period.id)
        return PeriodSummaryDTO(
            period=period,
            total_meals=totals.total_meals,
            total_guest_meals=totals.total_guest_meals,
            total_expenses=totals.total_expenses,
            total_shopping=totals.total_shopping,
            total_expense=totals.total_expense,
            meal_rate=totals.meal_rate,
            total_credits=totals.total_credits,
            member_count=totals.member_count,
        )
