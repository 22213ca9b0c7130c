"""GetGroupBalanceSummary Use Case

Figures for every member of a room at once, from one grouped query per
ledger.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.cache_service import CacheKey, CacheScope, aggregation_tags
from src.domain.errors import LedgerError
from .base import BalanceQuery
from .dtos import BalanceQueryDTO, GroupBalanceSummaryDTO, PeriodRefDTO

logger = logging.getLogger(__name__)


class GetGroupBalanceSummary(BalanceQuery):
    """
    Use Case: Group balance summary

    Business Rules:
    1. Privileged tier only
    2. Shared quantities (total expense, total meals, meal rate) computed once
    3. Per-member figures derived from grouped aggregates, never one query
       per member
    4. Room without members is NotFoundError
    """

    async def execute(self, query: BalanceQueryDTO) -> Result[GroupBalanceSummaryDTO]:
        try:
            await self.gate.require_privileged(query.actor_id, query.room_id, "view the group balance summary")

            period = await self._resolve(query)
            period_id = period.id if period else None
            period_ref = PeriodRefDTO.from_entity(period)

            async def compute() -> GroupBalanceSummaryDTO:
                summary = await self.engine.summarize_group(query.room_id, period_id)
                return GroupBalanceSummaryDTO.from_summary(summary, period_ref, query.include_details)

            value = await self.cache.get_or_set(
                CacheKey(
                    CacheScope.GROUP_SUMMARY,
                    query.room_id,
                    period_id,
                    qualifier="details" if query.include_details else "basic",
                ),
                compute,
                GroupBalanceSummaryDTO,
                ttl=self._ttl_for(period),
                tags=aggregation_tags(query.room_id, period_id),
            )
            return Return.ok(value)

        except LedgerError as e:
            return Return.err(e.to_error())
        except Exception as e:
            logger.error(f"Failed to summarize balances of room {query.room_id}: {e}")
            return Return.err(
                Error(code="GET_GROUP_BALANCE_SUMMARY_FAILED", message="Failed to get group balance summary", reason=str(e))
            )
