"""GetUserBalance Use Case

Balance read with optional detail figures.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.cache_service import CacheKey, CacheScope, aggregation_tags
from src.domain.errors import LedgerError
from .base import BalanceQuery
from .dtos import BalanceQueryDTO, PeriodRefDTO, UserBalanceDTO

logger = logging.getLogger(__name__)


class GetUserBalance(BalanceQuery):
    """
    Use Case: Balance of one member

    Business Rules:
    1. Members read their own figures, privileged tiers anyone's
    2. Target must be a member of the room (NotFoundError)
    3. Detail figures (available balance, total spent, meal count, meal
       rate) are only computed when include_details is set
    """

    async def execute(self, query: BalanceQueryDTO) -> Result[UserBalanceDTO]:
        try:
            user_id = query.target_user_id
            await self.gate.require_can_act_for(query.actor_id, user_id, query.room_id, "view balances")

            role = await self._require_target_member(user_id, query.room_id)

            period = await self._resolve(query)
            period_id = period.id if period else None
            period_ref = PeriodRefDTO.from_entity(period)

            async def compute() -> UserBalanceDTO:
                if not query.include_details:
                    balance = await self.engine.calculate_balance(user_id, query.room_id, period_id)
                    return UserBalanceDTO(user_id=user_id, balance=balance, role=role, current_period=period_ref)

                figures = await self.engine.calculate_user_figures(user_id, query.room_id, period_id, role=role)
                return UserBalanceDTO.from_figures(figures, period_ref, include_details=True)

            value = await self.cache.get_or_set(
                CacheKey(
                    CacheScope.USER_BALANCE,
                    query.room_id,
                    period_id,
                    user_id,
                    qualifier="details" if query.include_details else "basic",
                ),
                compute,
                UserBalanceDTO,
                ttl=self._ttl_for(period),
                tags=aggregation_tags(query.room_id, period_id),
            )
            return Return.ok(value)

        except LedgerError as e:
            return Return.err(e.to_error())
        except Exception as e:
            logger.error(f"Failed to get balance of user in room {query.room_id}: {e}")
            return Return.err(Error(code="GET_USER_BALANCE_FAILED", message="Failed to get user balance", reason=str(e)))
