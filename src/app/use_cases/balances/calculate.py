"""Per-room and per-user aggregation Use Cases

CalculateTotalExpenses, CalculateMealRate, CalculateUserMealCount and
CalculateBalance. Each is a cached read over one resolved period.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.cache_service import CacheKey, CacheScope, aggregation_tags
from src.domain.errors import LedgerError
from .base import BalanceQuery
from .dtos import BalanceDTO, BalanceQueryDTO, MealRateDTO, TotalExpensesDTO, UserMealCountDTO

logger = logging.getLogger(__name__)


class CalculateTotalExpenses(BalanceQuery):
    """Use Case: Sum of expenses plus purchased shopping in the period"""

    async def execute(self, query: BalanceQueryDTO) -> Result[TotalExpensesDTO]:
        try:
            await self.gate.require_member(query.actor_id, query.room_id, "view expenses")
            period = await self._resolve(query)
            period_id = period.id if period else None

            async def compute() -> TotalExpensesDTO:
                total = await self.engine.calculate_total_expenses(query.room_id, period_id)
                return TotalExpensesDTO(room_id=query.room_id, period_id=period_id, total_expense=total)

            value = await self.cache.get_or_set(
                CacheKey(CacheScope.TOTAL_EXPENSES, query.room_id, period_id),
                compute,
                TotalExpensesDTO,
                ttl=self._ttl_for(period),
                tags=aggregation_tags(query.room_id, period_id),
            )
            return Return.ok(value)

        except LedgerError as e:
            return Return.err(e.to_error())
        except Exception as e:
            logger.error(f"Failed to calculate total expenses of room {query.room_id}: {e}")
            return Return.err(Error(code="CALCULATE_TOTAL_EXPENSES_FAILED", message="Failed to calculate total expenses", reason=str(e)))


class CalculateMealRate(BalanceQuery):
    """
    Use Case: Meal rate of the period

    meal_rate = total_expense / (meals + guest meals), or 0 without meals.
    """

    async def execute(self, query: BalanceQueryDTO) -> Result[MealRateDTO]:
        try:
            await self.gate.require_member(query.actor_id, query.room_id, "view the meal rate")
            period = await self._resolve(query)
            period_id = period.id if period else None

            async def compute() -> MealRateDTO:
                rate = await self.engine.calculate_meal_rate(query.room_id, period_id)
                return MealRateDTO(
                    room_id=query.room_id,
                    period_id=period_id,
                    meal_rate=rate.meal_rate,
                    total_meals=rate.total_meals,
                    total_expense=rate.total_expense,
                )

            value = await self.cache.get_or_set(
                CacheKey(CacheScope.MEAL_RATE, query.room_id, period_id),
                compute,
                MealRateDTO,
                ttl=self._ttl_for(period),
                tags=aggregation_tags(query.room_id, period_id),
            )
            return Return.ok(value)

        except LedgerError as e:
            return Return.err(e.to_error())
        except Exception as e:
            logger.error(f"Failed to calculate meal rate of room {query.room_id}: {e}")
            return Return.err(Error(code="CALCULATE_MEAL_RATE_FAILED", message="Failed to calculate meal rate", reason=str(e)))


class CalculateUserMealCount(BalanceQuery):
    """Use Case: Own meals plus own guest meals of one member (NotFoundError for non-members)"""

    async def execute(self, query: BalanceQueryDTO) -> Result[UserMealCountDTO]:
        try:
            user_id = query.target_user_id
            await self.gate.require_can_act_for(query.actor_id, user_id, query.room_id, "view meal counts")
            await self._require_target_member(user_id, query.room_id)
            period = await self._resolve(query)
            period_id = period.id if period else None

            async def compute() -> UserMealCountDTO:
                count = await self.engine.calculate_user_meal_count(user_id, query.room_id, period_id)
                return UserMealCountDTO(room_id=query.room_id, period_id=period_id, user_id=user_id, meal_count=count)

            value = await self.cache.get_or_set(
                CacheKey(CacheScope.USER_MEAL_COUNT, query.room_id, period_id, user_id),
                compute,
                UserMealCountDTO,
                ttl=self._ttl_for(period),
                tags=aggregation_tags(query.room_id, period_id),
            )
            return Return.ok(value)

        except LedgerError as e:
            return Return.err(e.to_error())
        except Exception as e:
            logger.error(f"Failed to count meals in room {query.room_id}: {e}")
            return Return.err(Error(code="CALCULATE_USER_MEAL_COUNT_FAILED", message="Failed to count meals", reason=str(e)))


class CalculateBalance(BalanceQuery):
    """Use Case: Net of signed transactions targeting one member"""

    async def execute(self, query: BalanceQueryDTO) -> Result[BalanceDTO]:
        try:
            user_id = query.target_user_id
            await self.gate.require_can_act_for(query.actor_id, user_id, query.room_id, "view balances")
            await self._require_target_member(user_id, query.room_id)
            period = await self._resolve(query)
            period_id = period.id if period else None

            async def compute() -> BalanceDTO:
                balance = await self.engine.calculate_balance(user_id, query.room_id, period_id)
                return BalanceDTO(room_id=query.room_id, period_id=period_id, user_id=user_id, balance=balance)

            value = await self.cache.get_or_set(
                CacheKey(CacheScope.USER_BALANCE, query.room_id, period_id, user_id, qualifier="net"),
                compute,
                BalanceDTO,
                ttl=self._ttl_for(period),
                tags=aggregation_tags(query.room_id, period_id),
            )
            return Return.ok(value)

        except LedgerError as e:
            return Return.err(e.to_error())
        except Exception as e:
            logger.error(f"Failed to calculate balance in room {query.room_id}: {e}")
            return Return.err(Error(code="CALCULATE_BALANCE_FAILED", message="Failed to calculate balance", reason=str(e)))
