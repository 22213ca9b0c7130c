"""Balance API Routes

FastAPI routes for meal rate, expense totals and balances of a room.
Responses round money to two decimals; nothing else does.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query

from config import ApplicationConfig
from src.api.error import ClientError
from src.api.schemas.balance_response import (
    BalanceResponseSchema,
    GroupBalanceSummaryResponseSchema,
    MealRateResponseSchema,
    TotalExpensesResponseSchema,
    UserBalanceResponseSchema,
    UserMealCountResponseSchema,
)
from src.app.services.balance_engine import BalanceEngine
from src.app.services.cache_service import CacheService
from src.app.services.period_guard import PeriodGuard
from src.app.services.permission_gate import PermissionGate
from src.app.use_cases.balances import (
    BalanceQueryDTO,
    CalculateBalance,
    CalculateMealRate,
    CalculateTotalExpenses,
    CalculateUserMealCount,
    GetGroupBalanceSummary,
    GetUserBalance,
)
from src.depends import get_actor_id, get_balance_engine, get_cache_service, get_period_guard, get_permission_gate

router = APIRouter(prefix="/balances", tags=["Balances"])


class BalanceReadContext:
    """Collaborators every balance read needs, resolved once per request"""

    def __init__(
        self,
        guard: PeriodGuard = Depends(get_period_guard),
        engine: BalanceEngine = Depends(get_balance_engine),
        gate: PermissionGate = Depends(get_permission_gate),
        cache: CacheService = Depends(get_cache_service),
    ):
        self.guard = guard
        self.engine = engine
        self.gate = gate
        self.cache = cache

    def build(self, use_case_class):
        return use_case_class(
            self.guard,
            self.engine,
            self.gate,
            self.cache,
            ttl=ApplicationConfig.CACHE_TTL_BALANCES,
            closed_ttl=ApplicationConfig.CACHE_TTL_CLOSED_PERIOD,
        )


async def _run(use_case, query: BalanceQueryDTO, schema):
    result = await use_case.execute(query)
    if result.is_err():
        raise ClientError(result.error)
    return schema.model_validate(result.value.model_dump())


@router.get("/{room_id}/total-expenses", response_model=TotalExpensesResponseSchema)
async def get_total_expenses(
    room_id: str,
    period_id: Optional[str] = Query(default=None),
    require_period: bool = Query(default=False),
    actor_id: str = Depends(get_actor_id),
    context: BalanceReadContext = Depends(),
):
    """Sum of expenses and purchased shopping in the period."""
    query = BalanceQueryDTO(room_id=room_id, actor_id=actor_id, period_id=period_id, require_period=require_period)
    return await _run(context.build(CalculateTotalExpenses), query, TotalExpensesResponseSchema)


@router.get("/{room_id}/meal-rate", response_model=MealRateResponseSchema)
async def get_meal_rate(
    room_id: str,
    period_id: Optional[str] = Query(default=None),
    require_period: bool = Query(default=False),
    actor_id: str = Depends(get_actor_id),
    context: BalanceReadContext = Depends(),
):
    """
    Meal rate of the period.

    **Example response:**
    ```json
    {"room_id": "room_abc", "period_id": "...", "meal_rate": "100.00", "total_meals": 3, "total_expense": "300.00"}
    ```
    """
    query = BalanceQueryDTO(room_id=room_id, actor_id=actor_id, period_id=period_id, require_period=require_period)
    return await _run(context.build(CalculateMealRate), query, MealRateResponseSchema)


@router.get("/{room_id}/meal-count", response_model=UserMealCountResponseSchema)
async def get_user_meal_count(
    room_id: str,
    user_id: Optional[str] = Query(default=None, description="Defaults to the acting user"),
    period_id: Optional[str] = Query(default=None),
    actor_id: str = Depends(get_actor_id),
    context: BalanceReadContext = Depends(),
):
    """Own meals plus own guest meals of one member."""
    query = BalanceQueryDTO(room_id=room_id, actor_id=actor_id, user_id=user_id, period_id=period_id)
    return await _run(context.build(CalculateUserMealCount), query, UserMealCountResponseSchema)


@router.get("/{room_id}/net", response_model=BalanceResponseSchema)
async def get_net_balance(
    room_id: str,
    user_id: Optional[str] = Query(default=None, description="Defaults to the acting user"),
    period_id: Optional[str] = Query(default=None),
    actor_id: str = Depends(get_actor_id),
    context: BalanceReadContext = Depends(),
):
    """Net of signed transactions targeting one member."""
    query = BalanceQueryDTO(room_id=room_id, actor_id=actor_id, user_id=user_id, period_id=period_id)
    return await _run(context.build(CalculateBalance), query, BalanceResponseSchema)


@router.get("/{room_id}/user", response_model=UserBalanceResponseSchema, response_model_exclude_none=True)
async def get_user_balance(
    room_id: str,
    user_id: Optional[str] = Query(default=None, description="Defaults to the acting user"),
    period_id: Optional[str] = Query(default=None),
    include_details: bool = Query(default=False),
    actor_id: str = Depends(get_actor_id),
    context: BalanceReadContext = Depends(),
):
    """
    Balance of one member.

    Members may read only their own balance. Detail fields are present only
    when ``include_details`` is set.
    """
    query = BalanceQueryDTO(
        room_id=room_id,
        actor_id=actor_id,
        user_id=user_id,
        period_id=period_id,
        include_details=include_details,
    )
    return await _run(context.build(GetUserBalance), query, UserBalanceResponseSchema)


@router.get("/{room_id}/group", response_model=GroupBalanceSummaryResponseSchema, response_model_exclude_none=True)
async def get_group_balance_summary(
    room_id: str,
    period_id: Optional[str] = Query(default=None),
    include_details: bool = Query(default=False),
    actor_id: str = Depends(get_actor_id),
    context: BalanceReadContext = Depends(),
):
    """Figures for every member of the room. Privileged tiers only."""
    query = BalanceQueryDTO(
        room_id=room_id, actor_id=actor_id, period_id=period_id, include_details=include_details
    )
    return await _run(context.build(GetGroupBalanceSummary), query, GroupBalanceSummaryResponseSchema)
