"""Ledger API Routes

FastAPI routes for recording meals, guest meals, expenses, shopping and
transactions. Every write is checked against the permission gate and the
target period's lock before it commits.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.error import ClientError
from src.api.schemas.ledger_request import (
    CreateExpenseRequestSchema,
    CreateTransactionRequestSchema,
    GuestMealRequestSchema,
    ShoppingPurchaseRequestSchema,
    ToggleMealRequestSchema,
)
from src.adapter.repositories.account_transaction_repository import SqlAlchemyAccountTransactionRepository
from src.adapter.repositories.expense_repository import SqlAlchemyExpenseRepository, SqlAlchemyShoppingItemRepository
from src.adapter.repositories.meal_repository import SqlAlchemyGuestMealRepository, SqlAlchemyMealRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.cache_service import CacheService
from src.app.services.period_guard import PeriodGuard
from src.app.services.permission_gate import PermissionGate
from src.app.use_cases.ledger import (
    CreateExpense,
    CreateExpenseCommandDTO,
    CreateTransaction,
    CreateTransactionCommandDTO,
    DeleteExpense,
    DeleteExpenseCommandDTO,
    ExpenseDTO,
    GuestMealDTO,
    MealToggleResultDTO,
    RecordShoppingPurchase,
    RecordShoppingPurchaseCommandDTO,
    ShoppingItemDTO,
    ToggleMeal,
    ToggleMealCommandDTO,
    TransactionDTO,
    UpsertGuestMeal,
    UpsertGuestMealCommandDTO,
)
from src.depends import get_actor_id, get_cache_service, get_period_guard, get_permission_gate, get_session

router = APIRouter(prefix="/ledger", tags=["Ledger"])

LOCKED_RESPONSE = {
    409: {
        "description": "Target period is locked or archived",
        "content": {
            "application/json": {
                "example": {"error": {"code": "INVALID_STATE", "message": "Period 'October 2026' is locked"}}
            }
        },
    }
}


def _unwrap(result):
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post("/{room_id}/meals", response_model=MealToggleResultDTO, responses=LOCKED_RESPONSE)
async def toggle_meal(
    room_id: str,
    request: ToggleMealRequestSchema,
    actor_id: str = Depends(get_actor_id),
    session: AsyncSession = Depends(get_session),
    guard: PeriodGuard = Depends(get_period_guard),
    gate: PermissionGate = Depends(get_permission_gate),
    cache: CacheService = Depends(get_cache_service),
):
    """
    Add or remove a meal.

    Adding an existing meal and removing a missing one both succeed with
    ``changed: false``.
    """
    use_case = ToggleMeal(SqlAlchemyUnitOfWork(session), SqlAlchemyMealRepository(session), guard, gate, cache)
    command = ToggleMealCommandDTO(
        room_id=room_id,
        actor_id=actor_id,
        user_id=request.user_id,
        meal_date=request.meal_date,
        meal_type=request.meal_type,
        action=request.action,
        period_id=request.period_id,
    )
    return _unwrap(await use_case.execute(command))


@router.put("/{room_id}/guest-meals", response_model=GuestMealDTO, responses=LOCKED_RESPONSE)
async def upsert_guest_meal(
    room_id: str,
    request: GuestMealRequestSchema,
    actor_id: str = Depends(get_actor_id),
    session: AsyncSession = Depends(get_session),
    guard: PeriodGuard = Depends(get_period_guard),
    gate: PermissionGate = Depends(get_permission_gate),
    cache: CacheService = Depends(get_cache_service),
):
    """Set the guest meal count of a slot (0 removes it)."""
    use_case = UpsertGuestMeal(
        SqlAlchemyUnitOfWork(session), SqlAlchemyGuestMealRepository(session), guard, gate, cache
    )
    command = UpsertGuestMealCommandDTO(
        room_id=room_id,
        actor_id=actor_id,
        user_id=request.user_id,
        meal_date=request.meal_date,
        meal_type=request.meal_type,
        count=request.count,
        period_id=request.period_id,
    )
    return _unwrap(await use_case.execute(command))


@router.post(
    "/{room_id}/expenses",
    response_model=ExpenseDTO,
    status_code=status.HTTP_201_CREATED,
    responses=LOCKED_RESPONSE,
)
async def create_expense(
    room_id: str,
    request: CreateExpenseRequestSchema,
    actor_id: str = Depends(get_actor_id),
    session: AsyncSession = Depends(get_session),
    guard: PeriodGuard = Depends(get_period_guard),
    gate: PermissionGate = Depends(get_permission_gate),
    cache: CacheService = Depends(get_cache_service),
):
    """Record an expense; the payer's balance is debited by the same amount."""
    use_case = CreateExpense(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyExpenseRepository(session),
        SqlAlchemyAccountTransactionRepository(session),
        guard,
        gate,
        cache,
    )
    command = CreateExpenseCommandDTO(
        room_id=room_id,
        actor_id=actor_id,
        user_id=request.user_id,
        description=request.description,
        amount=request.amount,
        expense_date=request.expense_date,
        expense_type=request.expense_type,
        receipt_url=request.receipt_url,
        period_id=request.period_id,
    )
    return _unwrap(await use_case.execute(command))


@router.delete("/{room_id}/expenses/{expense_id}", response_model=ExpenseDTO, responses=LOCKED_RESPONSE)
async def delete_expense(
    room_id: str,
    expense_id: str,
    actor_id: str = Depends(get_actor_id),
    session: AsyncSession = Depends(get_session),
    guard: PeriodGuard = Depends(get_period_guard),
    gate: PermissionGate = Depends(get_permission_gate),
    cache: CacheService = Depends(get_cache_service),
):
    """Delete an expense together with its balance debit."""
    use_case = DeleteExpense(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyExpenseRepository(session),
        SqlAlchemyAccountTransactionRepository(session),
        guard,
        gate,
        cache,
    )
    command = DeleteExpenseCommandDTO(room_id=room_id, actor_id=actor_id, expense_id=expense_id)
    return _unwrap(await use_case.execute(command))


@router.post(
    "/{room_id}/shopping",
    response_model=ShoppingItemDTO,
    status_code=status.HTTP_201_CREATED,
    responses=LOCKED_RESPONSE,
)
async def record_shopping_purchase(
    room_id: str,
    request: ShoppingPurchaseRequestSchema,
    actor_id: str = Depends(get_actor_id),
    session: AsyncSession = Depends(get_session),
    guard: PeriodGuard = Depends(get_period_guard),
    gate: PermissionGate = Depends(get_permission_gate),
    cache: CacheService = Depends(get_cache_service),
):
    """Record a purchased item; it counts toward the period's expense."""
    use_case = RecordShoppingPurchase(
        SqlAlchemyUnitOfWork(session), SqlAlchemyShoppingItemRepository(session), guard, gate, cache
    )
    command = RecordShoppingPurchaseCommandDTO(
        room_id=room_id,
        actor_id=actor_id,
        user_id=request.user_id,
        name=request.name,
        amount=request.amount,
        purchase_date=request.purchase_date,
        period_id=request.period_id,
    )
    return _unwrap(await use_case.execute(command))


@router.post(
    "/{room_id}/transactions",
    response_model=TransactionDTO,
    status_code=status.HTTP_201_CREATED,
    responses=LOCKED_RESPONSE,
)
async def create_transaction(
    room_id: str,
    request: CreateTransactionRequestSchema,
    actor_id: str = Depends(get_actor_id),
    session: AsyncSession = Depends(get_session),
    guard: PeriodGuard = Depends(get_period_guard),
    gate: PermissionGate = Depends(get_permission_gate),
    cache: CacheService = Depends(get_cache_service),
):
    """
    Record a money movement.

    Members may only record PAYMENTs to a privileged member; privileged
    tiers may record any type for anyone.
    """
    use_case = CreateTransaction(
        SqlAlchemyUnitOfWork(session), SqlAlchemyAccountTransactionRepository(session), guard, gate, cache
    )
    command = CreateTransactionCommandDTO(
        room_id=room_id,
        actor_id=actor_id,
        target_user_id=request.target_user_id,
        amount=request.amount,
        transaction_type=request.transaction_type,
        description=request.description,
        period_id=request.period_id,
    )
    return _unwrap(await use_case.execute(command))
