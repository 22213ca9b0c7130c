"""Integration tests for ledger writes: idempotence, period stamping and locks"""

import pytest
from datetime import date
from decimal import Decimal

from sqlmodel import select

from src.app.services.cache_service import CacheKey, CacheScope
from src.app.use_cases.balances import BalanceQueryDTO
from src.app.use_cases.balances.dtos import GroupBalanceSummaryDTO, UserBalanceDTO
from src.app.use_cases.ledger import (
    CreateExpenseCommandDTO,
    CreateTransactionCommandDTO,
    DeleteExpenseCommandDTO,
    MealAction,
    ToggleMealCommandDTO,
    UpsertGuestMealCommandDTO,
)
from src.app.use_cases.periods import EndPeriodCommandDTO, PeriodActionCommandDTO, StartPeriodCommandDTO
from src.domain.account_transaction import AccountTransaction, TransactionType
from src.domain.guest_meal import GuestMeal
from src.domain.meal import Meal, MealType
from tests.factories import ROOM_ID

DAY = date(2026, 10, 5)


async def open_period(services, name="October 2026", start_date=date(2026, 10, 1)):
    result = await services.start_period.execute(
        StartPeriodCommandDTO(room_id=ROOM_ID, actor_id="admin_1", name=name, start_date=start_date)
    )
    return result.value


def lunch(action=MealAction.ADD, **overrides):
    values = dict(room_id=ROOM_ID, actor_id="member_1", meal_date=DAY, meal_type=MealType.LUNCH, action=action)
    values.update(overrides)
    return ToggleMealCommandDTO(**values)


async def count_rows(session, model):
    result = await session.execute(select(model))
    return len(result.scalars().all())


class TestLedgerWritesIntegration:

    @pytest.mark.asyncio
    async def test_meal_add_is_idempotent(self, services, db_session):
        """
        GIVEN: an active period
        WHEN: the same meal is added twice
        THEN: exactly one row exists and the second call reports no change
        """
        period = await open_period(services)

        first = await services.toggle_meal.execute(lunch())
        second = await services.toggle_meal.execute(lunch())

        assert first.value.changed is True
        assert second.value.changed is False
        assert second.value.period_id == period.id
        assert await count_rows(db_session, Meal) == 1

    @pytest.mark.asyncio
    async def test_meal_remove_then_remove_again(self, services, db_session):
        await open_period(services)
        await services.toggle_meal.execute(lunch())

        removed = await services.toggle_meal.execute(lunch(MealAction.REMOVE))
        again = await services.toggle_meal.execute(lunch(MealAction.REMOVE))

        assert removed.value.changed is True
        assert again.is_ok()
        assert again.value.changed is False
        assert await count_rows(db_session, Meal) == 0

    @pytest.mark.asyncio
    async def test_records_keep_their_period(self, services, db_session):
        """A meal stays in the period it was recorded in after the next one starts"""
        october = await open_period(services)
        await services.toggle_meal.execute(lunch())
        await services.end_period.execute(EndPeriodCommandDTO(room_id=ROOM_ID, actor_id="admin_1", end_date=date(2026, 10, 31)))
        november = await open_period(services, name="November 2026", start_date=date(2026, 11, 1))

        await services.toggle_meal.execute(lunch(meal_date=date(2026, 11, 2)))

        meals = (await db_session.execute(select(Meal).order_by(Meal.meal_date))).scalars().all()
        assert [m.period_id for m in meals] == [october.id, november.id]

    @pytest.mark.asyncio
    async def test_locked_period_rejects_every_write(self, services, db_session):
        """
        GIVEN: a period that was ended and locked, and no other period
        WHEN: meals, guest meals, expenses and transactions are written
        THEN: every write fails with INVALID_STATE and nothing is stored
        """
        period = await open_period(services)
        await services.toggle_meal.execute(lunch())
        await services.end_period.execute(EndPeriodCommandDTO(room_id=ROOM_ID, actor_id="admin_1", end_date=date(2026, 10, 31)))
        await services.lock_period.execute(PeriodActionCommandDTO(room_id=ROOM_ID, actor_id="admin_1", period_id=period.id))

        results = [
            await services.toggle_meal.execute(lunch(meal_date=DAY, meal_type=MealType.DINNER)),
            await services.toggle_meal.execute(lunch(MealAction.REMOVE)),
            await services.upsert_guest_meal.execute(
                UpsertGuestMealCommandDTO(room_id=ROOM_ID, actor_id="member_1", meal_date=DAY,
                                          meal_type=MealType.DINNER, count=2)
            ),
            await services.create_expense.execute(
                CreateExpenseCommandDTO(room_id=ROOM_ID, actor_id="member_1", description="Late bill",
                                        amount=Decimal("10"), expense_date=DAY)
            ),
            await services.create_transaction.execute(
                CreateTransactionCommandDTO(room_id=ROOM_ID, actor_id="admin_1", target_user_id="member_1",
                                            amount=Decimal("10"), transaction_type=TransactionType.DEPOSIT,
                                            period_id=period.id)
            ),
        ]

        assert [r.error.code for r in results] == ["INVALID_STATE"] * 5
        assert await count_rows(db_session, Meal) == 1
        assert await count_rows(db_session, GuestMeal) == 0
        assert await count_rows(db_session, AccountTransaction) == 0

    @pytest.mark.asyncio
    async def test_write_without_period_rejected(self, services):
        result = await services.toggle_meal.execute(lunch())

        assert result.error.code == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_delete_expense_restores_balance(self, services, db_session):
        await open_period(services)
        created = await services.create_expense.execute(
            CreateExpenseCommandDTO(room_id=ROOM_ID, actor_id="member_1", description="Fish",
                                    amount=Decimal("80"), expense_date=DAY)
        )

        deleted = await services.delete_expense.execute(
            DeleteExpenseCommandDTO(room_id=ROOM_ID, actor_id="member_1", expense_id=created.value.id)
        )

        assert deleted.is_ok()
        assert await count_rows(db_session, AccountTransaction) == 0
        balance = await services.user_balance.execute(BalanceQueryDTO(room_id=ROOM_ID, actor_id="member_1"))
        assert balance.value.balance == Decimal("0")

    @pytest.mark.asyncio
    async def test_write_invalidates_cached_balance(self, services, cache):
        """
        GIVEN: member_1's balance of 100 has been read and cached
        WHEN: a 50 deposit is recorded for them
        THEN: the cached entry is dropped and the next read returns 150
        """
        period = await open_period(services)
        await services.create_transaction.execute(
            CreateTransactionCommandDTO(room_id=ROOM_ID, actor_id="admin_1", target_user_id="member_1",
                                        amount=Decimal("100"), transaction_type=TransactionType.DEPOSIT)
        )
        query = BalanceQueryDTO(room_id=ROOM_ID, actor_id="member_1")
        assert (await services.user_balance.execute(query)).value.balance == Decimal("100")
        key = CacheKey(CacheScope.USER_BALANCE, ROOM_ID, period.id, "member_1", qualifier="basic")
        assert await cache.get(key, UserBalanceDTO) is not None

        await services.create_transaction.execute(
            CreateTransactionCommandDTO(room_id=ROOM_ID, actor_id="admin_1", target_user_id="member_1",
                                        amount=Decimal("50"), transaction_type=TransactionType.DEPOSIT)
        )

        assert await cache.get(key, UserBalanceDTO) is None
        assert (await services.user_balance.execute(query)).value.balance == Decimal("150")

    @pytest.mark.asyncio
    async def test_period_transition_invalidates_room_cache(self, services, cache):
        await open_period(services)
        await services.user_balance.execute(BalanceQueryDTO(room_id=ROOM_ID, actor_id="member_1"))
        assert len(cache.backend.entries) == 1

        await services.end_period.execute(EndPeriodCommandDTO(room_id=ROOM_ID, actor_id="admin_1", end_date=date(2026, 10, 31)))

        assert len(cache.backend.entries) == 0

    @pytest.mark.asyncio
    async def test_expense_invalidates_cached_group_summary(self, services, cache):
        """
        GIVEN: two lunches and a 100 expense, group summary read with details and cached
        WHEN: a further 50 expense is recorded
        THEN: the cached summary is dropped and the next read shows 150 spent at 75 per meal
        """
        period = await open_period(services)
        await services.toggle_meal.execute(lunch(actor_id="member_1"))
        await services.toggle_meal.execute(lunch(actor_id="member_2"))
        await services.create_expense.execute(
            CreateExpenseCommandDTO(room_id=ROOM_ID, actor_id="admin_1", description="Rice",
                                    amount=Decimal("100"), expense_date=DAY)
        )
        query = BalanceQueryDTO(room_id=ROOM_ID, actor_id="admin_1", include_details=True)
        first = await services.group_summary.execute(query)
        assert first.value.totals.total_expense == Decimal("100")
        assert first.value.totals.meal_rate == Decimal("50")
        key = CacheKey(CacheScope.GROUP_SUMMARY, ROOM_ID, period.id, qualifier="details")
        assert await cache.get(key, GroupBalanceSummaryDTO) is not None

        created = await services.create_expense.execute(
            CreateExpenseCommandDTO(room_id=ROOM_ID, actor_id="admin_1", description="Oil",
                                    amount=Decimal("50"), expense_date=DAY)
        )
        assert created.is_ok()

        assert await cache.get(key, GroupBalanceSummaryDTO) is None
        second = await services.group_summary.execute(query)
        assert second.value.totals.total_expense == Decimal("150")
        assert second.value.totals.meal_rate == Decimal("75")
        assert second.value.totals.total_spent == Decimal("150")
