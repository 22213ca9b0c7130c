"""
Unit tests for BalanceEngine

Aggregates are mocked; membership comes from the shared directory fixture
(admin_1, manager_1, member_1, member_2).
"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.services.balance_engine import CREDIT_TYPES, BalanceEngine
from src.domain.errors import NotFoundError
from tests.factories import ROOM_ID

PERIOD_ID = "period_1"


@pytest.fixture
def mock_aggregates():
    aggregates = MagicMock()
    aggregates.sum_expenses = AsyncMock(return_value=Decimal("800"))
    aggregates.sum_purchased_shopping = AsyncMock(return_value=Decimal("200"))
    aggregates.count_meals = AsyncMock(return_value=36)
    aggregates.sum_guest_meals = AsyncMock(return_value=4)
    aggregates.sum_transactions = AsyncMock(return_value=Decimal("0"))
    aggregates.meal_counts_by_user = AsyncMock(return_value={})
    aggregates.guest_meal_counts_by_user = AsyncMock(return_value={})
    aggregates.transaction_sums_by_target = AsyncMock(return_value={})
    return aggregates


@pytest.fixture
def engine(mock_aggregates, mock_directory):
    return BalanceEngine(mock_aggregates, mock_directory)


@pytest.mark.asyncio
class TestSingleFigures:

    async def test_total_expenses_adds_shopping(self, engine):
        assert await engine.calculate_total_expenses(ROOM_ID, PERIOD_ID) == Decimal("1000")

    async def test_meal_rate_counts_guest_meals(self, engine):
        """
        GIVEN: expenses 800 + shopping 200, 36 meals and 4 guest meals
        WHEN: the meal rate is calculated
        THEN: rate = 1000 / 40 = 25
        """
        rate = await engine.calculate_meal_rate(ROOM_ID, PERIOD_ID)

        assert rate.total_expense == Decimal("1000")
        assert rate.total_meals == 40
        assert rate.meal_rate == Decimal("25")

    async def test_meal_rate_reuses_known_total(self, engine, mock_aggregates):
        rate = await engine.calculate_meal_rate(ROOM_ID, PERIOD_ID, total_expense=Decimal("400"))

        assert rate.meal_rate == Decimal("10")
        mock_aggregates.sum_expenses.assert_not_awaited()

    async def test_uneven_rate_reconstructs_total_expense(self, engine, mock_aggregates):
        """
        GIVEN: 100.00 of expenses and 0.10 of shopping over 3 + 4 meals
        WHEN: the meal rate is calculated
        THEN: rate x meals gives back the total expense at full precision
        """
        mock_aggregates.sum_expenses.return_value = Decimal("100.00")
        mock_aggregates.sum_purchased_shopping.return_value = Decimal("0.10")
        mock_aggregates.count_meals.return_value = 3
        mock_aggregates.sum_guest_meals.return_value = 4

        rate = await engine.calculate_meal_rate(ROOM_ID, PERIOD_ID)

        assert rate.total_expense == Decimal("100.10")
        assert rate.total_meals == 7
        assert abs(rate.meal_rate * rate.total_meals - rate.total_expense) < Decimal("1e-20")

    async def test_no_period_yields_zeros(self, engine, mock_aggregates):
        assert await engine.calculate_total_expenses(ROOM_ID, None) == Decimal("0")
        assert (await engine.calculate_meal_rate(ROOM_ID, None)).meal_rate == Decimal("0")
        assert await engine.calculate_user_meal_count("member_1", ROOM_ID, None) == 0
        assert await engine.calculate_balance("member_1", ROOM_ID, None) == Decimal("0")

        mock_aggregates.sum_expenses.assert_not_awaited()
        mock_aggregates.sum_transactions.assert_not_awaited()

    async def test_user_meal_count_filters_by_user(self, engine, mock_aggregates):
        mock_aggregates.count_meals.return_value = 10
        mock_aggregates.sum_guest_meals.return_value = 2

        count = await engine.calculate_user_meal_count("member_1", ROOM_ID, PERIOD_ID)

        assert count == 12
        mock_aggregates.count_meals.assert_awaited_with(ROOM_ID, PERIOD_ID, user_id="member_1")

    async def test_balance_sums_transactions_targeting_user(self, engine, mock_aggregates):
        mock_aggregates.sum_transactions.return_value = Decimal("350.50")

        balance = await engine.calculate_balance("member_1", ROOM_ID, PERIOD_ID)

        assert balance == Decimal("350.50")
        mock_aggregates.sum_transactions.assert_awaited_once_with(ROOM_ID, PERIOD_ID, target_user_id="member_1")

    async def test_user_figures(self, engine, mock_aggregates):
        """
        GIVEN: rate 25, member_1 ate 10 meals and holds a balance of 500
        WHEN: user figures are calculated
        THEN: spent 250 and available 250
        """
        mock_aggregates.sum_transactions.return_value = Decimal("500")

        async def count_meals(room_id, period_id, user_id=None):
            return 10 if user_id else 36

        async def sum_guest_meals(room_id, period_id, user_id=None):
            return 0 if user_id else 4

        mock_aggregates.count_meals.side_effect = count_meals
        mock_aggregates.sum_guest_meals.side_effect = sum_guest_meals

        figures = await engine.calculate_user_figures("member_1", ROOM_ID, PERIOD_ID)

        assert figures.meal_count == 10
        assert figures.meal_rate == Decimal("25")
        assert figures.total_spent == Decimal("250")
        assert figures.available_balance == Decimal("250")


@pytest.mark.asyncio
class TestGroupSummary:

    async def test_summary_batches_queries(self, engine, mock_aggregates, mock_directory):
        """
        GIVEN: four members with meals and transactions
        WHEN: the group is summarized
        THEN: each grouped query runs once and figures match the per-user rule
        """
        # Arrange
        mock_aggregates.meal_counts_by_user.return_value = {"admin_1": 10, "member_1": 20, "member_2": 6}
        mock_aggregates.guest_meal_counts_by_user.return_value = {"member_2": 4}
        mock_aggregates.transaction_sums_by_target.return_value = {
            "admin_1": Decimal("-1000"),
            "member_1": Decimal("600"),
        }

        # Act
        summary = await engine.summarize_group(ROOM_ID, PERIOD_ID)

        # Assert
        assert summary.rate.total_meals == 40
        assert summary.rate.meal_rate == Decimal("25")
        by_user = {m.user_id: m for m in summary.members}
        assert set(by_user) == {"admin_1", "manager_1", "member_1", "member_2"}
        assert by_user["member_1"].total_spent == Decimal("500")
        assert by_user["member_1"].available_balance == Decimal("100")
        assert by_user["member_2"].meal_count == 10
        assert by_user["manager_1"].balance == Decimal("0")
        assert by_user["admin_1"].role == "ADMIN"
        mock_aggregates.meal_counts_by_user.assert_awaited_once()
        mock_aggregates.transaction_sums_by_target.assert_awaited_once()
        mock_aggregates.sum_transactions.assert_not_awaited()

    async def test_summary_totals_match_member_sums(self, engine, mock_aggregates):
        mock_aggregates.meal_counts_by_user.return_value = {"member_1": 3, "member_2": 5}
        mock_aggregates.transaction_sums_by_target.return_value = {"member_1": Decimal("70"), "member_2": Decimal("30")}

        summary = await engine.summarize_group(ROOM_ID, PERIOD_ID)

        assert summary.total_balance == sum(m.balance for m in summary.members)
        assert summary.total_spent == sum(m.total_spent for m in summary.members)

    async def test_summary_without_period_lists_members_at_zero(self, engine, mock_aggregates):
        summary = await engine.summarize_group(ROOM_ID, None)

        assert len(summary.members) == 4
        assert all(m.balance == Decimal("0") and m.meal_count == 0 for m in summary.members)
        mock_aggregates.meal_counts_by_user.assert_not_awaited()

    async def test_room_without_members_not_found(self, engine):
        with pytest.raises(NotFoundError):
            await engine.summarize_group("empty_room", PERIOD_ID)


@pytest.mark.asyncio
class TestPeriodTotals:

    async def test_period_totals(self, engine, mock_aggregates):
        mock_aggregates.sum_transactions.return_value = Decimal("900")

        totals = await engine.period_totals(ROOM_ID, PERIOD_ID)

        assert totals.total_meals == 36
        assert totals.total_guest_meals == 4
        assert totals.total_expense == Decimal("1000")
        assert totals.total_credits == Decimal("900")
        assert totals.member_count == 4
        mock_aggregates.sum_transactions.assert_awaited_once_with(ROOM_ID, PERIOD_ID, transaction_types=CREDIT_TYPES)
