"""
Unit tests for balance arithmetic
"""

import pytest
from decimal import Decimal
from src.domain.balance import GroupSummary, MealRate, PeriodTotals, UserFigures, meal_rate, to_decimal


class TestMealRate:

    def test_rate_is_expense_per_meal(self):
        assert meal_rate(Decimal("1000"), 40) == Decimal("25")

    def test_zero_meals_yields_zero_rate(self):
        """
        GIVEN: expenses recorded but no meals
        WHEN: the meal rate is computed
        THEN: rate is 0, never a division error
        """
        rate = MealRate.compute(Decimal("1000"), 0)

        assert rate.meal_rate == Decimal("0")
        assert rate.total_meals == 0
        assert rate.total_expense == Decimal("1000")

    def test_full_precision_is_kept(self):
        rate = meal_rate(Decimal("100"), 3)

        assert rate != Decimal("33.33")
        assert rate.quantize(Decimal("0.01")) == Decimal("33.33")

    @pytest.mark.parametrize(
        "total_expense, total_meals",
        [("100", 3), ("0.10", 7), ("1000", 41), ("999.99", 13)],
    )
    def test_rate_times_meals_reconstructs_expense(self, total_expense, total_meals):
        rate = MealRate.compute(Decimal(total_expense), total_meals)

        assert abs(rate.meal_rate * rate.total_meals - rate.total_expense) < Decimal("1e-20")

    def test_to_decimal_handles_none_and_floats(self):
        assert to_decimal(None) == Decimal("0")
        assert to_decimal(0.1) == Decimal("0.1")
        assert to_decimal(5) == Decimal("5")


class TestUserFigures:

    def test_scenario_simple_month(self):
        """
        GIVEN: total expense 1000 over 40 meals, user U ate 10 and deposited 500
        WHEN: user figures are derived
        THEN: rate 25, spent 250, available 250
        """
        rate = MealRate.compute(Decimal("1000"), 40)

        figures = UserFigures.derive("U", Decimal("500"), 10, rate.meal_rate)

        assert figures.meal_rate == Decimal("25")
        assert figures.total_spent == Decimal("250")
        assert figures.available_balance == Decimal("250")

    def test_available_balance_can_be_negative(self):
        figures = UserFigures.derive("U", Decimal("0"), 4, Decimal("25"))

        assert figures.available_balance == Decimal("-100")


class TestGroupSummary:

    def test_totals_equal_member_sums(self):
        rate = MealRate.compute(Decimal("300"), 12)
        members = [
            UserFigures.derive("a", Decimal("100"), 4, rate.meal_rate),
            UserFigures.derive("b", Decimal("-50"), 8, rate.meal_rate),
        ]

        summary = GroupSummary(room_id="r", period_id="p", rate=rate, members=members)

        assert summary.total_balance == Decimal("50")
        assert summary.total_spent == Decimal("300")
        assert summary.total_available_balance == Decimal("-250")
        assert summary.net_group_balance == Decimal("-250")

    def test_empty_group_sums_to_zero(self):
        summary = GroupSummary(room_id="r", period_id=None, rate=MealRate.empty(), members=[])

        assert summary.total_balance == Decimal("0")


class TestPeriodTotals:

    def test_total_expense_includes_shopping_and_guest_meals(self):
        totals = PeriodTotals(
            period_id="p",
            total_meals=8,
            total_guest_meals=2,
            total_expenses=Decimal("150"),
            total_shopping=Decimal("50"),
            total_credits=Decimal("400"),
            member_count=3,
        )

        assert totals.total_expense == Decimal("200")
        assert totals.meal_rate == Decimal("20")
