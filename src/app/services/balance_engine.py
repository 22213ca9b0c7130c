"""Balance Aggregation Engine

Pure computation over the raw ledgers of one period: meal rate, per-user
meal counts and balances, and the batched group summary. Independent
queries are issued concurrently and joined in memory. A missing period
yields zeros; deciding whether that is acceptable is the caller's job.
"""

import asyncio
import logging
from decimal import Decimal
from typing import Optional
from src.app.repositories.ledger_aggregate_repository import LedgerAggregateRepository
from src.app.services.membership_directory import MembershipDirectory
from src.domain.account_transaction import TransactionType
from src.domain.balance import ZERO, GroupSummary, MealRate, PeriodTotals, UserFigures, to_decimal
from src.domain.errors import NotFoundError

logger = logging.getLogger(__name__)

CREDIT_TYPES = (TransactionType.DEPOSIT, TransactionType.PAYMENT)


class BalanceEngine:
    """
    Balance Aggregation Engine

    Performance contract:
    - Group summaries cost one grouped query per ledger plus the member
      list, i.e. O(members + records), never one query per member
    - Shared quantities (total expense, meal rate) are computed once
    """

    def __init__(self, aggregates: LedgerAggregateRepository, directory: MembershipDirectory):
        self.aggregates = aggregates
        self.directory = directory

    async def calculate_total_expenses(self, room_id: str, period_id: Optional[str]) -> Decimal:
        if not period_id:
            return ZERO

        expenses, shopping = await asyncio.gather(
            self.aggregates.sum_expenses(room_id, period_id),
            self.aggregates.sum_purchased_shopping(room_id, period_id),
        )
        return to_decimal(expenses) + to_decimal(shopping)

    async def calculate_meal_rate(
        self,
        room_id: str,
        period_id: Optional[str],
        total_expense: Optional[Decimal] = None,
    ) -> MealRate:
        if not period_id:
            return MealRate.empty()

        if total_expense is None:
            meals, guest_meals, total_expense = await asyncio.gather(
                self.aggregates.count_meals(room_id, period_id),
                self.aggregates.sum_guest_meals(room_id, period_id),
                self.calculate_total_expenses(room_id, period_id),
            )
        else:
            meals, guest_meals = await asyncio.gather(
                self.aggregates.count_meals(room_id, period_id),
                self.aggregates.sum_guest_meals(room_id, period_id),
            )

        return MealRate.compute(total_expense, int(meals or 0) + int(guest_meals or 0))

    async def calculate_user_meal_count(self, user_id: str, room_id: str, period_id: Optional[str]) -> int:
        if not period_id:
            return 0

        meals, guest_meals = await asyncio.gather(
            self.aggregates.count_meals(room_id, period_id, user_id=user_id),
            self.aggregates.sum_guest_meals(room_id, period_id, user_id=user_id),
        )
        return int(meals or 0) + int(guest_meals or 0)

    async def calculate_balance(self, user_id: str, room_id: str, period_id: Optional[str]) -> Decimal:
        """Net of signed transactions targeting the user; expenses arrive as negative rows"""
        if not period_id:
            return ZERO

        total = await self.aggregates.sum_transactions(room_id, period_id, target_user_id=user_id)
        return to_decimal(total)

    async def calculate_user_figures(
        self,
        user_id: str,
        room_id: str,
        period_id: Optional[str],
        rate: Optional[MealRate] = None,
        role: Optional[str] = None,
    ) -> UserFigures:
        if rate is None:
            balance, meal_count, rate = await asyncio.gather(
                self.calculate_balance(user_id, room_id, period_id),
                self.calculate_user_meal_count(user_id, room_id, period_id),
                self.calculate_meal_rate(room_id, period_id),
            )
        else:
            balance, meal_count = await asyncio.gather(
                self.calculate_balance(user_id, room_id, period_id),
                self.calculate_user_meal_count(user_id, room_id, period_id),
            )

        return UserFigures.derive(user_id, balance, meal_count, rate.meal_rate, role=role)

    async def summarize_group(self, room_id: str, period_id: Optional[str]) -> GroupSummary:
        """
        Figures for every member of the room in one pass per ledger

        Raises:
            NotFoundError: room has no members
        """
        if not period_id:
            members = await self.directory.list_members(room_id)
            self._require_members(room_id, members)
            rate = MealRate.empty()
            return GroupSummary(
                room_id=room_id,
                period_id=None,
                rate=rate,
                members=[UserFigures.derive(m.user_id, ZERO, 0, ZERO, role=m.role) for m in members],
            )

        members, meal_counts, guest_counts, transaction_sums, total_expense = await asyncio.gather(
            self.directory.list_members(room_id),
            self.aggregates.meal_counts_by_user(room_id, period_id),
            self.aggregates.guest_meal_counts_by_user(room_id, period_id),
            self.aggregates.transaction_sums_by_target(room_id, period_id),
            self.calculate_total_expenses(room_id, period_id),
        )
        self._require_members(room_id, members)

        # Totals include records of users who have since left the room
        total_meals = sum(meal_counts.values()) + sum(guest_counts.values())
        rate = MealRate.compute(total_expense, total_meals)

        figures = [
            UserFigures.derive(
                member.user_id,
                to_decimal(transaction_sums.get(member.user_id)),
                meal_counts.get(member.user_id, 0) + guest_counts.get(member.user_id, 0),
                rate.meal_rate,
                role=member.role,
            )
            for member in members
        ]

        logger.debug(
            f"Summarized room {room_id} period {period_id}: "
            f"{len(figures)} members, {total_meals} meals, expense={total_expense}"
        )
        return GroupSummary(room_id=room_id, period_id=period_id, rate=rate, members=figures)

    async def period_totals(self, room_id: str, period_id: str) -> PeriodTotals:
        meals, guest_meals, expenses, shopping, credits, members = await asyncio.gather(
            self.aggregates.count_meals(room_id, period_id),
            self.aggregates.sum_guest_meals(room_id, period_id),
            self.aggregates.sum_expenses(room_id, period_id),
            self.aggregates.sum_purchased_shopping(room_id, period_id),
            self.aggregates.sum_transactions(room_id, period_id, transaction_types=CREDIT_TYPES),
            self.directory.list_members(room_id),
        )
        return PeriodTotals(
            period_id=period_id,
            total_meals=int(meals or 0),
            total_guest_meals=int(guest_meals or 0),
            total_expenses=to_decimal(expenses),
            total_shopping=to_decimal(shopping),
            total_credits=to_decimal(credits),
            member_count=len(members),
        )

    @staticmethod
    def _require_members(room_id: str, members: list) -> None:
        if not members:
            raise NotFoundError(f"Room {room_id} not found or has no members")
