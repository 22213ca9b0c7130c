"""UpsertGuestMeal Use Case

Sets the number of guest meals a member hosts in one slot.
"""

import logging
from sqlalchemy.exc import IntegrityError
from libs.result import Result, Return, Error
from src.app.repositories.guest_meal_repository import GuestMealRepository
from src.app.services.cache_service import CacheService
from src.app.services.period_guard import PeriodGuard
from src.app.services.permission_gate import PermissionGate
from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import LedgerError
from src.domain.guest_meal import GuestMeal
from .base import LedgerCommand
from .dtos import GuestMealDTO, UpsertGuestMealCommandDTO

logger = logging.getLogger(__name__)


class UpsertGuestMeal(LedgerCommand):
    """
    Use Case: Upsert a guest meal

    Business Rules:
    1. The count replaces the stored count, it is not added to it
    2. Count 0 removes the slot (no-op when absent)
    3. An existing slot stays in the period it was stamped with
    """

    def __init__(
        self,
        uow: UnitOfWork,
        guest_meal_repo: GuestMealRepository,
        guard: PeriodGuard,
        gate: PermissionGate,
        cache: CacheService,
    ):
        super().__init__(uow, guard, gate, cache)
        self.guest_meal_repo = guest_meal_repo

    async def execute(self, command: UpsertGuestMealCommandDTO) -> Result[GuestMealDTO]:
        user_id = command.target_user_id
        try:
            await self.gate.require_can_act_for(command.actor_id, user_id, command.room_id, "update guest meals")

            existing = await self.guest_meal_repo.get_slot(
                user_id, command.room_id, command.meal_date, command.meal_type
            )

            if command.count == 0:
                if existing is None:
                    return Return.ok(self._result(command, None, 0))
                await self.guard.writable_period(command.room_id, existing.period_id)
                period_id = existing.period_id
                await self.guest_meal_repo.delete(existing)
                await self._commit(period_id)
                return Return.ok(self._result(command, period_id, 0))

            if existing is None:
                period = await self.guard.writable_period(command.room_id, command.period_id, command.meal_date)
                try:
                    guest_meal = await self.guest_meal_repo.create(
                        GuestMeal(
                            room_id=command.room_id,
                            period_id=period.id,
                            user_id=user_id,
                            meal_date=command.meal_date,
                            meal_type=command.meal_type,
                            count=command.count,
                        )
                    )
                except IntegrityError:
                    await self.uow.rollback()
                    existing = await self.guest_meal_repo.get_slot(
                        user_id, command.room_id, command.meal_date, command.meal_type
                    )
                    if existing is None:
                        raise

            if existing is not None:
                await self.guard.writable_period(command.room_id, existing.period_id)
                existing.count = command.count
                guest_meal = await self.guest_meal_repo.update(existing)

            await self._commit(guest_meal.period_id)
            return Return.ok(self._result(command, guest_meal.period_id, guest_meal.count))

        except LedgerError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            logger.error(f"Failed to upsert guest meal for user {user_id} in room {command.room_id}: {e}")
            await self.uow.rollback()
            return Return.err(Error(code="UPSERT_GUEST_MEAL_FAILED", message="Failed to update guest meal", reason=str(e)))

    def _result(self, command: UpsertGuestMealCommandDTO, period_id, count: int) -> GuestMealDTO:
        return GuestMealDTO(
            user_id=command.target_user_id,
            meal_date=command.meal_date,
            meal_type=command.meal_type,
            period_id=period_id,
            count=count,
        )
