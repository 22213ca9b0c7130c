"""ToggleMeal Use Case

Adds or removes the meal in one (user, room, date, type) slot.
"""

import logging
from sqlalchemy.exc import IntegrityError
from libs.result import Result, Return, Error
from src.app.repositories.meal_repository import MealRepository
from src.app.services.cache_service import CacheService
from src.app.services.period_guard import PeriodGuard
from src.app.services.permission_gate import PermissionGate
from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import LedgerError
from src.domain.meal import Meal
from .base import LedgerCommand
from .dtos import MealAction, MealToggleResultDTO, ToggleMealCommandDTO

logger = logging.getLogger(__name__)


class ToggleMeal(LedgerCommand):
    """
    Use Case: Add or remove a meal

    Business Rules:
    1. Members toggle their own meals, privileged tiers anyone's
    2. Add is an upsert: a taken slot is a successful no-op, and a losing
       concurrent insert converges on the surviving row
    3. Remove of an absent meal is a successful no-op
    4. The meal's period must accept writes (not locked, not archived)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        meal_repo: MealRepository,
        guard: PeriodGuard,
        gate: PermissionGate,
        cache: CacheService,
    ):
        super().__init__(uow, guard, gate, cache)
        self.meal_repo = meal_repo

    async def execute(self, command: ToggleMealCommandDTO) -> Result[MealToggleResultDTO]:
        user_id = command.target_user_id
        try:
            await self.gate.require_can_act_for(command.actor_id, user_id, command.room_id, "update meals")

            existing = await self.meal_repo.get_slot(user_id, command.room_id, command.meal_date, command.meal_type)

            if command.action == MealAction.REMOVE:
                if existing is None:
                    return Return.ok(self._result(command, None, present=False, changed=False))

                await self.guard.writable_period(command.room_id, existing.period_id)
                period_id = existing.period_id
                await self.meal_repo.delete(existing)
                await self._commit(period_id)
                return Return.ok(self._result(command, period_id, present=False, changed=True))

            if existing is not None:
                return Return.ok(self._result(command, existing.period_id, present=True, changed=False))

            period = await self.guard.writable_period(command.room_id, command.period_id, command.meal_date)
            try:
                meal = await self.meal_repo.create(
                    Meal(
                        room_id=command.room_id,
                        period_id=period.id,
                        user_id=user_id,
                        meal_date=command.meal_date,
                        meal_type=command.meal_type,
                    )
                )
            except IntegrityError:
                # Lost the race for the slot; the other insert stands
                await self.uow.rollback()
                winner = await self.meal_repo.get_slot(user_id, command.room_id, command.meal_date, command.meal_type)
                if winner is None:
                    raise
                return Return.ok(self._result(command, winner.period_id, present=True, changed=False))

            await self._commit(meal.period_id)
            return Return.ok(self._result(command, meal.period_id, present=True, changed=True))

        except LedgerError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            logger.error(f"Failed to toggle meal for user {user_id} in room {command.room_id}: {e}")
            await self.uow.rollback()
            return Return.err(Error(code="TOGGLE_MEAL_FAILED", message="Failed to update meal", reason=str(e)))

    def _result(self, command: ToggleMealCommandDTO, period_id, present: bool, changed: bool) -> MealToggleResultDTO:
        return MealToggleResultDTO(
            user_id=command.target_user_id,
            meal_date=command.meal_date,
            meal_type=command.meal_type,
            period_id=period_id,
            present=present,
            changed=changed,
        )
