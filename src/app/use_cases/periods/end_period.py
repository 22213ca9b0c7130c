"""EndPeriod Use Case

Closes an ACTIVE period: status becomes ENDED and the end date is fixed.
"""

import logging
from datetime import date
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.period_repository import PeriodRepository
from src.app.repositories.room_settings_repository import RoomSettingsRepository
from src.app.services.cache_service import CacheService
from src.app.services.notification_service import NotificationKind, NotificationService
from src.app.services.permission_gate import PermissionGate
from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import LedgerError, ValidationError
from src.domain.period_state import PeriodTransition, apply_transition, check_transition
from src.domain.room_settings import PeriodMode
from .base import PeriodCommand
from .dtos import EndPeriodCommandDTO, PeriodDTO

logger = logging.getLogger(__name__)


class EndPeriod(PeriodCommand):
    """
    Use Case: End a period

    Business Rules:
    1. Privileged tier only
    2. Period must be ACTIVE and unlocked (InvalidStateError otherwise)
    3. end_date defaults to today and may not precede start_date
    4. Ending a period by hand switches a MONTHLY room back to CUSTOM
    """

    def __init__(
        self,
        uow: UnitOfWork,
        period_repo: PeriodRepository,
        gate: PermissionGate,
        cache: CacheService,
        notifier: Optional[NotificationService] = None,
        settings_repo: Optional[RoomSettingsRepository] = None,
    ):
        super().__init__(uow, period_repo, gate, cache, notifier)
        self.settings_repo = settings_repo

    async def execute(self, command: EndPeriodCommandDTO) -> Result[PeriodDTO]:
        try:
            await self.gate.require_privileged(command.actor_id, command.room_id, "end a period")

            period = await self._load(command.room_id, command.period_id)
            check_transition(period, PeriodTransition.END)

            end_date = command.end_date or date.today()
            if end_date < period.start_date:
                raise ValidationError(
                    "End date cannot be before the period start date",
                    reason=f"start_date={period.start_date}, end_date={end_date}",
                )

            apply_transition(period, PeriodTransition.END)
            period.end_date = end_date
            period = await self.period_repo.save(period)
            await self._leave_monthly_mode(command.room_id, command.actor_id)

            await self.uow.commit()
            await self._announce(command.room_id, NotificationKind.PERIOD_ENDED, f"Period '{period.name}' ended")

            return Return.ok(PeriodDTO.from_entity(period))

        except LedgerError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            logger.error(f"Failed to end period in room {command.room_id}: {e}")
            await self.uow.rollback()
            return Return.err(Error(code="END_PERIOD_FAILED", message="Failed to end period", reason=str(e)))

    async def _leave_monthly_mode(self, room_id: str, actor_id: str) -> None:
        if self.settings_repo is None:
            return
        settings = await self.settings_repo.get(room_id)
        if settings is not None and settings.period_mode == PeriodMode.MONTHLY:
            settings.period_mode = PeriodMode.CUSTOM
            settings.updated_by = actor_id
            await self.settings_repo.save(settings)
            logger.info(f"Room {room_id} switched back to CUSTOM periods after a manual end")
