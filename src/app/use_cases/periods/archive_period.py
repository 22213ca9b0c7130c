"""ArchivePeriod Use Case"""

import logging
from libs.result import Result, Return, Error
from src.app.services.notification_service import NotificationKind
from src.domain.errors import LedgerError
from src.domain.period_state import PeriodTransition, apply_transition
from .base import PeriodCommand
from .dtos import PeriodActionCommandDTO, PeriodDTO

logger = logging.getLogger(__name__)


class ArchivePeriod(PeriodCommand):
    """
    Use Case: Archive a period

    ARCHIVED is terminal: the period can never be unlocked or reactivated.
    Requires ENDED and unlocked; an ACTIVE period must be ended first.
    """

    async def execute(self, command: PeriodActionCommandDTO) -> Result[PeriodDTO]:
        try:
            await self.gate.require_privileged(command.actor_id, command.room_id, "archive a period")

            period = await self._load(command.room_id, command.period_id)
            apply_transition(period, PeriodTransition.ARCHIVE)
            period = await self.period_repo.save(period)

            await self.uow.commit()
            await self._announce(command.room_id, NotificationKind.PERIOD_ARCHIVED, f"Period '{period.name}' archived")

            return Return.ok(PeriodDTO.from_entity(period))

        except LedgerError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            logger.error(f"Failed to archive period in room {command.room_id}: {e}")
            await self.uow.rollback()
            return Return.err(Error(code="ARCHIVE_PERIOD_FAILED", message="Failed to archive period", reason=str(e)))
