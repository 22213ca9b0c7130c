"""StartPeriod Use Case

Opens a new ACTIVE accounting period for a room.
"""

import logging
from sqlalchemy.exc import IntegrityError
from libs.result import Result, Return, Error
from src.app.services.notification_service import NotificationKind
from src.domain.errors import LedgerError, ValidationError
from src.domain.period import Period, PeriodStatus
from .base import PeriodCommand, unique_period_name
from .dtos import PeriodDTO, StartPeriodCommandDTO

logger = logging.getLogger(__name__)


class StartPeriod(PeriodCommand):
    """
    Use Case: Start a period

    Business Rules:
    1. Privileged tier only
    2. At most one ACTIVE period per room: the previous one must be ended first
    3. start_date must precede end_date when an end date is given
    4. A closed range may not overlap another closed-range period of the room
    5. Clashing names get a " (n)" suffix

    Flow:
    1. Check permission
    2. Validate dates, active period and overlap
    3. Create period (the partial unique index catches concurrent starts)
    4. Commit, invalidate room cache, notify members
    """

    async def execute(self, command: StartPeriodCommandDTO) -> Result[PeriodDTO]:
        try:
            await self.gate.require_privileged(command.actor_id, command.room_id, "start a period")

            if command.end_date is not None and command.start_date >= command.end_date:
                raise ValidationError(
                    "Start date must be before end date",
                    reason=f"start_date={command.start_date}, end_date={command.end_date}",
                )

            active = await self.period_repo.get_active(command.room_id)
            if active is not None:
                raise ValidationError(
                    f"Room already has an active period '{active.name}'. End it before starting a new one",
                    reason=f"active_period_id={active.id}",
                )

            if command.end_date is not None:
                overlapping = [
                    p for p in await self.period_repo.find_overlapping(
                        command.room_id, command.start_date, command.end_date
                    )
                    if p.end_date is not None
                ]
                if overlapping:
                    raise ValidationError(
                        f"Period dates overlap with '{overlapping[0].name}'",
                        reason=f"overlapping_period_id={overlapping[0].id}",
                    )

            name = await unique_period_name(self.period_repo, command.room_id, command.name)

            try:
                period = await self.period_repo.create(
                    Period(
                        room_id=command.room_id,
                        name=name,
                        start_date=command.start_date,
                        end_date=command.end_date,
                        status=PeriodStatus.ACTIVE,
                        created_by=command.actor_id,
                        notes=command.notes,
                    )
                )
            except IntegrityError:
                await self.uow.rollback()
                raise ValidationError("Room already has an active period", reason="concurrent start")

            await self.uow.commit()
            await self._announce(command.room_id, NotificationKind.PERIOD_STARTED, f"Period '{period.name}' started")

            return Return.ok(PeriodDTO.from_entity(period))

        except LedgerError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            logger.error(f"Failed to start period for room {command.room_id}: {e}")
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="START_PERIOD_FAILED",
                    message="Failed to start period",
                    reason=str(e),
                )
            )
