"""EnsureMonthPeriod Use Case

Idempotent monthly provisioning. Runs as a documented side effect of
reading the current period when monthly periods are enabled.
"""

import logging
from datetime import date, timedelta
from sqlalchemy.exc import IntegrityError
from libs.result import Result, Return, Error
from src.app.services.notification_service import NotificationKind
from src.domain.errors import LedgerError
from src.domain.period import Period, PeriodStatus
from src.domain.period_state import PeriodTransition, apply_transition
from .base import PeriodCommand
from .dtos import EnsureMonthPeriodCommandDTO, PeriodDTO

logger = logging.getLogger(__name__)


def month_name(day: date) -> str:
    return day.strftime("%B %Y")


class EnsureMonthPeriod(PeriodCommand):
    """
    Use Case: Make sure the running month has a period

    Business Rules:
    1. No-op when the ACTIVE period starts in the current month (or later)
    2. An ACTIVE period from an earlier month is ended on the last day
       before the current month
    3. An existing period named for the month is returned as is
    4. Otherwise "<Month YYYY>" is created, starting on the 1st
    5. System path: no permission check, actor recorded as creator
    """

    async def execute(self, command: EnsureMonthPeriodCommandDTO) -> Result[PeriodDTO]:
        today = command.today or date.today()
        month_start = today.replace(day=1)
        name = month_name(today)

        try:
            active = await self.period_repo.get_active(command.room_id)
            if active is not None and active.start_date >= month_start:
                return Return.ok(PeriodDTO.from_entity(active))

            changed = False
            if active is not None:
                apply_transition(active, PeriodTransition.END)
                active.end_date = max(active.start_date, month_start - timedelta(days=1))
                await self.period_repo.save(active)
                changed = True
                logger.info(f"Ended period '{active.name}' of room {command.room_id} at month rollover")

            period = await self.period_repo.find_by_name(command.room_id, name)
            if period is None:
                try:
                    period = await self.period_repo.create(
                        Period(
                            room_id=command.room_id,
                            name=name,
                            start_date=month_start,
                            status=PeriodStatus.ACTIVE,
                            created_by=command.actor_id,
                            notes="Created automatically for the month",
                        )
                    )
                    changed = True
                except IntegrityError:
                    # Another request provisioned the month first
                    await self.uow.rollback()
                    period = await self.period_repo.get_active(command.room_id)
                    if period is None:
                        raise
                    return Return.ok(PeriodDTO.from_entity(period))

            if changed:
                await self.uow.commit()
                await self._announce(command.room_id, NotificationKind.PERIOD_STARTED, f"Period '{period.name}' is now current")

            return Return.ok(PeriodDTO.from_entity(period))

        except LedgerError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            logger.error(f"Failed to provision monthly period for room {command.room_id}: {e}")
            await self.uow.rollback()
            return Return.err(
                Error(code="ENSURE_MONTH_PERIOD_FAILED", message="Failed to provision monthly period", reason=str(e))
            )
