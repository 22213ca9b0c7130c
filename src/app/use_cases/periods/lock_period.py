"""LockPeriod and UnlockPeriod Use Cases

The lock flag freezes every ledger record stamped with the period.
"""

import logging
from sqlalchemy.exc import IntegrityError
from libs.result import Result, Return, Error
from src.app.services.notification_service import NotificationKind
from src.domain.errors import ConflictError, LedgerError, ValidationError
from src.domain.period import PeriodStatus
from src.domain.period_state import UNLOCK_TARGETS, PeriodTransition, apply_transition, check_transition
from .base import PeriodCommand
from .dtos import PeriodActionCommandDTO, PeriodDTO, UnlockPeriodCommandDTO

logger = logging.getLogger(__name__)


class LockPeriod(PeriodCommand):
    """
    Use Case: Lock a period

    Business Rules:
    1. Privileged tier only
    2. Period must be ENDED and unlocked
    """

    async def execute(self, command: PeriodActionCommandDTO) -> Result[PeriodDTO]:
        try:
            await self.gate.require_privileged(command.actor_id, command.room_id, "lock a period")

            period = await self._load(command.room_id, command.period_id)
            apply_transition(period, PeriodTransition.LOCK)
            period = await self.period_repo.save(period)

            await self.uow.commit()
            await self._announce(command.room_id, NotificationKind.PERIOD_LOCKED, f"Period '{period.name}' locked")

            return Return.ok(PeriodDTO.from_entity(period))

        except LedgerError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            logger.error(f"Failed to lock period in room {command.room_id}: {e}")
            await self.uow.rollback()
            return Return.err(Error(code="LOCK_PERIOD_FAILED", message="Failed to lock period", reason=str(e)))


class UnlockPeriod(PeriodCommand):
    """
    Use Case: Unlock a period

    Business Rules:
    1. Privileged tier only
    2. Period must be locked
    3. Caller picks the resulting status, ACTIVE or ENDED
    4. ACTIVE is refused with ConflictError while another period is ACTIVE
    """

    async def execute(self, command: UnlockPeriodCommandDTO) -> Result[PeriodDTO]:
        try:
            await self.gate.require_privileged(command.actor_id, command.room_id, "unlock a period")

            period = await self._load(command.room_id, command.period_id)
            check_transition(period, PeriodTransition.UNLOCK)

            if command.target_status not in UNLOCK_TARGETS:
                raise ValidationError(
                    f"Unlocked period must become ACTIVE or ENDED, not {command.target_status.value}"
                )

            if command.target_status == PeriodStatus.ACTIVE:
                active = await self.period_repo.get_active(command.room_id)
                if active is not None and active.id != period.id:
                    raise ConflictError(
                        f"Cannot reactivate '{period.name}': '{active.name}' is already active",
                        reason=f"active_period_id={active.id}",
                    )

            apply_transition(period, PeriodTransition.UNLOCK, target_status=command.target_status)
            try:
                period = await self.period_repo.save(period)
            except IntegrityError:
                await self.uow.rollback()
                raise ConflictError("Another period became active concurrently")

            await self.uow.commit()
            await self._announce(
                command.room_id,
                NotificationKind.PERIOD_UNLOCKED,
                f"Period '{period.name}' unlocked as {period.status.value}",
            )

            return Return.ok(PeriodDTO.from_entity(period))

        except LedgerError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            logger.error(f"Failed to unlock period in room {command.room_id}: {e}")
            await self.uow.rollback()
            return Return.err(Error(code="UNLOCK_PERIOD_FAILED", message="Failed to unlock period", reason=str(e)))
