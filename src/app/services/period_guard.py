"""Period Guard

The only way a ledger write gets a concrete period. Resolution order is
explicit period id, then the period covering the record date, then the
room's current period.
"""

import logging
from datetime import date
from typing import Optional
from src.app.repositories.period_repository import PeriodRepository
from src.domain.errors import InvalidStateError, NotFoundError, ValidationError
from src.domain.period import Period, PeriodStatus
from src.domain.period_state import LOCKED

logger = logging.getLogger(__name__)

WRITE = "WRITE"


class PeriodGuard:

    def __init__(self, period_repo: PeriodRepository):
        self.period_repo = period_repo

    async def resolve(
        self,
        room_id: str,
        period_id: Optional[str] = None,
        on_date: Optional[date] = None,
    ) -> Optional[Period]:
        """
        Resolve the period a request refers to

        Raises:
            NotFoundError: explicit period id does not exist
            ValidationError: explicit period belongs to another room
        """
        if period_id:
            period = await self.period_repo.get_by_id(period_id)
            if period is None:
                raise NotFoundError(f"Period {period_id} not found")
            if period.room_id != room_id:
                raise ValidationError(
                    f"Period {period_id} does not belong to room {room_id}",
                    reason=f"period.room_id={period.room_id}",
                )
            return period

        if on_date is not None:
            period = await self.period_repo.get_for_date(room_id, on_date)
            if period is not None:
                return period

        return await self.period_repo.get_active(room_id)

    async def readable_period(
        self,
        room_id: str,
        period_id: Optional[str] = None,
        require_period: bool = False,
    ) -> Optional[Period]:
        period = await self.resolve(room_id, period_id)
        if period is None and require_period:
            raise ValidationError(f"Room {room_id} has no active period")
        return period

    async def writable_period(
        self,
        room_id: str,
        period_id: Optional[str] = None,
        on_date: Optional[date] = None,
    ) -> Period:
        """
        Resolve a period and check it accepts ledger mutations

        Raises:
            ValidationError: no period could be resolved
            InvalidStateError: period is locked or archived
        """
        period = await self.resolve(room_id, period_id, on_date)
        if period is None:
            raise ValidationError(
                f"Room {room_id} has no period to record into",
                reason="Start a period before recording meals, expenses or transactions",
            )
        self.ensure_mutable(period)
        return period

    @staticmethod
    def ensure_mutable(period: Period) -> None:
        if period.is_locked:
            logger.info(f"Rejected write to locked period {period.id} of room {period.room_id}")
            raise InvalidStateError(LOCKED, WRITE, message=f"Period '{period.name}' is locked")
        if period.status == PeriodStatus.ARCHIVED:
            logger.info(f"Rejected write to archived period {period.id} of room {period.room_id}")
            raise InvalidStateError(
                PeriodStatus.ARCHIVED.value, WRITE, message=f"Period '{period.name}' is archived"
            )
