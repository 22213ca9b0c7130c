"""ListPeriods and ListPeriodsByMonth Use Cases"""

import logging
from calendar import monthrange
from datetime import date
from libs.result import Result, Return, Error
from src.app.repositories.period_repository import PeriodRepository
from src.app.services.permission_gate import PermissionGate
from src.domain.errors import LedgerError, ValidationError
from src.domain.period import PeriodStatus
from .dtos import PeriodDTO, PeriodListDTO, PeriodQueryDTO

logger = logging.getLogger(__name__)


class ListPeriods:
    """
    Use Case: List a room's periods, newest start date first

    Archived periods are left out unless include_archived is set.
    """

    def __init__(self, period_repo: PeriodRepository, gate: PermissionGate, limit: int = 100):
        self.period_repo = period_repo
        self.gate = gate
        self.limit = limit

    async def execute(self, query: PeriodQueryDTO) -> Result[PeriodListDTO]:
        try:
            if query.actor_id:
                await self.gate.require_member(query.actor_id, query.room_id, "view periods")

            periods = await self.period_repo.list_by_room(query.room_id, limit=self.limit)
            if not query.include_archived:
                periods = [p for p in periods if p.status != PeriodStatus.ARCHIVED]

            return Return.ok(
                PeriodListDTO(
                    room_id=query.room_id,
                    periods=[PeriodDTO.from_entity(p) for p in periods],
                    total=len(periods),
                )
            )

        except LedgerError as e:
            return Return.err(e.to_error())
        except Exception as e:
            logger.error(f"Failed to list periods of room {query.room_id}: {e}")
            return Return.err(Error(code="LIST_PERIODS_FAILED", message="Failed to list periods", reason=str(e)))


class ListPeriodsByMonth:
    """
    Use Case: Periods whose date range intersects a calendar month

    Business Rules:
    1. Year and month default to the current month
    2. Month must be 1-12 (ValidationError)
    3. Open ended periods that started on or before the month's last day count
    4. Newest start date first, archived periods included
    """

    def __init__(self, period_repo: PeriodRepository, gate: PermissionGate):
        self.period_repo = period_repo
        self.gate = gate

    async def execute(self, query: PeriodQueryDTO) -> Result[PeriodListDTO]:
        try:
            today = date.today()
            year = query.year or today.year
            month = query.month or today.month
            if not 1 <= month <= 12 or not 1 <= year <= 9999:
                raise ValidationError("Invalid year or month", reason=f"year={year}, month={month}")

            if query.actor_id:
                await self.gate.require_member(query.actor_id, query.room_id, "view periods")

            first_day = date(year, month, 1)
            last_day = date(year, month, monthrange(year, month)[1])
            periods = await self.period_repo.find_overlapping(query.room_id, first_day, last_day)
            periods.sort(key=lambda p: (p.start_date, p.created_at), reverse=True)

            return Return.ok(
                PeriodListDTO(
                    room_id=query.room_id,
                    periods=[PeriodDTO.from_entity(p) for p in periods],
                    total=len(periods),
                )
            )

        except LedgerError as e:
            return Return.err(e.to_error())
        except Exception as e:
            logger.error(f"Failed to list periods by month of room {query.room_id}: {e}")
            return Return.err(Error(code="LIST_PERIODS_BY_MONTH_FAILED", message="Failed to list periods by month", reason=str(e)))
