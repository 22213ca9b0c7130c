"""Period lookup Use Cases

GetCurrentPeriod and GetPeriodForDate. Both are cached under the room's
period lookup tags, so any lifecycle transition drops them.
"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.period_repository import PeriodRepository
from src.app.repositories.room_settings_repository import RoomSettingsRepository
from src.app.services.cache_service import CacheKey, CacheScope, CacheService, period_lookup_tags
from src.app.services.permission_gate import PermissionGate
from src.domain.errors import LedgerError, ValidationError
from src.domain.room_settings import PeriodMode
from .dtos import EnsureMonthPeriodCommandDTO, PeriodDTO, PeriodQueryDTO
from .ensure_month_period import EnsureMonthPeriod

logger = logging.getLogger(__name__)

SYSTEM_ACTOR = "system"


class GetCurrentPeriod:
    """
    Use Case: The room's ACTIVE period, or None

    When a provisioner is configured and the room runs MONTHLY periods, the
    read first runs the idempotent monthly provisioning, so reading in a new
    month may end the previous month's period and create this month's.
    Without a settings repository every room is treated as MONTHLY.
    """

    def __init__(
        self,
        period_repo: PeriodRepository,
        cache: CacheService,
        gate: Optional[PermissionGate] = None,
        provisioner: Optional[EnsureMonthPeriod] = None,
        ttl: int = 60,
        settings_repo: Optional[RoomSettingsRepository] = None,
        default_mode: PeriodMode = PeriodMode.CUSTOM,
    ):
        self.period_repo = period_repo
        self.cache = cache
        self.gate = gate
        self.provisioner = provisioner
        self.ttl = ttl
        self.settings_repo = settings_repo
        self.default_mode = default_mode

    async def execute(self, query: PeriodQueryDTO) -> Result[Optional[PeriodDTO]]:
        try:
            if self.gate is not None and query.actor_id:
                await self.gate.require_member(query.actor_id, query.room_id, "view periods")

            if self.provisioner is not None and await self._is_monthly(query.room_id):
                provisioned = await self.provisioner.execute(
                    EnsureMonthPeriodCommandDTO(room_id=query.room_id, actor_id=query.actor_id or SYSTEM_ACTOR)
                )
                if provisioned.is_err():
                    logger.warning(
                        f"Monthly provisioning failed for room {query.room_id}: {provisioned.error.message}"
                    )

            period = await self.cache.get_or_set(
                CacheKey(CacheScope.ACTIVE_PERIOD, query.room_id),
                lambda: self._load(query.room_id),
                PeriodDTO,
                ttl=self.ttl,
                tags=period_lookup_tags(query.room_id),
            )
            return Return.ok(period)

        except LedgerError as e:
            return Return.err(e.to_error())
        except Exception as e:
            logger.error(f"Failed to read current period of room {query.room_id}: {e}")
            return Return.err(Error(code="GET_CURRENT_PERIOD_FAILED", message="Failed to get current period", reason=str(e)))

    async def _is_monthly(self, room_id: str) -> bool:
        if self.settings_repo is None:
            return True
        settings = await self.settings_repo.get(room_id)
        mode = settings.period_mode if settings is not None else self.default_mode
        return mode == PeriodMode.MONTHLY

    async def _load(self, room_id: str) -> Optional[PeriodDTO]:
        period = await self.period_repo.get_active(room_id)
        return PeriodDTO.from_entity(period) if period else None


class GetPeriodForDate:
    """
    Use Case: The period whose [start_date, end_date or open] range contains a date

    Lets records be filed retroactively under a past period.
    """

    def __init__(
        self,
        period_repo: PeriodRepository,
        cache: CacheService,
        gate: Optional[PermissionGate] = None,
        ttl: int = 60,
    ):
        self.period_repo = period_repo
        self.cache = cache
        self.gate = gate
        self.ttl = ttl

    async def execute(self, query: PeriodQueryDTO) -> Result[Optional[PeriodDTO]]:
        try:
            if query.on_date is None:
                raise ValidationError("A date is required")
            if self.gate is not None and query.actor_id:
                await self.gate.require_member(query.actor_id, query.room_id, "view periods")

            on_date = query.on_date
            period = await self.cache.get_or_set(
                CacheKey(CacheScope.PERIOD_FOR_DATE, query.room_id, qualifier=on_date.isoformat()),
                lambda: self._load(query.room_id, on_date),
                PeriodDTO,
                ttl=self.ttl,
                tags=period_lookup_tags(query.room_id),
            )
            return Return.ok(period)

        except LedgerError as e:
            return Return.err(e.to_error())
        except Exception as e:
            logger.error(f"Failed to read period for date in room {query.room_id}: {e}")
            return Return.err(Error(code="GET_PERIOD_FOR_DATE_FAILED", message="Failed to get period for date", reason=str(e)))

    async def _load(self, room_id, on_date) -> Optional[PeriodDTO]:
        period = await self.period_repo.get_for_date(room_id, on_date)
        return PeriodDTO.from_entity(period) if period else None
