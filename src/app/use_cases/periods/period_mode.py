"""GetPeriodMode and SetPeriodMode Use Cases

A room either runs MONTHLY periods, provisioned on read one calendar month
at a time, or CUSTOM periods started and ended by hand.
"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.period_repository import PeriodRepository
from src.app.repositories.room_settings_repository import RoomSettingsRepository
from src.app.services.cache_service import CacheService, room_tag
from src.app.services.permission_gate import PermissionGate
from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import LedgerError, ValidationError
from src.domain.room_settings import PeriodMode, RoomSettings
from .dtos import EnsureMonthPeriodCommandDTO, PeriodModeDTO, PeriodQueryDTO, SetPeriodModeCommandDTO
from .ensure_month_period import EnsureMonthPeriod

logger = logging.getLogger(__name__)


async def resolve_period_mode(
    settings_repo: RoomSettingsRepository,
    room_id: str,
    default_mode: PeriodMode = PeriodMode.CUSTOM,
) -> PeriodModeDTO:
    settings = await settings_repo.get(room_id)
    if settings is None:
        return PeriodModeDTO(room_id=room_id, period_mode=default_mode, is_default=True)
    return PeriodModeDTO.from_entity(settings)


class GetPeriodMode:
    """Use Case: Read a room's period mode (members only)"""

    def __init__(
        self,
        settings_repo: RoomSettingsRepository,
        gate: PermissionGate,
        default_mode: PeriodMode = PeriodMode.CUSTOM,
    ):
        self.settings_repo = settings_repo
        self.gate = gate
        self.default_mode = default_mode

    async def execute(self, query: PeriodQueryDTO) -> Result[PeriodModeDTO]:
        try:
            if query.actor_id:
                await self.gate.require_member(query.actor_id, query.room_id, "view the period mode")
            return Return.ok(await resolve_period_mode(self.settings_repo, query.room_id, self.default_mode))

        except LedgerError as e:
            return Return.err(e.to_error())
        except Exception as e:
            logger.error(f"Failed to read period mode of room {query.room_id}: {e}")
            return Return.err(Error(code="GET_PERIOD_MODE_FAILED", message="Failed to get period mode", reason=str(e)))


class SetPeriodMode:
    """
    Use Case: Switch a room between MONTHLY and CUSTOM periods

    Business Rules:
    1. Privileged tier only
    2. A MONTHLY room with an ACTIVE period cannot switch away until that
       period is ended (ValidationError)
    3. Switching to MONTHLY with no ACTIVE period provisions the current
       month's period right away
    4. Setting the mode a room already has is a no-op success
    """

    def __init__(
        self,
        uow: UnitOfWork,
        settings_repo: RoomSettingsRepository,
        period_repo: PeriodRepository,
        gate: PermissionGate,
        cache: CacheService,
        provisioner: Optional[EnsureMonthPeriod] = None,
        default_mode: PeriodMode = PeriodMode.CUSTOM,
    ):
        self.uow = uow
        self.settings_repo = settings_repo
        self.period_repo = period_repo
        self.gate = gate
        self.cache = cache
        self.provisioner = provisioner
        self.default_mode = default_mode

    async def execute(self, command: SetPeriodModeCommandDTO) -> Result[PeriodModeDTO]:
        try:
            await self.gate.require_privileged(command.actor_id, command.room_id, "change the period mode")

            current = await resolve_period_mode(self.settings_repo, command.room_id, self.default_mode)
            if current.period_mode == command.mode:
                return Return.ok(current)

            active = await self.period_repo.get_active(command.room_id)
            if current.period_mode == PeriodMode.MONTHLY and active is not None:
                raise ValidationError(
                    "Cannot change period mode while a monthly period is active. End the current period first",
                    reason=f"active_period_id={active.id}",
                )

            settings = await self.settings_repo.get(command.room_id) or RoomSettings(room_id=command.room_id)
            settings.period_mode = command.mode
            settings.updated_by = command.actor_id
            settings = await self.settings_repo.save(settings)

            await self.uow.commit()
            await self.cache.invalidate(room_tag(command.room_id))
            logger.info(f"Room {command.room_id} switched to {command.mode.value} periods by {command.actor_id}")

            if command.mode == PeriodMode.MONTHLY and active is None and self.provisioner is not None:
                provisioned = await self.provisioner.execute(
                    EnsureMonthPeriodCommandDTO(room_id=command.room_id, actor_id=command.actor_id, today=command.today)
                )
                if provisioned.is_err():
                    logger.warning(
                        f"Monthly provisioning failed for room {command.room_id}: {provisioned.error.message}"
                    )

            return Return.ok(PeriodModeDTO.from_entity(settings))

        except LedgerError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            logger.error(f"Failed to set period mode of room {command.room_id}: {e}")
            await self.uow.rollback()
            return Return.err(Error(code="SET_PERIOD_MODE_FAILED", message="Failed to set period mode", reason=str(e)))
