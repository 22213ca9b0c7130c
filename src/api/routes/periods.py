"""Period API Routes

FastAPI routes for the period lifecycle of a room.
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.error import ClientError
from src.api.schemas.balance_response import PeriodSummaryResponseSchema
from src.api.schemas.period_request import (
    EndPeriodRequestSchema,
    PeriodTargetRequestSchema,
    RestartPeriodRequestSchema,
    SetPeriodModeRequestSchema,
    StartPeriodRequestSchema,
    UnlockPeriodRequestSchema,
)
from src.adapter.repositories.account_transaction_repository import SqlAlchemyAccountTransactionRepository
from src.adapter.repositories.period_repository import SqlAlchemyPeriodRepository
from src.adapter.repositories.room_settings_repository import SqlAlchemyRoomSettingsRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.balance_engine import BalanceEngine
from src.app.services.cache_service import CacheService
from src.app.services.notification_service import NotificationService
from src.app.services.period_guard import PeriodGuard
from src.app.services.permission_gate import PermissionGate
from src.app.use_cases.periods import (
    ArchivePeriod,
    EndPeriod,
    EndPeriodCommandDTO,
    EnsureMonthPeriod,
    GetCurrentPeriod,
    GetPeriodForDate,
    GetPeriodMode,
    GetPeriodSummary,
    ListPeriods,
    ListPeriodsByMonth,
    LockPeriod,
    PeriodActionCommandDTO,
    PeriodDTO,
    PeriodListDTO,
    PeriodModeDTO,
    PeriodQueryDTO,
    RestartPeriod,
    RestartPeriodCommandDTO,
    SetPeriodMode,
    SetPeriodModeCommandDTO,
    StartPeriod,
    StartPeriodCommandDTO,
    UnlockPeriod,
    UnlockPeriodCommandDTO,
)
from src.depends import (
    default_period_mode,
    get_actor_id,
    get_balance_engine,
    get_cache_service,
    get_notifier,
    get_period_guard,
    get_permission_gate,
    get_session,
)

router = APIRouter(prefix="/periods", tags=["Periods"])

ERROR_RESPONSES = {
    403: {
        "description": "Caller lacks the privileged tier",
        "content": {
            "application/json": {
                "example": {"error": {"code": "AUTHORIZATION_ERROR", "message": "Insufficient permissions to lock a period"}}
            }
        },
    },
    409: {
        "description": "Transition not allowed from the current state",
        "content": {
            "application/json": {
                "example": {"error": {"code": "INVALID_STATE", "message": "Cannot move period from ACTIVE to LOCKED"}}
            }
        },
    },
}


def _unwrap(result):
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.get("/{room_id}", response_model=PeriodListDTO)
async def list_periods(
    room_id: str,
    include_archived: bool = Query(default=False),
    actor_id: str = Depends(get_actor_id),
    session: AsyncSession = Depends(get_session),
    gate: PermissionGate = Depends(get_permission_gate),
):
    """List the room's periods, newest first."""
    use_case = ListPeriods(SqlAlchemyPeriodRepository(session), gate)
    result = await use_case.execute(
        PeriodQueryDTO(room_id=room_id, actor_id=actor_id, include_archived=include_archived)
    )
    return _unwrap(result)


@router.get("/{room_id}/current", response_model=Optional[PeriodDTO])
async def get_current_period(
    room_id: str,
    actor_id: str = Depends(get_actor_id),
    session: AsyncSession = Depends(get_session),
    gate: PermissionGate = Depends(get_permission_gate),
    cache: CacheService = Depends(get_cache_service),
    notifier: NotificationService = Depends(get_notifier),
):
    """
    Get the room's ACTIVE period, or null.

    In a MONTHLY room, reading in a new month ends last month's period and
    creates this month's before answering.
    """
    period_repo = SqlAlchemyPeriodRepository(session)
    provisioner = EnsureMonthPeriod(SqlAlchemyUnitOfWork(session), period_repo, gate, cache, notifier)

    use_case = GetCurrentPeriod(
        period_repo,
        cache,
        gate=gate,
        provisioner=provisioner,
        ttl=ApplicationConfig.CACHE_TTL_ACTIVE_PERIOD,
        settings_repo=SqlAlchemyRoomSettingsRepository(session),
        default_mode=default_period_mode(),
    )
    result = await use_case.execute(PeriodQueryDTO(room_id=room_id, actor_id=actor_id))
    return _unwrap(result)


@router.get("/{room_id}/by-date", response_model=Optional[PeriodDTO])
async def get_period_for_date(
    room_id: str,
    on: date = Query(..., description="Date the period must contain"),
    actor_id: str = Depends(get_actor_id),
    session: AsyncSession = Depends(get_session),
    gate: PermissionGate = Depends(get_permission_gate),
    cache: CacheService = Depends(get_cache_service),
):
    """Get the period whose date range contains ``on``, or null."""
    use_case = GetPeriodForDate(
        SqlAlchemyPeriodRepository(session), cache, gate=gate, ttl=ApplicationConfig.CACHE_TTL_ACTIVE_PERIOD
    )
    result = await use_case.execute(PeriodQueryDTO(room_id=room_id, actor_id=actor_id, on_date=on))
    return _unwrap(result)


@router.get("/{room_id}/by-month", response_model=PeriodListDTO)
async def list_periods_by_month(
    room_id: str,
    year: Optional[int] = Query(default=None, ge=1, le=9999),
    month: Optional[int] = Query(default=None, ge=1, le=12),
    actor_id: str = Depends(get_actor_id),
    session: AsyncSession = Depends(get_session),
    gate: PermissionGate = Depends(get_permission_gate),
):
    """List the periods overlapping a calendar month (default: this month)."""
    use_case = ListPeriodsByMonth(SqlAlchemyPeriodRepository(session), gate)
    result = await use_case.execute(PeriodQueryDTO(room_id=room_id, actor_id=actor_id, year=year, month=month))
    return _unwrap(result)


@router.get("/{room_id}/summary", response_model=PeriodSummaryResponseSchema)
async def get_period_summary(
    room_id: str,
    period_id: Optional[str] = Query(default=None),
    actor_id: str = Depends(get_actor_id),
    guard: PeriodGuard = Depends(get_period_guard),
    engine: BalanceEngine = Depends(get_balance_engine),
    gate: PermissionGate = Depends(get_permission_gate),
    cache: CacheService = Depends(get_cache_service),
):
    """Ledger totals of one period (default: the active period)."""
    use_case = GetPeriodSummary(
        guard,
        engine,
        gate,
        cache,
        ttl=ApplicationConfig.CACHE_TTL_BALANCES,
        closed_ttl=ApplicationConfig.CACHE_TTL_CLOSED_PERIOD,
    )
    result = await use_case.execute(PeriodQueryDTO(room_id=room_id, actor_id=actor_id, period_id=period_id))
    return PeriodSummaryResponseSchema.model_validate(_unwrap(result).model_dump())


@router.post("/{room_id}/start", response_model=PeriodDTO, status_code=status.HTTP_201_CREATED, responses=ERROR_RESPONSES)
async def start_period(
    room_id: str,
    request: StartPeriodRequestSchema,
    actor_id: str = Depends(get_actor_id),
    session: AsyncSession = Depends(get_session),
    gate: PermissionGate = Depends(get_permission_gate),
    cache: CacheService = Depends(get_cache_service),
    notifier: NotificationService = Depends(get_notifier),
):
    """
    Start a new ACTIVE period.

    **Returns:**
    - 201: Period started
    - 400: Another period is ACTIVE, bad dates or overlapping range
    - 403: Caller is not privileged
    """
    use_case = StartPeriod(SqlAlchemyUnitOfWork(session), SqlAlchemyPeriodRepository(session), gate, cache, notifier)
    command = StartPeriodCommandDTO(
        room_id=room_id,
        actor_id=actor_id,
        name=request.name,
        start_date=request.start_date,
        end_date=request.end_date,
        notes=request.notes,
    )
    return _unwrap(await use_case.execute(command))


@router.post("/{room_id}/end", response_model=PeriodDTO, responses=ERROR_RESPONSES)
async def end_period(
    room_id: str,
    request: EndPeriodRequestSchema,
    actor_id: str = Depends(get_actor_id),
    session: AsyncSession = Depends(get_session),
    gate: PermissionGate = Depends(get_permission_gate),
    cache: CacheService = Depends(get_cache_service),
    notifier: NotificationService = Depends(get_notifier),
):
    """End the ACTIVE (or given) period."""
    use_case = EndPeriod(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyPeriodRepository(session),
        gate,
        cache,
        notifier,
        settings_repo=SqlAlchemyRoomSettingsRepository(session),
    )
    command = EndPeriodCommandDTO(
        room_id=room_id, actor_id=actor_id, period_id=request.period_id, end_date=request.end_date
    )
    return _unwrap(await use_case.execute(command))


@router.post("/{room_id}/lock", response_model=PeriodDTO, responses=ERROR_RESPONSES)
async def lock_period(
    room_id: str,
    request: PeriodTargetRequestSchema,
    actor_id: str = Depends(get_actor_id),
    session: AsyncSession = Depends(get_session),
    gate: PermissionGate = Depends(get_permission_gate),
    cache: CacheService = Depends(get_cache_service),
    notifier: NotificationService = Depends(get_notifier),
):
    """Lock an ENDED period; its ledger records become read-only."""
    use_case = LockPeriod(SqlAlchemyUnitOfWork(session), SqlAlchemyPeriodRepository(session), gate, cache, notifier)
    command = PeriodActionCommandDTO(room_id=room_id, actor_id=actor_id, period_id=request.period_id)
    return _unwrap(await use_case.execute(command))


@router.post("/{room_id}/unlock", response_model=PeriodDTO, responses=ERROR_RESPONSES)
async def unlock_period(
    room_id: str,
    request: UnlockPeriodRequestSchema,
    actor_id: str = Depends(get_actor_id),
    session: AsyncSession = Depends(get_session),
    gate: PermissionGate = Depends(get_permission_gate),
    cache: CacheService = Depends(get_cache_service),
    notifier: NotificationService = Depends(get_notifier),
):
    """
    Unlock a period back to ACTIVE or ENDED.

    **Returns:**
    - 409 CONFLICT: target ACTIVE while another period is ACTIVE
    """
    use_case = UnlockPeriod(SqlAlchemyUnitOfWork(session), SqlAlchemyPeriodRepository(session), gate, cache, notifier)
    command = UnlockPeriodCommandDTO(
        room_id=room_id, actor_id=actor_id, period_id=request.period_id, target_status=request.target_status
    )
    return _unwrap(await use_case.execute(command))


@router.post("/{room_id}/archive", response_model=PeriodDTO, responses=ERROR_RESPONSES)
async def archive_period(
    room_id: str,
    request: PeriodTargetRequestSchema,
    actor_id: str = Depends(get_actor_id),
    session: AsyncSession = Depends(get_session),
    gate: PermissionGate = Depends(get_permission_gate),
    cache: CacheService = Depends(get_cache_service),
    notifier: NotificationService = Depends(get_notifier),
):
    """Archive an ENDED, unlocked period. Archiving is final."""
    use_case = ArchivePeriod(SqlAlchemyUnitOfWork(session), SqlAlchemyPeriodRepository(session), gate, cache, notifier)
    command = PeriodActionCommandDTO(room_id=room_id, actor_id=actor_id, period_id=request.period_id)
    return _unwrap(await use_case.execute(command))


@router.post("/{room_id}/restart", response_model=PeriodDTO, status_code=status.HTTP_201_CREATED, responses=ERROR_RESPONSES)
async def restart_period(
    room_id: str,
    request: RestartPeriodRequestSchema,
    actor_id: str = Depends(get_actor_id),
    session: AsyncSession = Depends(get_session),
    gate: PermissionGate = Depends(get_permission_gate),
    engine: BalanceEngine = Depends(get_balance_engine),
    cache: CacheService = Depends(get_cache_service),
    notifier: NotificationService = Depends(get_notifier),
):
    """Start a new period from an existing one, optionally carrying balances forward."""
    use_case = RestartPeriod(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyPeriodRepository(session),
        SqlAlchemyAccountTransactionRepository(session),
        engine,
        gate,
        cache,
        notifier,
    )
    command = RestartPeriodCommandDTO(
        room_id=room_id,
        actor_id=actor_id,
        period_id=request.period_id,
        new_name=request.new_name,
        with_data=request.with_data,
    )
    return _unwrap(await use_case.execute(command))


@router.get("/{room_id}/mode", response_model=PeriodModeDTO)
async def get_period_mode(
    room_id: str,
    actor_id: str = Depends(get_actor_id),
    session: AsyncSession = Depends(get_session),
    gate: PermissionGate = Depends(get_permission_gate),
):
    """Get whether the room runs MONTHLY or CUSTOM periods."""
    use_case = GetPeriodMode(SqlAlchemyRoomSettingsRepository(session), gate, default_mode=default_period_mode())
    return _unwrap(await use_case.execute(PeriodQueryDTO(room_id=room_id, actor_id=actor_id)))


@router.put("/{room_id}/mode", response_model=PeriodModeDTO, responses=ERROR_RESPONSES)
async def set_period_mode(
    room_id: str,
    request: SetPeriodModeRequestSchema,
    actor_id: str = Depends(get_actor_id),
    session: AsyncSession = Depends(get_session),
    gate: PermissionGate = Depends(get_permission_gate),
    cache: CacheService = Depends(get_cache_service),
    notifier: NotificationService = Depends(get_notifier),
):
    """
    Switch the room between MONTHLY and CUSTOM periods.

    Switching to MONTHLY with no active period creates this month's period.
    """
    uow = SqlAlchemyUnitOfWork(session)
    period_repo = SqlAlchemyPeriodRepository(session)
    use_case = SetPeriodMode(
        uow,
        SqlAlchemyRoomSettingsRepository(session),
        period_repo,
        gate,
        cache,
        provisioner=EnsureMonthPeriod(uow, period_repo, gate, cache, notifier),
        default_mode=default_period_mode(),
    )
    command = SetPeriodModeCommandDTO(room_id=room_id, actor_id=actor_id, mode=request.mode)
    return _unwrap(await use_case.execute(command))
