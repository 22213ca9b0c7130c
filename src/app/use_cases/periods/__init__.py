"""Period lifecycle use cases"""
from .start_period import StartPeriod
from .end_period import EndPeriod
from .lock_period import LockPeriod, UnlockPeriod
from .archive_period import ArchivePeriod
from .restart_period import RestartPeriod
from .ensure_month_period import EnsureMonthPeriod
from .get_current_period import GetCurrentPeriod, GetPeriodForDate
from .list_periods import ListPeriods, ListPeriodsByMonth
from .get_period_summary import GetPeriodSummary
from .period_mode import GetPeriodMode, SetPeriodMode
from .dtos import (
    PeriodDTO,
    StartPeriodCommandDTO,
    PeriodActionCommandDTO,
    EndPeriodCommandDTO,
    UnlockPeriodCommandDTO,
    RestartPeriodCommandDTO,
    EnsureMonthPeriodCommandDTO,
    PeriodQueryDTO,
    PeriodListDTO,
    PeriodSummaryDTO,
    PeriodModeDTO,
    SetPeriodModeCommandDTO,
)

__all__ = [
    "StartPeriod",
    "EndPeriod",
    "LockPeriod",
    "UnlockPeriod",
    "ArchivePeriod",
    "RestartPeriod",
    "EnsureMonthPeriod",
    "GetCurrentPeriod",
    "GetPeriodForDate",
    "ListPeriods",
    "ListPeriodsByMonth",
    "GetPeriodSummary",
    "GetPeriodMode",
    "SetPeriodMode",
    "PeriodDTO",
    "StartPeriodCommandDTO",
    "PeriodActionCommandDTO",
    "EndPeriodCommandDTO",
    "UnlockPeriodCommandDTO",
    "RestartPeriodCommandDTO",
    "EnsureMonthPeriodCommandDTO",
    "PeriodQueryDTO",
    "PeriodListDTO",
    "PeriodSummaryDTO",
    "PeriodModeDTO",
    "SetPeriodModeCommandDTO",
]
