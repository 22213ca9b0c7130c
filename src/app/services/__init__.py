from .unit_of_work import UnitOfWork
from .notification_service import NotificationKind, NotificationService
from .membership_directory import MembershipDirectory
from .permission_gate import PermissionGate, PrivilegeTier
from .cache_service import CacheBackend, CacheKey, CacheScope, CacheService
from .balance_engine import BalanceEngine
from .period_guard import PeriodGuard

__all__ = [
    "UnitOfWork",
    "NotificationKind",
    "NotificationService",
    "MembershipDirectory",
    "PermissionGate",
    "PrivilegeTier",
    "CacheBackend",
    "CacheKey",
    "CacheScope",
    "CacheService",
    "BalanceEngine",
    "PeriodGuard",
]
