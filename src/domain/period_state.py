"""Period state machine

ACTIVE -> ENDED -> (LOCKED <-> unlocked ENDED/ACTIVE) -> ARCHIVED

The lock flag is orthogonal to status, so a locked period is reported as
being in the LOCKED state. Every check raises InvalidStateError naming the
current and the requested state.
"""

from enum import Enum
from src.domain.errors import InvalidStateError, ValidationError
from src.domain.period import Period, PeriodStatus

LOCKED = "LOCKED"
UNLOCKED = "UNLOCKED"


class PeriodTransition(str, Enum):
    END = "END"
    LOCK = "LOCK"
    UNLOCK = "UNLOCK"
    ARCHIVE = "ARCHIVE"


# transition -> (required status, required lock flag, resulting state name)
_RULES = {
    PeriodTransition.END: (PeriodStatus.ACTIVE, False, PeriodStatus.ENDED.value),
    PeriodTransition.LOCK: (PeriodStatus.ENDED, False, LOCKED),
    PeriodTransition.ARCHIVE: (PeriodStatus.ENDED, False, PeriodStatus.ARCHIVED.value),
}

UNLOCK_TARGETS = (PeriodStatus.ACTIVE, PeriodStatus.ENDED)


def current_state(period: Period) -> str:
    if period.is_locked:
        return LOCKED
    return period.status.value


def check_transition(period: Period, transition: PeriodTransition) -> None:
    """Raise InvalidStateError unless ``transition`` is allowed for ``period``"""
    if transition == PeriodTransition.UNLOCK:
        if not period.is_locked or period.status == PeriodStatus.ARCHIVED:
            raise InvalidStateError(current_state(period), UNLOCKED)
        return

    required_status, required_lock, target = _RULES[transition]
    if period.status != required_status or period.is_locked != required_lock:
        raise InvalidStateError(current_state(period), target)


def apply_transition(period: Period, transition: PeriodTransition, target_status: PeriodStatus = PeriodStatus.ENDED) -> Period:
    """Validate and apply a transition in place.

    ``target_status`` is only used by UNLOCK, where the caller chooses
    whether the period returns to ACTIVE or ENDED.
    """
    check_transition(period, transition)

    if transition == PeriodTransition.END:
        period.status = PeriodStatus.ENDED
    elif transition == PeriodTransition.LOCK:
        period.is_locked = True
    elif transition == PeriodTransition.ARCHIVE:
        period.status = PeriodStatus.ARCHIVED
    elif transition == PeriodTransition.UNLOCK:
        if target_status not in UNLOCK_TARGETS:
            raise ValidationError(
                f"Unlocked period must become ACTIVE or ENDED, not {target_status.value}"
            )
        period.is_locked = False
        period.status = target_status

    return period


def is_mutable(period: Period) -> bool:
    """Whether ledger records stamped with this period may be written"""
    return not period.is_locked and period.status != PeriodStatus.ARCHIVED
