"""
Unit tests for the period state machine

Covers every allowed transition, the rejections named by InvalidStateError
and the mutability rule used by ledger writes.
"""

import pytest
from src.domain.errors import InvalidStateError, ValidationError
from src.domain.period import PeriodStatus
from src.domain.period_state import (
    LOCKED,
    PeriodTransition,
    apply_transition,
    check_transition,
    current_state,
    is_mutable,
)
from tests.factories import make_period


class TestPeriodTransitions:

    def test_end_active_period(self):
        period = make_period()

        apply_transition(period, PeriodTransition.END)

        assert period.status == PeriodStatus.ENDED
        assert period.is_locked is False

    def test_end_requires_active(self):
        period = make_period(status=PeriodStatus.ENDED)

        with pytest.raises(InvalidStateError) as exc:
            apply_transition(period, PeriodTransition.END)

        assert exc.value.current_state == "ENDED"
        assert exc.value.requested_state == "ENDED"

    def test_lock_ended_period(self):
        period = make_period(status=PeriodStatus.ENDED)

        apply_transition(period, PeriodTransition.LOCK)

        assert period.is_locked is True
        assert period.status == PeriodStatus.ENDED
        assert current_state(period) == LOCKED

    def test_lock_active_period_rejected(self):
        """
        GIVEN: an ACTIVE period
        WHEN: it is locked without being ended first
        THEN: InvalidStateError(ACTIVE -> LOCKED), period untouched
        """
        period = make_period()

        with pytest.raises(InvalidStateError) as exc:
            apply_transition(period, PeriodTransition.LOCK)

        assert exc.value.current_state == "ACTIVE"
        assert exc.value.requested_state == LOCKED
        assert period.is_locked is False

    def test_lock_twice_rejected(self):
        period = make_period(status=PeriodStatus.ENDED, is_locked=True)

        with pytest.raises(InvalidStateError) as exc:
            check_transition(period, PeriodTransition.LOCK)

        assert exc.value.current_state == LOCKED

    @pytest.mark.parametrize("target", [PeriodStatus.ACTIVE, PeriodStatus.ENDED])
    def test_unlock_to_chosen_status(self, target):
        period = make_period(status=PeriodStatus.ENDED, is_locked=True)

        apply_transition(period, PeriodTransition.UNLOCK, target_status=target)

        assert period.is_locked is False
        assert period.status == target

    def test_unlock_to_archived_rejected(self):
        period = make_period(status=PeriodStatus.ENDED, is_locked=True)

        with pytest.raises(ValidationError):
            apply_transition(period, PeriodTransition.UNLOCK, target_status=PeriodStatus.ARCHIVED)

    def test_unlock_unlocked_period_rejected(self):
        period = make_period(status=PeriodStatus.ENDED)

        with pytest.raises(InvalidStateError) as exc:
            apply_transition(period, PeriodTransition.UNLOCK)

        assert exc.value.current_state == "ENDED"
        assert exc.value.requested_state == "UNLOCKED"

    def test_archive_ended_period(self):
        period = make_period(status=PeriodStatus.ENDED)

        apply_transition(period, PeriodTransition.ARCHIVE)

        assert period.status == PeriodStatus.ARCHIVED

    def test_archive_is_terminal(self):
        period = make_period(status=PeriodStatus.ARCHIVED)

        for transition in PeriodTransition:
            with pytest.raises(InvalidStateError):
                check_transition(period, transition)

    def test_archive_locked_period_rejected(self):
        period = make_period(status=PeriodStatus.ENDED, is_locked=True)

        with pytest.raises(InvalidStateError):
            apply_transition(period, PeriodTransition.ARCHIVE)


class TestMutability:

    def test_active_and_ended_accept_writes(self):
        assert is_mutable(make_period()) is True
        assert is_mutable(make_period(status=PeriodStatus.ENDED)) is True

    def test_locked_rejects_writes_whatever_status(self):
        assert is_mutable(make_period(is_locked=True)) is False
        assert is_mutable(make_period(status=PeriodStatus.ENDED, is_locked=True)) is False

    def test_archived_rejects_writes(self):
        assert is_mutable(make_period(status=PeriodStatus.ARCHIVED)) is False
