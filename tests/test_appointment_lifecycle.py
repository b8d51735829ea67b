"""
Appointment status transitions and sweep planning tests.
"""

from datetime import date, datetime

import pytest

from clinicbook.domain.enums.appointment import AppointmentStatus
from clinicbook.domain.errors import InvalidStatusTransitionError
from clinicbook.domain.services.lifecycle import dedupe_prefer_archive, plan_sweep

TODAY = date(2025, 3, 10)
YESTERDAY = date(2025, 3, 9)
AT = datetime(2025, 3, 10, 9, 30)


class TestTransitions:
    def test_pending_can_be_confirmed_then_cancelled(self, make_appointment):
        appointment = make_appointment()
        appointment.confirm(AT)
        assert appointment.status == AppointmentStatus.CONFIRMED
        assert appointment.updated_at == AT
        appointment.cancel(AT)
        assert appointment.status == AppointmentStatus.CANCELLED

    @pytest.mark.parametrize(
        "current,target",
        [
            (AppointmentStatus.CONFIRMED, AppointmentStatus.PENDING),
            (AppointmentStatus.CANCELLED, AppointmentStatus.CONFIRMED),
            (AppointmentStatus.EXPIRED, AppointmentStatus.CONFIRMED),
            (AppointmentStatus.PENDING, AppointmentStatus.EXPIRED),
        ],
    )
    def test_disallowed_transitions(self, make_appointment, current, target):
        appointment = make_appointment(status=current)
        with pytest.raises(InvalidStatusTransitionError) as exc_info:
            appointment.transition_to(target, AT)
        assert exc_info.value.error_code == "INVALID_STATUS_TRANSITION"
        assert appointment.status == current

    def test_expire_only_from_pending(self, make_appointment):
        pending = make_appointment()
        pending.expire(AT)
        assert pending.status == AppointmentStatus.EXPIRED
        assert pending.expired_at == AT

        confirmed = make_appointment(status=AppointmentStatus.CONFIRMED)
        with pytest.raises(InvalidStatusTransitionError):
            confirmed.expire(AT)

    def test_archived_copy_is_frozen(self, make_appointment):
        appointment = make_appointment(status=AppointmentStatus.CONFIRMED)
        archived = appointment.archived_copy(AT)
        assert archived.is_archived
        assert archived.appointment_id == appointment.appointment_id
        assert not appointment.is_archived
        with pytest.raises(InvalidStatusTransitionError):
            archived.cancel(AT)


class TestPlanSweep:
    def test_classifies_past_appointments(self, make_appointment):
        stale_pending = make_appointment(on_date=YESTERDAY)
        past_confirmed = make_appointment(on_date=YESTERDAY, status=AppointmentStatus.CONFIRMED)
        past_cancelled = make_appointment(on_date=YESTERDAY, status=AppointmentStatus.CANCELLED)
        already_expired = make_appointment(on_date=YESTERDAY, status=AppointmentStatus.EXPIRED)
        today_pending = make_appointment(on_date=TODAY)

        plan = plan_sweep(
            [stale_pending, past_confirmed, past_cancelled, already_expired, today_pending],
            TODAY,
            set(),
        )
        assert plan.to_expire == [stale_pending]
        assert plan.to_archive == [past_confirmed, past_cancelled]
        assert plan.stale_active == []

    def test_active_copies_of_archived_records_are_stale(self, make_appointment):
        leftover = make_appointment(on_date=YESTERDAY, status=AppointmentStatus.CONFIRMED)
        plan = plan_sweep([leftover], TODAY, {str(leftover.appointment_id)})
        assert plan.stale_active == [leftover]
        assert plan.to_archive == []

    def test_nothing_to_do(self, make_appointment):
        assert plan_sweep([make_appointment(on_date=TODAY)], TODAY, set()).is_empty


def test_dedupe_prefers_archive_copy(make_appointment):
    active = make_appointment(status=AppointmentStatus.CONFIRMED)
    archived = active.archived_copy(AT)
    other = make_appointment()
    merged = dedupe_prefer_archive([active, other], [archived])
    assert len(merged) == 2
    by_id = {str(a.appointment_id): a for a in merged}
    assert by_id[str(active.appointment_id)].is_archived
