"""
Day ledger drift: hours left behind by failed releases, and hours missing
after an insert that landed despite an error, are repaired from the
appointments collection.
"""

from datetime import date, timedelta

import pytest

from clinicbook.adapters.db.memory import InMemoryAppointmentRepository, InMemoryDayLedgerRepository
from clinicbook.application.dto.appointment_dto import BookAppointmentRequest
from clinicbook.application.use_cases.book_appointment import BookAppointmentUseCase
from clinicbook.application.use_cases.cleanup_appointments import CleanupAppointmentsUseCase
from clinicbook.application.use_cases.manage_archive import ManageArchiveUseCase
from clinicbook.application.use_cases.update_appointment_status import (
    UpdateAppointmentStatusUseCase,
)
from clinicbook.core.exceptions import StoreUnavailableError
from clinicbook.domain.enums.appointment import AppointmentSource, AppointmentStatus
from clinicbook.domain.errors import BookingRejectedError
from clinicbook.domain.services.conflict import ConflictGuard
from clinicbook.domain.value_objects.time_of_day import TimeOfDay

TOMORROW = date(2025, 3, 11)
YESTERDAY = date(2025, 3, 9)
GRACE = timedelta(seconds=120)

TEN, ELEVEN, NOON = TimeOfDay.of(10), TimeOfDay.of(11), TimeOfDay.of(12)


class FlakyReleaseLedger(InMemoryDayLedgerRepository):
    """Ledger whose releases fail while ``failing`` is set."""

    def __init__(self):
        super().__init__()
        self.failing = False

    async def release(self, doctor_id, on_date, time):
        if self.failing:
            raise StoreUnavailableError("ledger.release")
        await super().release(doctor_id, on_date, time)


class LandedThenFailedRepository(InMemoryAppointmentRepository):
    """Stores the appointment, then reports the write as timed out."""

    async def save(self, appointment):
        await super().save(appointment)
        raise StoreUnavailableError("appointments.save")


def booking(**overrides) -> BookAppointmentRequest:
    values = dict(
        doctor_id="maria-santos",
        date="2025-03-11",
        time="10:00",
        patient_name="Juan Dela Cruz",
        phone="09171234567",
    )
    values.update(overrides)
    return BookAppointmentRequest(**values)


def build_booking(doctor_repo, appointments, ledger, analytics_repo, notifier, rate_limiter, resolver, clock):
    return BookAppointmentUseCase(
        doctor_repo,
        appointments,
        ledger,
        analytics_repo,
        notifier,
        rate_limiter,
        resolver,
        ConflictGuard(),
        clock,
    )


@pytest.fixture
async def doctor(doctor_repo, make_doctor):
    return await doctor_repo.save(make_doctor())


class TestInMemoryReconcile:
    async def test_drops_unheld_hours_and_adds_missing_ones(self, clock):
        ledger = InMemoryDayLedgerRepository()
        await ledger.reserve("maria-santos", TOMORROW, TEN, 4, seed_times=[ELEVEN])

        repaired = await ledger.reconcile("maria-santos", TOMORROW, [ELEVEN, NOON], clock.now() - GRACE)

        assert repaired is True
        assert ledger.held("maria-santos", TOMORROW) == ["11:00", "12:00"]

    async def test_keeps_recent_claims_without_an_appointment(self, clock):
        ledger = InMemoryDayLedgerRepository()
        await ledger.reserve("maria-santos", TOMORROW, TEN, 4, claimed_at=clock.now())

        repaired = await ledger.reconcile("maria-santos", TOMORROW, [], clock.now() - GRACE)

        assert repaired is False
        assert ledger.held("maria-santos", TOMORROW) == ["10:00"]

    async def test_drops_claims_older_than_the_grace_period(self, clock):
        ledger = InMemoryDayLedgerRepository()
        await ledger.reserve("maria-santos", TOMORROW, TEN, 4, claimed_at=clock.now() - 2 * GRACE)

        assert await ledger.reconcile("maria-santos", TOMORROW, [], clock.now() - GRACE) is True
        assert ledger.held("maria-santos", TOMORROW) == []

    async def test_missing_ledger_is_left_alone(self, clock):
        ledger = InMemoryDayLedgerRepository()
        assert await ledger.reconcile("maria-santos", TOMORROW, [TEN], clock.now()) is False
        assert await ledger.list_days(YESTERDAY) == []

    async def test_list_days_skips_past_dates(self, clock):
        ledger = InMemoryDayLedgerRepository()
        await ledger.reserve("maria-santos", YESTERDAY, TEN, 4)
        await ledger.reserve("jose-rizal", TOMORROW, TEN, 4)
        await ledger.reserve("maria-santos", TOMORROW, TEN, 4)

        assert await ledger.list_days(clock.today()) == [
            ("jose-rizal", TOMORROW),
            ("maria-santos", TOMORROW),
        ]


async def test_rebooking_after_a_failed_release_on_cancel(
    doctor, doctor_repo, appointment_repo, archive_repo, analytics_repo, notifier, rate_limiter, resolver, clock
):
    ledger = FlakyReleaseLedger()
    book = build_booking(
        doctor_repo, appointment_repo, ledger, analytics_repo, notifier, rate_limiter, resolver, clock
    )
    first = await book.execute(booking())

    ledger.failing = True
    await UpdateAppointmentStatusUseCase(appointment_repo, archive_repo, ledger, clock).execute(
        str(first.appointment.appointment_id), AppointmentStatus.CANCELLED
    )
    ledger.failing = False
    assert ledger.held("maria-santos", TOMORROW) == ["10:00"]

    # Inside the grace period the hour could still belong to a booking in flight
    with pytest.raises(BookingRejectedError) as exc_info:
        await book.execute(booking(patient_name="Maria Clara", phone="09181234567"))
    assert exc_info.value.reason == "slot_taken"

    clock.set(clock.now() + GRACE + timedelta(seconds=1))
    second = await book.execute(booking(patient_name="Maria Clara", phone="09181234567"))

    assert second.appointment.time == TEN
    assert ledger.held("maria-santos", TOMORROW) == ["10:00"]


async def test_failed_release_after_failed_insert_is_recovered(
    doctor, doctor_repo, analytics_repo, notifier, rate_limiter, resolver, clock
):
    class FailingRepository(InMemoryAppointmentRepository):
        async def save(self, appointment):
            raise StoreUnavailableError("appointments.save")

    ledger = FlakyReleaseLedger()
    ledger.failing = True
    failing = build_booking(
        doctor_repo, FailingRepository(), ledger, analytics_repo, notifier, rate_limiter, resolver, clock
    )
    with pytest.raises(StoreUnavailableError) as exc_info:
        await failing.execute(booking())
    assert exc_info.value.operation == "appointments.save"
    assert ledger.held("maria-santos", TOMORROW) == ["10:00"]

    ledger.failing = False
    clock.set(clock.now() + GRACE + timedelta(seconds=1))
    appointments = InMemoryAppointmentRepository()
    book = build_booking(
        doctor_repo, appointments, ledger, analytics_repo, notifier, rate_limiter, resolver, clock
    )
    result = await book.execute(booking())

    assert result.appointment.time == TEN
    assert ledger.held("maria-santos", TOMORROW) == ["10:00"]


async def test_sweep_restores_hour_of_an_insert_that_landed(
    doctor, doctor_repo, archive_repo, analytics_repo, notifier, rate_limiter, resolver, clock
):
    appointments = LandedThenFailedRepository()
    ledger = InMemoryDayLedgerRepository()
    book = build_booking(
        doctor_repo, appointments, ledger, analytics_repo, notifier, rate_limiter, resolver, clock
    )
    with pytest.raises(StoreUnavailableError):
        await book.execute(booking())
    assert len(await appointments.find_by_doctor_and_date("maria-santos", TOMORROW)) == 1
    assert ledger.held("maria-santos", TOMORROW) == []

    result = await CleanupAppointmentsUseCase(
        appointments, archive_repo, clock, ledger_repository=ledger
    ).execute()

    assert result.ledgers_repaired == 1
    assert ledger.held("maria-santos", TOMORROW) == ["10:00"]


async def test_sweep_releases_leaked_hours_for_upcoming_days_only(
    appointment_repo, archive_repo, clock, make_appointment
):
    ledger = InMemoryDayLedgerRepository()
    await appointment_repo.save(make_appointment(time="11:00", status=AppointmentStatus.CONFIRMED))
    await appointment_repo.save(make_appointment(time="10:00", status=AppointmentStatus.CANCELLED))
    await ledger.reserve("maria-santos", TOMORROW, TEN, 4, seed_times=[ELEVEN])
    await ledger.reserve("maria-santos", YESTERDAY, TEN, 4)
    use_case = CleanupAppointmentsUseCase(appointment_repo, archive_repo, clock, ledger_repository=ledger)

    first = await use_case.execute()
    second = await use_case.execute()

    assert (first.ledgers_repaired, first.failed) == (1, 0)
    assert second.ledgers_repaired == 0
    assert ledger.held("maria-santos", TOMORROW) == ["11:00"]
    assert ledger.held("maria-santos", YESTERDAY) == ["10:00"]


async def test_deleting_with_a_failed_release_still_deletes(
    appointment_repo, archive_repo, clock, make_appointment
):
    ledger = FlakyReleaseLedger()
    appointment = await appointment_repo.save(make_appointment())
    await ledger.reserve("maria-santos", TOMORROW, TEN, 4, claimed_at=clock.now())
    ledger.failing = True

    await ManageArchiveUseCase(appointment_repo, archive_repo, ledger, clock).delete(
        str(appointment.appointment_id), AppointmentSource.CURRENT
    )

    assert await appointment_repo.find_by_id(str(appointment.appointment_id)) is None
    ledger.failing = False
    clock.set(clock.now() + GRACE + timedelta(seconds=1))
    sweep = CleanupAppointmentsUseCase(appointment_repo, archive_repo, clock, ledger_repository=ledger)
    assert (await sweep.execute()).ledgers_repaired == 1
    assert ledger.held("maria-santos", TOMORROW) == []
