"""Per-doctor appointment overview for administrators."""

from ...core.clock import Clock
from ...domain.errors import DoctorNotFoundError
from ...domain.services.capacity import counts_toward_capacity
from ..dto.doctor_dto import DoctorAppointmentsResponse
from ..ports.repositories.appointment_repo import AppointmentRepository
from ..ports.repositories.doctor_repo import DoctorRepository


class GetDoctorAppointmentsUseCase:
    def __init__(
        self,
        doctor_repository: DoctorRepository,
        appointment_repository: AppointmentRepository,
        clock: Clock,
        max_daily: int,
    ):
        self._doctors = doctor_repository
        self._appointments = appointment_repository
        self._clock = clock
        self._max_daily = max_daily

    async def execute(self, doctor_id: str) -> DoctorAppointmentsResponse:
        doctor = await self._doctors.find_by_id(doctor_id)
        if doctor is None:
            raise DoctorNotFoundError(doctor_id)

        today = self._clock.today()
        appointments = await self._appointments.find_by_doctor(doctor_id)
        upcoming = sorted(
            (a for a in appointments if a.date >= today),
            key=lambda a: (a.date, a.time),
        )
        past = sorted(
            (a for a in appointments if a.date < today),
            key=lambda a: (a.date, a.time),
            reverse=True,
        )
        today_count = sum(1 for a in upcoming if a.date == today and counts_toward_capacity(a))

        return DoctorAppointmentsResponse(
            doctor=doctor,
            total=len(appointments),
            upcoming_count=len(upcoming),
            past_count=len(past),
            today_count=today_count,
            max_daily=self._max_daily,
            upcoming=upcoming,
            past=past,
        )
