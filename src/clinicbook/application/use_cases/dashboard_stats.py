"""Admin dashboard statistics."""

from ...core.clock import Clock
from ...domain.enums.appointment import AppointmentStatus
from ...domain.services.capacity import CapacityPolicy, counts_toward_capacity
from ...domain.value_objects.time_of_day import TimeOfDay
from ..dto.appointment_dto import DashboardStats, DoctorLoad
from ..ports.repositories.appointment_repo import (
    AnalyticsRepository,
    AppointmentArchiveRepository,
    AppointmentRepository,
)
from ..ports.repositories.doctor_repo import DoctorRepository

RECENT_LIMIT = 5


class DashboardStatsUseCase:
    def __init__(
        self,
        doctor_repository: DoctorRepository,
        appointment_repository: AppointmentRepository,
        archive_repository: AppointmentArchiveRepository,
        analytics_repository: AnalyticsRepository,
        capacity: CapacityPolicy,
        clock: Clock,
    ):
        self._doctors = doctor_repository
        self._appointments = appointment_repository
        self._archive = archive_repository
        self._analytics = analytics_repository
        self._capacity = capacity
        self._clock = clock

    async def execute(self) -> DashboardStats:
        now = self._clock.now()
        today = now.date()
        archived_ids = await self._archive.find_ids()
        active = [
            a for a in await self._appointments.find_all() if str(a.appointment_id) not in archived_ids
        ]
        doctors = await self._doctors.find_all()

        loads = []
        for doctor in doctors:
            doctor_id = str(doctor.doctor_id)
            today_count = self._capacity.count_booked(active, doctor_id, today)
            upcoming = sum(
                1
                for a in active
                if a.doctor_id == doctor_id and a.date >= today and counts_toward_capacity(a)
            )
            loads.append(
                DoctorLoad(
                    doctor_id=doctor_id,
                    doctor_name=doctor.display_name,
                    today_count=today_count,
                    upcoming_count=upcoming,
                    load_level=self._capacity.load_level(today_count),
                )
            )

        current = TimeOfDay.from_datetime(now)
        off_shift = [
            {
                "doctor_id": str(d.doctor_id),
                "doctor_name": d.display_name,
                "shift_start": str(d.shift_start),
                "shift_end": str(d.shift_end),
            }
            for d in doctors
            if d.has_shift and not d.shift_window.contains(current)
        ]

        recent = sorted(active, key=lambda a: a.created_at, reverse=True)[:RECENT_LIMIT]

        return DashboardStats(
            total_appointments=len(active),
            pending_appointments=sum(1 for a in active if a.status == AppointmentStatus.PENDING),
            total_doctors=len(doctors),
            max_daily=self._capacity.max_daily,
            recent_appointments=recent,
            doctor_loads=loads,
            off_shift_doctors=off_shift,
            bookings_today=await self._analytics.get_daily_bookings(today),
        )
