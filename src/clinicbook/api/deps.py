"""FastAPI dependency providers.

Repositories and services are process-wide singletons; use cases are
built per request from them so tests can override any single provider.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from ..adapters.external.email_service_emailjs import EmailJSNotificationService
from ..adapters.rate_limit.memory_rate_limiter import SlidingWindowRateLimiter
from ..application.ports.repositories.appointment_repo import (
    AnalyticsRepository,
    AppointmentArchiveRepository,
    AppointmentRepository,
    DayLedgerRepository,
)
from ..application.ports.repositories.doctor_repo import DoctorRepository
from ..application.ports.services.notification_service import NotificationService
from ..application.ports.services.rate_limiter import RateLimiter
from ..application.use_cases.archive_appointment import ArchiveAppointmentUseCase
from ..application.use_cases.book_appointment import BookAppointmentUseCase
from ..application.use_cases.check_duplicate import CheckDuplicateBookingUseCase
from ..application.use_cases.cleanup_appointments import CleanupAppointmentsUseCase
from ..application.use_cases.dashboard_stats import DashboardStatsUseCase
from ..application.use_cases.delete_doctor import DeleteDoctorUseCase
from ..application.use_cases.get_doctor_appointments import GetDoctorAppointmentsUseCase
from ..application.use_cases.list_appointments import (
    GetAppointmentUseCase,
    ListAppointmentsUseCase,
)
from ..application.use_cases.list_available_slots import ListAvailableSlotsUseCase
from ..application.use_cases.list_doctors import ListDoctorsUseCase
from ..application.use_cases.manage_archive import ManageArchiveUseCase
from ..application.use_cases.save_doctor import SaveDoctorUseCase
from ..application.use_cases.update_appointment_status import UpdateAppointmentStatusUseCase
from ..core.clock import Clock, get_clock
from ..core.config import get_settings
from ..domain.services.availability import AvailabilityResolver
from ..domain.services.capacity import CapacityPolicy
from ..domain.services.conflict import ConflictGuard


def _use_memory_store() -> bool:
    return get_settings().store_backend == "memory"


@lru_cache()
def get_doctor_repository() -> DoctorRepository:
    """Get doctor repository instance."""
    if _use_memory_store():
        from ..adapters.db.memory import InMemoryDoctorRepository

        return InMemoryDoctorRepository()
    from ..adapters.db.mongo.repositories.doctor_repository import MongoDoctorRepository

    return MongoDoctorRepository()


@lru_cache()
def get_appointment_repository() -> AppointmentRepository:
    """Get active appointment repository instance."""
    if _use_memory_store():
        from ..adapters.db.memory import InMemoryAppointmentRepository

        return InMemoryAppointmentRepository()
    from ..adapters.db.mongo.repositories.appointment_repository import MongoAppointmentRepository

    return MongoAppointmentRepository()


@lru_cache()
def get_archive_repository() -> AppointmentArchiveRepository:
    """Get archived appointment repository instance."""
    if _use_memory_store():
        from ..adapters.db.memory import InMemoryAppointmentArchiveRepository

        return InMemoryAppointmentArchiveRepository()
    from ..adapters.db.mongo.repositories.appointment_repository import (
        MongoAppointmentArchiveRepository,
    )

    return MongoAppointmentArchiveRepository()


@lru_cache()
def get_ledger_repository() -> DayLedgerRepository:
    """Get day ledger repository instance."""
    if _use_memory_store():
        from ..adapters.db.memory import InMemoryDayLedgerRepository

        return InMemoryDayLedgerRepository()
    from ..adapters.db.mongo.repositories.appointment_repository import MongoDayLedgerRepository

    return MongoDayLedgerRepository()


@lru_cache()
def get_analytics_repository() -> AnalyticsRepository:
    """Get booking analytics repository instance."""
    if _use_memory_store():
        from ..adapters.db.memory import InMemoryAnalyticsRepository

        return InMemoryAnalyticsRepository()
    from ..adapters.db.mongo.repositories.appointment_repository import MongoAnalyticsRepository

    return MongoAnalyticsRepository()


@lru_cache()
def get_notification_service() -> NotificationService:
    """Get notification service instance."""
    return EmailJSNotificationService()


@lru_cache()
def get_rate_limiter() -> RateLimiter:
    """Get booking rate limiter instance."""
    booking = get_settings().booking
    return SlidingWindowRateLimiter(booking.rate_limit_attempts, booking.rate_limit_window_seconds)


def get_capacity_policy() -> CapacityPolicy:
    return CapacityPolicy(get_settings().booking.max_appointments_per_doctor_per_day)


CapacityDep = Annotated[CapacityPolicy, Depends(get_capacity_policy)]


def get_resolver(capacity: CapacityDep) -> AvailabilityResolver:
    return AvailabilityResolver(capacity)


def get_conflict_guard() -> ConflictGuard:
    return ConflictGuard()


ClockDep = Annotated[Clock, Depends(get_clock)]
DoctorRepoDep = Annotated[DoctorRepository, Depends(get_doctor_repository)]
AppointmentRepoDep = Annotated[AppointmentRepository, Depends(get_appointment_repository)]
ArchiveRepoDep = Annotated[AppointmentArchiveRepository, Depends(get_archive_repository)]
LedgerRepoDep = Annotated[DayLedgerRepository, Depends(get_ledger_repository)]
AnalyticsRepoDep = Annotated[AnalyticsRepository, Depends(get_analytics_repository)]
NotificationDep = Annotated[NotificationService, Depends(get_notification_service)]
RateLimiterDep = Annotated[RateLimiter, Depends(get_rate_limiter)]
ResolverDep = Annotated[AvailabilityResolver, Depends(get_resolver)]
ConflictGuardDep = Annotated[ConflictGuard, Depends(get_conflict_guard)]


def get_book_appointment_use_case(
    doctors: DoctorRepoDep,
    appointments: AppointmentRepoDep,
    ledger: LedgerRepoDep,
    analytics: AnalyticsRepoDep,
    notifications: NotificationDep,
    rate_limiter: RateLimiterDep,
    resolver: ResolverDep,
    guard: ConflictGuardDep,
    clock: ClockDep,
) -> BookAppointmentUseCase:
    return BookAppointmentUseCase(
        doctors,
        appointments,
        ledger,
        analytics,
        notifications,
        rate_limiter,
        resolver,
        guard,
        clock,
        claim_grace_seconds=get_settings().booking.ledger_claim_grace_seconds,
    )


def get_list_slots_use_case(
    doctors: DoctorRepoDep, appointments: AppointmentRepoDep, resolver: ResolverDep, clock: ClockDep
) -> ListAvailableSlotsUseCase:
    return ListAvailableSlotsUseCase(doctors, appointments, resolver, clock)


def get_check_duplicate_use_case(
    appointments: AppointmentRepoDep, guard: ConflictGuardDep
) -> CheckDuplicateBookingUseCase:
    return CheckDuplicateBookingUseCase(appointments, guard)


def get_list_doctors_use_case(doctors: DoctorRepoDep) -> ListDoctorsUseCase:
    return ListDoctorsUseCase(doctors)


def get_save_doctor_use_case(doctors: DoctorRepoDep) -> SaveDoctorUseCase:
    return SaveDoctorUseCase(doctors, get_settings().booking.required_shift_hours)


def get_delete_doctor_use_case(
    doctors: DoctorRepoDep, appointments: AppointmentRepoDep, clock: ClockDep
) -> DeleteDoctorUseCase:
    return DeleteDoctorUseCase(doctors, appointments, clock)


def get_doctor_appointments_use_case(
    doctors: DoctorRepoDep, appointments: AppointmentRepoDep, clock: ClockDep, capacity: CapacityDep
) -> GetDoctorAppointmentsUseCase:
    return GetDoctorAppointmentsUseCase(doctors, appointments, clock, capacity.max_daily)


def get_list_appointments_use_case(
    appointments: AppointmentRepoDep, archive: ArchiveRepoDep
) -> ListAppointmentsUseCase:
    return ListAppointmentsUseCase(appointments, archive)


def get_appointment_use_case(
    appointments: AppointmentRepoDep, archive: ArchiveRepoDep
) -> GetAppointmentUseCase:
    return GetAppointmentUseCase(appointments, archive)


def get_update_status_use_case(
    appointments: AppointmentRepoDep, archive: ArchiveRepoDep, ledger: LedgerRepoDep, clock: ClockDep
) -> UpdateAppointmentStatusUseCase:
    return UpdateAppointmentStatusUseCase(appointments, archive, ledger, clock)


def get_archive_appointment_use_case(
    appointments: AppointmentRepoDep, archive: ArchiveRepoDep, clock: ClockDep
) -> ArchiveAppointmentUseCase:
    return ArchiveAppointmentUseCase(appointments, archive, clock)


def get_cleanup_use_case(
    appointments: AppointmentRepoDep, archive: ArchiveRepoDep, ledger: LedgerRepoDep, clock: ClockDep
) -> CleanupAppointmentsUseCase:
    return CleanupAppointmentsUseCase(
        appointments,
        archive,
        clock,
        ledger_repository=ledger,
        claim_grace_seconds=get_settings().booking.ledger_claim_grace_seconds,
    )


def get_manage_archive_use_case(
    appointments: AppointmentRepoDep, archive: ArchiveRepoDep, ledger: LedgerRepoDep, clock: ClockDep
) -> ManageArchiveUseCase:
    return ManageArchiveUseCase(appointments, archive, ledger, clock)


def get_dashboard_use_case(
    doctors: DoctorRepoDep,
    appointments: AppointmentRepoDep,
    archive: ArchiveRepoDep,
    analytics: AnalyticsRepoDep,
    capacity: CapacityDep,
    clock: ClockDep,
) -> DashboardStatsUseCase:
    return DashboardStatsUseCase(doctors, appointments, archive, analytics, capacity, clock)
