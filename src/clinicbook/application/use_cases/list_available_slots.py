"""List Available Slots use case for the public booking page."""

from ...core.clock import Clock
from ...core.exceptions import ValidationError
from ...core.utils.datetime_utils import parse_iso_date
from ...domain.errors import DoctorNotFoundError
from ...domain.services.availability import AvailabilityResolver
from ..dto.appointment_dto import AvailableSlotsResponse, SlotView
from ..ports.repositories.appointment_repo import AppointmentRepository
from ..ports.repositories.doctor_repo import DoctorRepository


class ListAvailableSlotsUseCase:
    """Bookable hourly slots for one doctor on one date, with an explanation."""

    def __init__(
        self,
        doctor_repository: DoctorRepository,
        appointment_repository: AppointmentRepository,
        resolver: AvailabilityResolver,
        clock: Clock,
    ):
        self._doctors = doctor_repository
        self._appointments = appointment_repository
        self._resolver = resolver
        self._clock = clock

    async def execute(self, doctor_id: str, date_str: str) -> AvailableSlotsResponse:
        on_date = parse_iso_date(date_str)
        if on_date is None:
            raise ValidationError(["Please enter a valid date (YYYY-MM-DD)"])

        doctor = await self._doctors.find_by_id(doctor_id)
        if doctor is None:
            raise DoctorNotFoundError(doctor_id)

        now = self._clock.now()
        existing = await self._appointments.find_by_doctor_and_date(doctor_id, on_date)
        slots = [] if on_date < now.date() else self._resolver.list_available_slots(
            doctor, on_date, existing, now
        )
        return AvailableSlotsResponse(
            doctor_id=doctor_id,
            date=on_date.isoformat(),
            slots=[SlotView(value=str(s), display=s.display()) for s in slots],
            status=self._resolver.availability_status(doctor, on_date, existing),
        )
