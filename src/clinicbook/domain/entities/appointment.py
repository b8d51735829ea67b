"""Appointment domain entity and its archival lifecycle."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..enums.appointment import AppointmentStatus
from ..errors import InvalidStatusTransitionError
from ..value_objects.appointment_id import AppointmentId
from ..value_objects.time_of_day import TimeOfDay

# Transitions an administrator may request. Expiry and archival are
# driven by the cleanup sweep only.
ADMIN_TRANSITIONS = {
    AppointmentStatus.PENDING: {AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELLED},
    AppointmentStatus.CONFIRMED: {AppointmentStatus.CANCELLED},
    AppointmentStatus.CANCELLED: set(),
    AppointmentStatus.EXPIRED: set(),
}

ARCHIVABLE_STATUSES = frozenset({AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELLED})


@dataclass
class Appointment:
    """Appointment domain entity.

    ``archived_at`` is set only on copies living in the archive collection.
    """

    appointment_id: AppointmentId
    doctor_id: str
    date: date
    time: TimeOfDay
    patient_name: str
    phone: str
    email: Optional[str] = None
    reason: Optional[str] = None
    status: AppointmentStatus = AppointmentStatus.PENDING
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None
    expired_at: Optional[datetime] = None
    archived_at: Optional[datetime] = None

    @property
    def is_archived(self) -> bool:
        return self.archived_at is not None

    @property
    def is_cancelled(self) -> bool:
        return self.status == AppointmentStatus.CANCELLED

    @property
    def date_iso(self) -> str:
        return self.date.isoformat()

    def can_transition_to(self, target: AppointmentStatus) -> bool:
        return target in ADMIN_TRANSITIONS.get(self.status, set())

    def transition_to(self, target: AppointmentStatus, at: Optional[datetime] = None) -> None:
        """Apply an administrator status change."""
        if self.is_archived or not self.can_transition_to(target):
            raise InvalidStatusTransitionError(
                str(self.appointment_id), self.status.value, target.value
            )
        self.status = target
        self.updated_at = at or datetime.utcnow()

    def confirm(self, at: Optional[datetime] = None) -> None:
        self.transition_to(AppointmentStatus.CONFIRMED, at)

    def cancel(self, at: Optional[datetime] = None) -> None:
        self.transition_to(AppointmentStatus.CANCELLED, at)

    def expire(self, at: datetime) -> None:
        if self.status != AppointmentStatus.PENDING:
            raise InvalidStatusTransitionError(
                str(self.appointment_id), self.status.value, AppointmentStatus.EXPIRED.value
            )
        self.status = AppointmentStatus.EXPIRED
        self.expired_at = at

    def archived_copy(self, at: datetime) -> "Appointment":
        """Return the record to store in the archive collection."""
        return Appointment(
            appointment_id=self.appointment_id,
            doctor_id=self.doctor_id,
            date=self.date,
            time=self.time,
            patient_name=self.patient_name,
            phone=self.phone,
            email=self.email,
            reason=self.reason,
            status=self.status,
            created_at=self.created_at,
            updated_at=self.updated_at,
            expired_at=self.expired_at,
            archived_at=at,
        )
