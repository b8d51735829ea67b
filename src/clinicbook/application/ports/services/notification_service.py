"""
Notification service interface for booking confirmations.
"""

from abc import ABC, abstractmethod

from ....domain.entities.appointment import Appointment
from ....domain.entities.doctor import Doctor


class NotificationService(ABC):
    """Abstract service that tells a patient their booking was received."""

    @property
    def is_enabled(self) -> bool:
        """False when the channel is switched off, so no delivery is attempted."""
        return True

    @abstractmethod
    async def send_booking_confirmation(self, appointment: Appointment, doctor: Doctor) -> bool:
        """
        Send a confirmation for a freshly booked appointment.

        Returns:
            True when the provider accepted the message, False when the
            appointment has no usable email or sending is disabled.

        Raises:
            EmailDeliveryError: provider rejected the request
        """
        pass
