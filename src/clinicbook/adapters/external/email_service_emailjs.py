"""
EmailJS implementation of NotificationService.

Sends booking confirmations through the EmailJS REST API. A delivery
failure is reported to the caller and never undoes the booking.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp

from clinicbook.application.ports.services.notification_service import NotificationService
from clinicbook.core.config import EmailSettings, get_settings
from clinicbook.core.exceptions import EmailDeliveryError
from clinicbook.core.utils.datetime_utils import format_display_date
from clinicbook.core.utils.string_utils import validate_email
from clinicbook.domain.entities.appointment import Appointment
from clinicbook.domain.entities.doctor import Doctor

logger = logging.getLogger("clinicbook.email")


def build_template_params(
    appointment: Appointment, doctor: Doctor, settings: EmailSettings
) -> Dict[str, Any]:
    """Template variables expected by the confirmation email template."""
    return {
        "to_email": appointment.email,
        "patient_name": appointment.patient_name,
        "doctor_name": doctor.display_name,
        "appointment_date": format_display_date(appointment.date),
        "appointment_time": appointment.time.display(),
        "patient_phone": appointment.phone,
        "reason": appointment.reason or "Not specified",
        "clinic_phone": settings.clinic_phone,
        "clinic_address": settings.clinic_address,
    }


class EmailJSNotificationService(NotificationService):
    """EmailJS REST client."""

    def __init__(self, settings: Optional[EmailSettings] = None):
        self._settings = settings or get_settings().email
        if not self._settings.is_configured:
            logger.info("EmailJS not configured; booking confirmations will be skipped")

    @property
    def is_enabled(self) -> bool:
        return self._settings.is_configured

    async def send_booking_confirmation(self, appointment: Appointment, doctor: Doctor) -> bool:
        if not self._settings.is_configured:
            return False
        if not appointment.email or not validate_email(appointment.email):
            return False

        payload: Dict[str, Any] = {
            "service_id": self._settings.service_id,
            "template_id": self._settings.template_id,
            "user_id": self._settings.public_key,
            "template_params": build_template_params(appointment, doctor, self._settings),
        }
        if self._settings.private_key:
            payload["accessToken"] = self._settings.private_key

        timeout = aiohttp.ClientTimeout(total=self._settings.timeout_seconds)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(self._settings.api_url, json=payload) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        raise EmailDeliveryError(
                            f"HTTP {response.status}: {error_text[:200]}",
                            {"status": response.status},
                        )
        except asyncio.TimeoutError:
            raise EmailDeliveryError(
                f"timed out after {self._settings.timeout_seconds}s"
            )
        except aiohttp.ClientError as e:
            raise EmailDeliveryError(str(e), {"error_type": type(e).__name__})

        logger.info("Confirmation email sent for appointment %s", appointment.appointment_id)
        return True
