"""Public booking endpoints: doctors, slots, booking and duplicate pre-check."""

import logging
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query, Request, status

from ...application.dto.appointment_dto import BookAppointmentRequest
from ...application.use_cases.book_appointment import BookAppointmentUseCase
from ...application.use_cases.check_duplicate import CheckDuplicateBookingUseCase
from ...application.use_cases.list_available_slots import ListAvailableSlotsUseCase
from ...application.use_cases.list_doctors import ListDoctorsUseCase
from ..deps import (
    get_book_appointment_use_case,
    get_check_duplicate_use_case,
    get_list_doctors_use_case,
    get_list_slots_use_case,
)
from ..schemas.appointments import (
    AppointmentSchema,
    AvailableSlotsSchema,
    BookAppointmentRequestSchema,
    BookingResultSchema,
    DuplicateCheckSchema,
)
from ..schemas.common import ApiResponse, ErrorResponse
from ..schemas.doctors import DoctorSchema
from ..utils.responses import ok

router = APIRouter(tags=["booking"])
logger = logging.getLogger("clinicbook")


@router.get("/doctors", response_model=ApiResponse[List[DoctorSchema]])
async def list_doctors(
    request: Request,
    use_case: Annotated[ListDoctorsUseCase, Depends(get_list_doctors_use_case)],
    specialty: Optional[str] = Query(None, description="Filter by specialty"),
):
    doctors = await use_case.execute(specialty)
    return ok(request, data=[DoctorSchema.from_domain(d) for d in doctors])


@router.get(
    "/doctors/{doctor_id}/slots",
    response_model=ApiResponse[AvailableSlotsSchema],
    responses={
        404: {"model": ErrorResponse, "description": "Doctor not found"},
        422: {"model": ErrorResponse, "description": "Invalid date"},
    },
)
async def list_available_slots(
    request: Request,
    doctor_id: str,
    use_case: Annotated[ListAvailableSlotsUseCase, Depends(get_list_slots_use_case)],
    date: str = Query(..., description="Date (YYYY-MM-DD)"),
):
    """
    Bookable hourly slots for a doctor on a date.

    ``data.status`` explains an empty list (fully booked, no shift hours).
    """
    result = await use_case.execute(doctor_id, date)
    return ok(request, data=AvailableSlotsSchema.from_dto(result))


@router.post(
    "/appointments",
    response_model=ApiResponse[BookingResultSchema],
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"model": ErrorResponse, "description": "Slot unavailable or duplicate booking"},
        422: {"model": ErrorResponse, "description": "Invalid booking data"},
        429: {"model": ErrorResponse, "description": "Too many attempts"},
        503: {"model": ErrorResponse, "description": "Store unavailable, retry"},
    },
)
async def book_appointment(
    http_request: Request,
    request: BookAppointmentRequestSchema,
    use_case: Annotated[BookAppointmentUseCase, Depends(get_book_appointment_use_case)],
):
    dto_request = BookAppointmentRequest(
        doctor_id=request.doctor_id,
        date=request.date,
        time=request.time,
        patient_name=request.patient_name,
        phone=request.phone,
        email=request.email,
        reason=request.reason,
    )
    result = await use_case.execute(dto_request)
    message = result.message
    if result.email_attempted and not result.email_sent:
        message += " (Confirmation email could not be sent.)"
    return ok(
        http_request,
        data=BookingResultSchema(
            appointment=AppointmentSchema.from_domain(result.appointment),
            doctor_name=result.doctor_name,
            email_sent=result.email_sent,
        ),
        message=message,
    )


@router.get("/appointments/duplicate-check", response_model=ApiResponse[DuplicateCheckSchema])
async def check_duplicate(
    request: Request,
    use_case: Annotated[CheckDuplicateBookingUseCase, Depends(get_check_duplicate_use_case)],
    name: str = Query(..., description="Patient name"),
    date: str = Query(..., description="Date (YYYY-MM-DD)"),
):
    result = await use_case.execute(name, date)
    return ok(request, data=DuplicateCheckSchema.from_dto(result))
