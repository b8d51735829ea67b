"""Admin endpoints for managing doctors."""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query, Request, status

from ...application.dto.doctor_dto import SaveDoctorRequest
from ...application.use_cases.delete_doctor import DeleteDoctorUseCase
from ...application.use_cases.get_doctor_appointments import GetDoctorAppointmentsUseCase
from ...application.use_cases.list_doctors import ListDoctorsUseCase
from ...application.use_cases.save_doctor import SaveDoctorUseCase
from ..deps import (
    get_delete_doctor_use_case,
    get_doctor_appointments_use_case,
    get_list_doctors_use_case,
    get_save_doctor_use_case,
)
from ..schemas.common import ApiResponse, ErrorResponse
from ..schemas.doctors import (
    DeleteDoctorSchema,
    DoctorAppointmentsSchema,
    DoctorSchema,
    SaveDoctorRequestSchema,
)
from ..utils.responses import ok

router = APIRouter(prefix="/admin/doctors", tags=["admin: doctors"])


def _to_dto(body: SaveDoctorRequestSchema) -> SaveDoctorRequest:
    return SaveDoctorRequest(
        name=body.name,
        specialty=body.specialty,
        shift_start=body.shift_start,
        shift_end=body.shift_end,
    )


@router.get("", response_model=ApiResponse[List[DoctorSchema]])
async def list_doctors(
    request: Request,
    use_case: Annotated[ListDoctorsUseCase, Depends(get_list_doctors_use_case)],
    specialty: Optional[str] = Query(None, description="Filter by specialty"),
):
    doctors = await use_case.execute(specialty)
    return ok(request, data=[DoctorSchema.from_domain(d) for d in doctors])


@router.post(
    "",
    response_model=ApiResponse[DoctorSchema],
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"model": ErrorResponse, "description": "Doctor ID already exists"},
        422: {"model": ErrorResponse, "description": "Missing fields or shift not 12 hours"},
    },
)
async def create_doctor(
    request: Request,
    body: SaveDoctorRequestSchema,
    use_case: Annotated[SaveDoctorUseCase, Depends(get_save_doctor_use_case)],
):
    doctor = await use_case.create(_to_dto(body))
    return ok(
        request,
        data=DoctorSchema.from_domain(doctor),
        message=f"Doctor added successfully with ID: {doctor.doctor_id}",
    )


@router.put(
    "/{doctor_id}",
    response_model=ApiResponse[DoctorSchema],
    responses={
        404: {"model": ErrorResponse, "description": "Doctor not found"},
        422: {"model": ErrorResponse, "description": "Missing fields or shift not 12 hours"},
    },
)
async def update_doctor(
    request: Request,
    doctor_id: str,
    body: SaveDoctorRequestSchema,
    use_case: Annotated[SaveDoctorUseCase, Depends(get_save_doctor_use_case)],
):
    doctor = await use_case.update(doctor_id, _to_dto(body))
    return ok(request, data=DoctorSchema.from_domain(doctor), message="Doctor updated successfully!")


@router.delete(
    "/{doctor_id}",
    response_model=ApiResponse[DeleteDoctorSchema],
    responses={404: {"model": ErrorResponse, "description": "Doctor not found"}},
)
async def delete_doctor(
    request: Request,
    doctor_id: str,
    use_case: Annotated[DeleteDoctorUseCase, Depends(get_delete_doctor_use_case)],
):
    result = await use_case.execute(doctor_id)
    return ok(
        request,
        data=DeleteDoctorSchema(
            doctor_id=result.doctor_id,
            doctor_name=result.doctor_name,
            upcoming_appointments=result.upcoming_appointments,
        ),
        message=result.message,
    )


@router.get(
    "/{doctor_id}/appointments",
    response_model=ApiResponse[DoctorAppointmentsSchema],
    responses={404: {"model": ErrorResponse, "description": "Doctor not found"}},
)
async def doctor_appointments(
    request: Request,
    doctor_id: str,
    use_case: Annotated[GetDoctorAppointmentsUseCase, Depends(get_doctor_appointments_use_case)],
):
    result = await use_case.execute(doctor_id)
    return ok(request, data=DoctorAppointmentsSchema.from_dto(result))
