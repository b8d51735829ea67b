"""Admin endpoints for appointments and the archive."""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query, Request

from ...application.use_cases.archive_appointment import ArchiveAppointmentUseCase
from ...application.use_cases.cleanup_appointments import CleanupAppointmentsUseCase
from ...application.use_cases.list_appointments import (
    GetAppointmentUseCase,
    ListAppointmentsUseCase,
)
from ...application.use_cases.manage_archive import ManageArchiveUseCase
from ...application.use_cases.update_appointment_status import UpdateAppointmentStatusUseCase
from ...domain.enums.appointment import AppointmentSource, AppointmentStatus
from ..deps import (
    get_appointment_use_case,
    get_archive_appointment_use_case,
    get_cleanup_use_case,
    get_list_appointments_use_case,
    get_manage_archive_use_case,
    get_update_status_use_case,
)
from ..schemas.appointments import (
    AppointmentSchema,
    CleanupResultSchema,
    UpdateStatusRequestSchema,
)
from ..schemas.common import ApiResponse, ErrorResponse
from ..utils.responses import ok

router = APIRouter(prefix="/admin", tags=["admin: appointments"])


@router.get("/appointments", response_model=ApiResponse[List[AppointmentSchema]])
async def list_appointments(
    request: Request,
    use_case: Annotated[ListAppointmentsUseCase, Depends(get_list_appointments_use_case)],
    status: Optional[AppointmentStatus] = Query(None, description="Filter by status"),
):
    appointments = await use_case.execute(status)
    return ok(request, data=[AppointmentSchema.from_domain(a) for a in appointments])


@router.post("/appointments/cleanup", response_model=ApiResponse[CleanupResultSchema])
async def run_cleanup(
    request: Request,
    use_case: Annotated[CleanupAppointmentsUseCase, Depends(get_cleanup_use_case)],
):
    result = await use_case.execute()
    return ok(request, data=CleanupResultSchema.from_dto(result), message=result.message)


@router.get(
    "/appointments/{appointment_id}",
    response_model=ApiResponse[AppointmentSchema],
    responses={404: {"model": ErrorResponse, "description": "Appointment not found"}},
)
async def get_appointment(
    request: Request,
    appointment_id: str,
    use_case: Annotated[GetAppointmentUseCase, Depends(get_appointment_use_case)],
):
    record = await use_case.execute(appointment_id)
    return ok(request, data=AppointmentSchema.from_domain(record.appointment, record.source))


@router.patch(
    "/appointments/{appointment_id}/status",
    response_model=ApiResponse[AppointmentSchema],
    responses={
        404: {"model": ErrorResponse, "description": "Appointment not found"},
        409: {"model": ErrorResponse, "description": "Transition not allowed"},
    },
)
async def update_status(
    request: Request,
    appointment_id: str,
    body: UpdateStatusRequestSchema,
    use_case: Annotated[UpdateAppointmentStatusUseCase, Depends(get_update_status_use_case)],
):
    appointment = await use_case.execute(appointment_id, body.status)
    return ok(
        request,
        data=AppointmentSchema.from_domain(appointment, AppointmentSource.CURRENT),
        message=f"Appointment {appointment.status.value} successfully!",
    )


@router.post(
    "/appointments/{appointment_id}/archive",
    response_model=ApiResponse[AppointmentSchema],
    responses={
        404: {"model": ErrorResponse, "description": "Appointment not found"},
        409: {"model": ErrorResponse, "description": "Appointment still holds a future slot"},
    },
)
async def archive_appointment(
    request: Request,
    appointment_id: str,
    use_case: Annotated[ArchiveAppointmentUseCase, Depends(get_archive_appointment_use_case)],
):
    archived = await use_case.execute(appointment_id)
    return ok(
        request,
        data=AppointmentSchema.from_domain(archived, AppointmentSource.ARCHIVE),
        message="Appointment moved to archive successfully!",
    )


@router.get("/archive", response_model=ApiResponse[List[AppointmentSchema]])
async def list_archive(
    request: Request,
    use_case: Annotated[ManageArchiveUseCase, Depends(get_manage_archive_use_case)],
):
    records = await use_case.list_past()
    return ok(
        request,
        data=[AppointmentSchema.from_domain(r.appointment, r.source) for r in records],
        message=f"Found {len(records)} past appointments",
    )


@router.delete(
    "/archive/{appointment_id}",
    response_model=ApiResponse[dict],
    responses={404: {"model": ErrorResponse, "description": "Appointment not found"}},
)
async def delete_archived_appointment(
    request: Request,
    appointment_id: str,
    use_case: Annotated[ManageArchiveUseCase, Depends(get_manage_archive_use_case)],
    source: AppointmentSource = Query(AppointmentSource.ARCHIVE, description="archive or current"),
):
    await use_case.delete(appointment_id, source)
    return ok(
        request,
        data={"appointment_id": appointment_id, "source": source.value},
        message="Appointment deleted successfully!",
    )


@router.delete("/archive", response_model=ApiResponse[dict])
async def delete_all_archived(
    request: Request,
    use_case: Annotated[ManageArchiveUseCase, Depends(get_manage_archive_use_case)],
):
    deleted = await use_case.delete_all()
    return ok(request, data={"deleted": deleted}, message="All archived appointments deleted!")
