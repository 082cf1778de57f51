from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_provider, get_session
from app.api.schemas.appointment import AppointmentListResponse, StatusUpdateRequest
from app.models.appointment import (
    AppointmentBooking,
    AppointmentFilter,
    AppointmentPublic,
)
from app.models.provider import CurrentProvider
from app.services.appointment_service import book_slot
from app.services.appointment_status import AppointmentBoard
from app.services.email_service import send_appointment_status_email, send_provider_new_appointment_email
from app.services.provider_service import get_provider

router = APIRouter(prefix="/appointments", tags=["appointments"])


@router.get("", response_model=AppointmentListResponse)
async def list_my_appointments(
    filter_param: AppointmentFilter = Query(AppointmentFilter.UPCOMING, alias="filter"),
    session: AsyncSession = Depends(get_session),
    provider: CurrentProvider = Depends(get_current_provider),
) -> AppointmentListResponse:
    board = AppointmentBoard(session, provider)
    appointments = await board.load(filter_param)
    return AppointmentListResponse(filter=filter_param, appointments=appointments)


@router.patch("/{appointment_id}/status", response_model=AppointmentPublic)
async def update_appointment_status(
    appointment_id: int,
    body: StatusUpdateRequest,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session),
    provider: CurrentProvider = Depends(get_current_provider),
) -> AppointmentPublic:
    board = AppointmentBoard(session, provider)
    appointment = await board.change_status(appointment_id, body.status)
    background_tasks.add_task(send_appointment_status_email, appointment)
    return appointment


@router.post("/book", response_model=AppointmentPublic, status_code=status.HTTP_201_CREATED)
async def book_appointment(
    body: AppointmentBooking,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session),
) -> AppointmentPublic:
    """Public: reserve a free slot and create a pending appointment for it."""
    appointment = AppointmentPublic.model_validate(await book_slot(session, body))
    background_tasks.add_task(send_appointment_status_email, appointment)
    provider = await get_provider(session, appointment.provider_id)
    background_tasks.add_task(send_provider_new_appointment_email, appointment, provider.email)
    return appointment
