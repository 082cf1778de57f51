import logging
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import day_bounds, start_of_day, utc_naive_now
from app.core.errors import (
    FetchError,
    NotFoundError,
    PersistError,
    SlotUnavailableError,
    TransitionError,
)
from app.models.appointment import (
    Appointment,
    AppointmentBooking,
    AppointmentFilter,
    AppointmentPublic,
    AppointmentStatus,
)
from app.models.slot import Slot

logger = logging.getLogger(__name__)


def _date_clause(date_filter: AppointmentFilter, now: datetime):
    today_start, today_end = day_bounds(now.date())
    if date_filter == AppointmentFilter.UPCOMING:
        return Appointment.appointment_date >= today_start
    if date_filter == AppointmentFilter.TODAY:
        return Appointment.appointment_date.between(today_start, today_end)
    if date_filter == AppointmentFilter.PAST:
        return Appointment.appointment_date < today_start
    return None


async def list_appointments_for_provider(
    session: AsyncSession,
    provider_id: int,
    date_filter: AppointmentFilter = AppointmentFilter.UPCOMING,
    now: datetime | None = None,
) -> list[AppointmentPublic]:
    """Provider's appointments for one date filter, ordered by (date, start time)."""
    now = now or utc_naive_now()
    q = select(Appointment).where(Appointment.provider_id == provider_id)
    clause = _date_clause(date_filter, now)
    if clause is not None:
        q = q.where(clause)
    q = q.order_by(Appointment.appointment_date, Appointment.start_time)
    try:
        result = await session.execute(q)
    except SQLAlchemyError as e:
        logger.exception("Fetching appointments failed for provider %s", provider_id)
        raise FetchError("Error loading appointments. Please try again.") from e
    rows = [AppointmentPublic.model_validate(a) for a in result.scalars().all()]
    rows.sort(key=lambda a: (a.appointment_date, a.start_time))
    return rows


async def get_appointment_for_provider(
    session: AsyncSession, appointment_id: int, provider_id: int
) -> AppointmentPublic:
    try:
        result = await session.execute(
            select(Appointment).where(
                Appointment.id == appointment_id,
                Appointment.provider_id == provider_id,
            )
        )
    except SQLAlchemyError as e:
        logger.exception("Fetching appointment %s failed", appointment_id)
        raise FetchError("Error loading appointment. Please try again.") from e
    appointment = result.scalar_one_or_none()
    if appointment is None:
        raise NotFoundError("Appointment not found")
    return AppointmentPublic.model_validate(appointment)


async def save_appointment_status(
    session: AsyncSession,
    appointment_id: int,
    current_status: AppointmentStatus,
    new_status: AppointmentStatus,
    updated_at: datetime,
) -> None:
    """Write new_status only if the row still holds current_status.

    The caller checked the transition against current_status; a row that moved
    on in the meantime is left untouched.
    """
    try:
        result = await session.execute(
            update(Appointment)
            .where(Appointment.id == appointment_id, Appointment.status == current_status.value)
            .values(status=new_status.value, updated_at=updated_at)
        )
        await session.flush()
        if result.rowcount:
            return
        stored = await session.execute(select(Appointment.status).where(Appointment.id == appointment_id))
        stored_status = stored.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.exception("Updating status of appointment %s failed", appointment_id)
        raise PersistError("Error updating appointment status. Please try again.") from e
    if stored_status is None:
        raise NotFoundError("Appointment not found")
    logger.warning(
        "Appointment %s is %s, not %s; status change to %s refused",
        appointment_id,
        stored_status,
        current_status.value,
        new_status.value,
    )
    raise TransitionError(
        f"Appointment status was changed to {stored_status} by someone else. Refresh and try again."
    )


async def book_slot(session: AsyncSession, data: AppointmentBooking) -> Appointment:
    """Reserve a free slot and insert its appointment in the caller's transaction.

    The reservation is a conditional update, so two bookings racing for the same
    slot cannot both succeed. Any failure rolls the whole request back.
    """
    try:
        slot = await session.get(Slot, data.slot_id)
        if slot is None:
            raise NotFoundError("Slot not found")
        result = await session.execute(
            update(Slot)
            .where(Slot.id == data.slot_id, Slot.is_reserved == False)  # noqa: E712
            .values(is_reserved=True)
        )
    except SQLAlchemyError as e:
        logger.exception("Reserving slot %s failed", data.slot_id)
        raise PersistError("Error booking appointment. Please try again.") from e
    if not result.rowcount:
        raise SlotUnavailableError("This slot has already been booked")
    now = utc_naive_now()
    appointment = Appointment(
        provider_id=slot.provider_id,
        provider_name=slot.provider_name,
        slot_id=slot.id,
        appointment_date=start_of_day(slot.date.date()),
        start_time=slot.start_time,
        end_time=slot.end_time,
        client_name=data.client_name,
        client_email=data.client_email,
        client_phone=data.client_phone,
        pet_name=data.pet_name,
        pet_type=data.pet_type,
        notes=data.notes,
        status=AppointmentStatus.PENDING.value,
        created_at=now,
        updated_at=now,
    )
    try:
        session.add(appointment)
        await session.flush()
        await session.refresh(appointment)
    except SQLAlchemyError as e:
        logger.exception("Inserting appointment for slot %s failed", slot.id)
        raise PersistError("Error booking appointment. Please try again.") from e
    logger.info("Slot %s booked as appointment %s", slot.id, appointment.id)
    return appointment
