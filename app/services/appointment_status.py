import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import utc_naive_now
from app.core.errors import TransitionError
from app.models.appointment import AppointmentFilter, AppointmentPublic, AppointmentStatus
from app.models.provider import CurrentProvider
from app.services.appointment_service import (
    get_appointment_for_provider,
    list_appointments_for_provider,
    save_appointment_status,
)

logger = logging.getLogger(__name__)

VALID_TRANSITIONS: dict[AppointmentStatus, frozenset[AppointmentStatus]] = {
    AppointmentStatus.PENDING: frozenset({AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELLED}),
    AppointmentStatus.CONFIRMED: frozenset({AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED}),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELLED: frozenset(),
}


def can_transition(current: AppointmentStatus | str, new: AppointmentStatus | str) -> bool:
    return AppointmentStatus(new) in VALID_TRANSITIONS[AppointmentStatus(current)]


def check_transition(current: AppointmentStatus | str, new: AppointmentStatus | str) -> None:
    if not can_transition(current, new):
        raise TransitionError(
            f"Cannot change appointment status from {AppointmentStatus(current).value} "
            f"to {AppointmentStatus(new).value}"
        )


class AppointmentBoard:
    """A provider's appointment list as last read, plus local status edits.

    Status changes patch the matching entry in place instead of reloading, so the
    list may diverge from the store if other staff edit concurrently. Call
    resync() when that matters. A change is only written if the stored status
    still matches the one it was checked against; otherwise TransitionError.
    """

    def __init__(self, session: AsyncSession, provider: CurrentProvider) -> None:
        self.session = session
        self.provider = provider
        self.date_filter = AppointmentFilter.UPCOMING
        self.appointments: list[AppointmentPublic] = []

    async def load(
        self, date_filter: AppointmentFilter = AppointmentFilter.UPCOMING, now: datetime | None = None
    ) -> list[AppointmentPublic]:
        self.appointments = await list_appointments_for_provider(
            self.session, self.provider.id, date_filter, now=now
        )
        self.date_filter = date_filter
        return self.appointments

    async def resync(self, now: datetime | None = None) -> list[AppointmentPublic]:
        return await self.load(self.date_filter, now=now)

    async def change_status(
        self, appointment_id: int, new_status: AppointmentStatus
    ) -> AppointmentPublic:
        current = next((a for a in self.appointments if a.id == appointment_id), None)
        if current is None:
            current = await get_appointment_for_provider(self.session, appointment_id, self.provider.id)
        check_transition(current.status, new_status)
        updated_at = utc_naive_now()
        await save_appointment_status(
            self.session, appointment_id, current.status, new_status, updated_at
        )
        updated = current.model_copy(update={"status": new_status, "updated_at": updated_at})
        self.appointments = [updated if a.id == appointment_id else a for a in self.appointments]
        logger.info(
            "Appointment %s status %s -> %s", appointment_id, current.status.value, new_status.value
        )
        return updated
