import asyncio
import logging
from dataclasses import asdict, dataclass
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.clock import day_bounds, utc_naive_now
from app.models.appointment import Appointment
from app.models.slot import Slot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardStats:
    total_appointments: int = 0
    today_appointments: int = 0
    upcoming_appointments: int = 0
    available_slots: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


async def _count(session_factory: async_sessionmaker[AsyncSession], stmt) -> int:
    # One session per query: an AsyncSession cannot run statements concurrently.
    async with session_factory() as session:
        result = await session.execute(stmt)
        return int(result.scalar_one())


async def get_dashboard_stats(
    session_factory: async_sessionmaker[AsyncSession],
    provider_id: int,
    now: datetime | None = None,
) -> DashboardStats:
    """Advisory counts for the provider dashboard; any failure yields all zeros."""
    now = now or utc_naive_now()
    today_start, today_end = day_bounds(now.date())
    count_appointments = select(func.count()).select_from(Appointment).where(
        Appointment.provider_id == provider_id
    )
    queries = [
        count_appointments,
        count_appointments.where(Appointment.appointment_date.between(today_start, today_end)),
        count_appointments.where(Appointment.appointment_date >= today_start),
        select(func.count())
        .select_from(Slot)
        .where(
            Slot.provider_id == provider_id,
            Slot.is_reserved == False,  # noqa: E712
            Slot.date >= today_start,
        ),
    ]
    results = await asyncio.gather(
        *(_count(session_factory, q) for q in queries), return_exceptions=True
    )
    failures = [r for r in results if isinstance(r, Exception)]
    if failures:
        logger.error(
            "Dashboard stats failed for provider %s (%d of %d queries)",
            provider_id,
            len(failures),
            len(queries),
            exc_info=failures[0],
        )
        return DashboardStats()
    total, today, upcoming, available = results
    return DashboardStats(
        total_appointments=total,
        today_appointments=today,
        upcoming_appointments=upcoming,
        available_slots=available,
    )
