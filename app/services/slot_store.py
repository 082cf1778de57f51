import logging
from datetime import date
from typing import Protocol

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import day_bounds
from app.core.errors import FetchError, PersistError
from app.models.slot import Slot, SlotPublic

logger = logging.getLogger(__name__)


class SlotStore(Protocol):
    async def list_for_day(self, provider_id: int, day: date) -> list[SlotPublic]:
        ...

    async def create(self, slot: Slot) -> SlotPublic:
        ...

    async def delete(self, slot_id: int) -> None:
        ...


class SqlSlotStore:
    """Slot persistence on the request's AsyncSession."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_for_day(self, provider_id: int, day: date) -> list[SlotPublic]:
        start, end = day_bounds(day)
        try:
            result = await self.session.execute(
                select(Slot)
                .where(
                    Slot.provider_id == provider_id,
                    Slot.date >= start,
                    Slot.date <= end,
                )
                .order_by(Slot.start_time)
            )
        except SQLAlchemyError as e:
            logger.exception("Fetching slots failed for provider %s on %s", provider_id, day)
            raise FetchError("Error loading slots. Please try again.") from e
        return [SlotPublic.model_validate(row) for row in result.scalars().all()]

    async def create(self, slot: Slot) -> SlotPublic:
        try:
            self.session.add(slot)
            await self.session.flush()
            await self.session.refresh(slot)
        except SQLAlchemyError as e:
            logger.exception("Adding slot failed for provider %s", slot.provider_id)
            raise PersistError("Error adding slot. Please try again.") from e
        return SlotPublic.model_validate(slot)

    async def delete(self, slot_id: int) -> None:
        try:
            await self.session.execute(delete(Slot).where(Slot.id == slot_id))
            await self.session.flush()
        except SQLAlchemyError as e:
            logger.exception("Deleting slot %s failed", slot_id)
            raise PersistError("Error deleting slot. Please try again.") from e
