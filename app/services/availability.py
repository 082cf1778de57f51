import logging
from datetime import date

from app.core.clock import start_of_day
from app.core.errors import NotFoundError, ReservedSlotError, ValidationError
from app.models.provider import CurrentProvider
from app.models.slot import Slot, SlotCreate, SlotPublic
from app.services.overlap import validate_slot
from app.services.slot_store import SlotStore

logger = logging.getLogger(__name__)


class AvailabilityManager:
    """Owns the slot list of one provider for the selected day.

    Every successful mutation is followed by exactly one reload from the store,
    so the cached list reflects what was last read, not pushed updates.
    """

    def __init__(self, store: SlotStore, provider: CurrentProvider) -> None:
        self.store = store
        self.provider = provider
        self.selected_date: date | None = None
        self.slots: list[SlotPublic] = []

    async def load_slots(self, day: date) -> list[SlotPublic]:
        # On FetchError the previous cache is kept as-is.
        fetched = await self.store.list_for_day(self.provider.id, day)
        self.selected_date = day
        self.slots = sorted(fetched, key=lambda s: s.start_time)
        return self.slots

    async def add_slot(self, candidate: SlotCreate) -> SlotPublic:
        if self.selected_date is None or candidate.date != self.selected_date:
            raise ValidationError("Load the slots for this date before adding one")
        validate_slot(candidate, self.slots)
        created = await self.store.create(
            Slot(
                provider_id=self.provider.id,
                provider_name=self.provider.name,
                date=start_of_day(candidate.date),
                start_time=candidate.start_time,
                end_time=candidate.end_time,
                is_reserved=False,
            )
        )
        logger.info(
            "Slot %s added for provider %s on %s (%s-%s)",
            created.id,
            self.provider.id,
            candidate.date,
            candidate.start_time,
            candidate.end_time,
        )
        await self.load_slots(self.selected_date)
        return created

    async def delete_slot(self, slot_id: int) -> None:
        slot = next((s for s in self.slots if s.id == slot_id), None)
        if slot is None:
            raise NotFoundError("Slot not found")
        if slot.is_reserved:
            raise ReservedSlotError("Cannot delete a booked slot")
        await self.store.delete(slot_id)
        logger.info("Slot %s deleted for provider %s", slot_id, self.provider.id)
        await self.load_slots(self.selected_date)
