"""Availability manager behaviour against an in-memory slot store."""
from datetime import date, datetime

import pytest

from app.core.clock import start_of_day
from app.core.errors import (
    ConflictError,
    FetchError,
    NotFoundError,
    PersistError,
    ReservedSlotError,
    ValidationError,
)
from app.models.provider import CurrentProvider
from app.models.slot import Slot, SlotCreate, SlotPublic
from app.services.availability import AvailabilityManager
from app.services.overlap import overlaps

DAY = date(2026, 3, 11)
PROVIDER = CurrentProvider(id=7, username="drmeera", name="Meera Rao")


class FakeSlotStore:
    def __init__(self, slots: list[SlotPublic] | None = None) -> None:
        self.slots = list(slots or [])
        self.calls: list[str] = []
        self.fail_list = False
        self.fail_write = False
        self._next_id = 100

    async def list_for_day(self, provider_id: int, day: date) -> list[SlotPublic]:
        self.calls.append("list")
        if self.fail_list:
            raise FetchError("Error loading slots. Please try again.")
        return [s for s in self.slots if s.provider_id == provider_id and s.date.date() == day]

    async def create(self, slot: Slot) -> SlotPublic:
        self.calls.append("create")
        if self.fail_write:
            raise PersistError("Error adding slot. Please try again.")
        self._next_id += 1
        created = SlotPublic(
            id=self._next_id,
            provider_id=slot.provider_id,
            provider_name=slot.provider_name,
            date=slot.date,
            start_time=slot.start_time,
            end_time=slot.end_time,
            is_reserved=slot.is_reserved,
            created_at=datetime(2026, 3, 1),
        )
        self.slots.append(created)
        return created

    async def delete(self, slot_id: int) -> None:
        self.calls.append("delete")
        if self.fail_write:
            raise PersistError("Error deleting slot. Please try again.")
        self.slots = [s for s in self.slots if s.id != slot_id]


def make_slot(slot_id: int, start: str, end: str, reserved: bool = False, provider_id: int = 7) -> SlotPublic:
    return SlotPublic(
        id=slot_id,
        provider_id=provider_id,
        provider_name="Meera Rao",
        date=start_of_day(DAY),
        start_time=start,
        end_time=end,
        is_reserved=reserved,
        created_at=datetime(2026, 3, 1),
    )


@pytest.fixture
def store() -> FakeSlotStore:
    return FakeSlotStore(
        [
            make_slot(2, "11:00", "11:30"),
            make_slot(1, "09:00", "10:00"),
            make_slot(3, "14:00", "15:00", reserved=True),
            make_slot(9, "09:00", "10:00", provider_id=8),
        ]
    )


@pytest.fixture
async def manager(store) -> AvailabilityManager:
    m = AvailabilityManager(store, PROVIDER)
    await m.load_slots(DAY)
    store.calls.clear()
    return m


async def test_load_filters_by_provider_and_sorts(manager):
    assert [s.id for s in manager.slots] == [1, 2, 3]
    assert manager.selected_date == DAY


async def test_overlapping_slot_rejected_without_store_call(manager, store):
    with pytest.raises(ConflictError):
        await manager.add_slot(SlotCreate(date=DAY, start_time="09:30", end_time="10:30"))
    assert store.calls == []


async def test_back_to_back_slot_accepted_and_reloaded(manager, store):
    created = await manager.add_slot(SlotCreate(date=DAY, start_time="10:00", end_time="11:00"))
    assert store.calls == ["create", "list"]
    assert created.is_reserved is False
    assert created.provider_name == "Meera Rao"
    assert [s.start_time for s in manager.slots] == ["09:00", "10:00", "11:00", "14:00"]


@pytest.mark.parametrize("start,end", [("10:00", "10:00"), ("11:00", "10:00")])
async def test_inverted_range_rejected(manager, store, start, end):
    with pytest.raises(ValidationError):
        await manager.add_slot(SlotCreate(date=DAY, start_time=start, end_time=end))
    assert store.calls == []


async def test_add_requires_loaded_day(store):
    m = AvailabilityManager(store, PROVIDER)
    with pytest.raises(ValidationError):
        await m.add_slot(SlotCreate(date=DAY, start_time="16:00", end_time="17:00"))
    assert store.calls == []


async def test_persist_failure_does_not_reload(manager, store):
    store.fail_write = True
    before = list(manager.slots)
    with pytest.raises(PersistError):
        await manager.add_slot(SlotCreate(date=DAY, start_time="16:00", end_time="17:00"))
    assert store.calls == ["create"]
    assert manager.slots == before


async def test_fetch_failure_keeps_cache(manager, store):
    store.fail_list = True
    before = list(manager.slots)
    with pytest.raises(FetchError):
        await manager.load_slots(date(2026, 3, 12))
    assert manager.slots == before
    assert manager.selected_date == DAY


async def test_delete_reserved_slot_makes_no_store_call(manager, store):
    with pytest.raises(ReservedSlotError) as exc:
        await manager.delete_slot(3)
    assert isinstance(exc.value, ConflictError)
    assert store.calls == []


async def test_delete_unknown_slot(manager, store):
    with pytest.raises(NotFoundError):
        await manager.delete_slot(999)
    assert store.calls == []


async def test_delete_free_slot_reloads_once(manager, store):
    await manager.delete_slot(2)
    assert store.calls == ["delete", "list"]
    assert [s.id for s in manager.slots] == [1, 3]


async def test_accepted_slots_never_overlap():
    m = AvailabilityManager(FakeSlotStore(), PROVIDER)
    await m.load_slots(DAY)
    candidates = [
        ("09:00", "10:00"),
        ("09:30", "10:30"),
        ("10:00", "10:45"),
        ("08:00", "12:00"),
        ("10:45", "11:00"),
        ("07:00", "09:00"),
        ("10:15", "10:30"),
    ]
    for start, end in candidates:
        try:
            await m.add_slot(SlotCreate(date=DAY, start_time=start, end_time=end))
        except ConflictError:
            pass
    accepted = m.slots
    assert [(s.start_time, s.end_time) for s in accepted] == [
        ("07:00", "09:00"),
        ("09:00", "10:00"),
        ("10:00", "10:45"),
        ("10:45", "11:00"),
    ]
    for i, a in enumerate(accepted):
        for b in accepted[i + 1:]:
            assert not overlaps(a, b)
