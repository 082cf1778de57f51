"""SQL slot store and the manager end-to-end on SQLite."""
from datetime import date, datetime, timedelta

import pytest
from sqlalchemy.exc import OperationalError

from app.core.errors import FetchError, OverlapError
from app.models.slot import Slot, SlotCreate
from app.services.availability import AvailabilityManager
from app.services.slot_store import SqlSlotStore

from tests.conftest import TODAY


async def test_list_for_day_is_scoped_and_ordered(session, provider, other_provider, add_slot):
    await add_slot(provider, TODAY, "15:00", "16:00")
    await add_slot(provider, TODAY, "09:00", "09:30")
    await add_slot(provider, TODAY + timedelta(days=1), "09:00", "09:30")
    await add_slot(other_provider, TODAY, "10:00", "10:30")

    slots = await SqlSlotStore(session).list_for_day(provider.id, TODAY)

    assert [(s.start_time, s.end_time) for s in slots] == [("09:00", "09:30"), ("15:00", "16:00")]
    assert all(s.provider_id == provider.id for s in slots)


async def test_day_bounds_include_end_of_day(session, provider):
    late = Slot(
        provider_id=provider.id,
        provider_name=provider.name,
        date=datetime.combine(TODAY, datetime.max.time()),
        start_time="23:00",
        end_time="23:30",
    )
    session.add(late)
    await session.commit()

    slots = await SqlSlotStore(session).list_for_day(provider.id, TODAY)
    assert [s.start_time for s in slots] == ["23:00"]
    assert await SqlSlotStore(session).list_for_day(provider.id, TODAY + timedelta(days=1)) == []


async def test_create_and_delete(session, provider):
    store = SqlSlotStore(session)
    created = await store.create(
        Slot(
            provider_id=provider.id,
            provider_name=provider.name,
            date=datetime.combine(TODAY, datetime.min.time()),
            start_time="12:00",
            end_time="12:30",
        )
    )
    assert created.id is not None
    assert created.is_reserved is False

    await store.delete(created.id)
    assert await store.list_for_day(provider.id, TODAY) == []


async def test_driver_error_becomes_fetch_error(session, provider, monkeypatch):
    async def broken_execute(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(session, "execute", broken_execute)
    with pytest.raises(FetchError):
        await SqlSlotStore(session).list_for_day(provider.id, TODAY)


async def test_manager_on_sql_store(session, provider, add_slot):
    await add_slot(provider, TODAY, "09:00", "10:00")
    manager = AvailabilityManager(SqlSlotStore(session), provider)
    await manager.load_slots(TODAY)

    with pytest.raises(OverlapError):
        await manager.add_slot(SlotCreate(date=TODAY, start_time="09:30", end_time="10:30"))
    await manager.add_slot(SlotCreate(date=TODAY, start_time="10:00", end_time="11:00"))
    await session.commit()

    stored = await SqlSlotStore(session).list_for_day(provider.id, TODAY)
    assert [(s.start_time, s.end_time) for s in stored] == [("09:00", "10:00"), ("10:00", "11:00")]
    assert stored[1].date == datetime(TODAY.year, TODAY.month, TODAY.day)


async def test_slot_dates_are_truncated_to_midnight(session, provider):
    manager = AvailabilityManager(SqlSlotStore(session), provider)
    day = date(2026, 4, 2)
    await manager.load_slots(day)
    created = await manager.add_slot(SlotCreate(date=day, start_time="08:00", end_time="08:30"))
    assert created.date == datetime(2026, 4, 2, 0, 0)
