from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_provider, get_session
from app.api.schemas.appointment import DaySlotsResponse
from app.models.provider import CurrentProvider
from app.models.slot import SlotCreate, SlotPublic
from app.services.availability import AvailabilityManager
from app.services.slot_store import SqlSlotStore

router = APIRouter(prefix="/slots", tags=["slots"])


@router.get("", response_model=DaySlotsResponse)
async def list_my_slots(
    date_param: date = Query(..., alias="date"),
    session: AsyncSession = Depends(get_session),
    provider: CurrentProvider = Depends(get_current_provider),
) -> DaySlotsResponse:
    """The signed-in provider's slots for one day, ordered by start time."""
    manager = AvailabilityManager(SqlSlotStore(session), provider)
    slots = await manager.load_slots(date_param)
    return DaySlotsResponse(date=date_param, slots=slots)


@router.post("", response_model=DaySlotsResponse, status_code=status.HTTP_201_CREATED)
async def add_slot(
    body: SlotCreate,
    session: AsyncSession = Depends(get_session),
    provider: CurrentProvider = Depends(get_current_provider),
) -> DaySlotsResponse:
    manager = AvailabilityManager(SqlSlotStore(session), provider)
    await manager.load_slots(body.date)
    await manager.add_slot(body)
    return DaySlotsResponse(date=body.date, slots=manager.slots)


@router.delete("/{slot_id}", response_model=DaySlotsResponse)
async def delete_slot(
    slot_id: int,
    date_param: date = Query(..., alias="date"),
    session: AsyncSession = Depends(get_session),
    provider: CurrentProvider = Depends(get_current_provider),
) -> DaySlotsResponse:
    """Delete an unreserved slot. Clients ask the user to confirm before calling."""
    manager = AvailabilityManager(SqlSlotStore(session), provider)
    await manager.load_slots(date_param)
    await manager.delete_slot(slot_id)
    return DaySlotsResponse(date=date_param, slots=manager.slots)


@router.get("/available", response_model=list[SlotPublic])
async def available_slots(
    provider_id: int = Query(...),
    date_param: date = Query(..., alias="date"),
    session: AsyncSession = Depends(get_session),
) -> list[SlotPublic]:
    """Public: a provider's unreserved slots for one day, for the booking flow."""
    slots = await SqlSlotStore(session).list_for_day(provider_id, date_param)
    return [s for s in slots if not s.is_reserved]
