from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_session
from app.models.booking import (
    BoardingBooking,
    BoardingBookingCreate,
    BookingReceipt,
    PetTransportation,
    PetTransportationCreate,
)
from app.services.booking_triggers import on_boarding_booking_created, on_pet_transportation_created

router = APIRouter(tags=["bookings"])


async def _insert(session: AsyncSession, row: BoardingBooking | PetTransportation) -> BookingReceipt:
    session.add(row)
    # Commit before the create trigger runs; it reads the row in its own session.
    await session.commit()
    await session.refresh(row)
    return BookingReceipt(id=row.id, created_at=row.created_at)


@router.post("/boarding-bookings", response_model=BookingReceipt, status_code=status.HTTP_201_CREATED)
async def create_boarding_booking(
    body: BoardingBookingCreate,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session),
) -> BookingReceipt:
    receipt = await _insert(session, BoardingBooking.model_validate(body))
    background_tasks.add_task(on_boarding_booking_created, receipt.id)
    return receipt


@router.post("/pet-transportation", response_model=BookingReceipt, status_code=status.HTTP_201_CREATED)
async def create_pet_transportation(
    body: PetTransportationCreate,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session),
) -> BookingReceipt:
    receipt = await _insert(session, PetTransportation.model_validate(body))
    background_tasks.add_task(on_pet_transportation_created, receipt.id)
    return receipt
