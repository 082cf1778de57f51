from datetime import datetime

from pydantic import EmailStr
from sqlmodel import AutoString, Field, SQLModel

from app.core.clock import utc_naive_now


class CustomerFields(SQLModel):
    customer_name: str
    customer_email: EmailStr = Field(sa_type=AutoString)
    customer_phone: str | None = None
    pet_name: str
    pet_type: str | None = None
    pet_size: str | None = None
    notes: str | None = None


class BoardingBookingCreate(CustomerFields):
    center_name: str
    center_address: str | None = None
    check_in_date: datetime
    check_out_date: datetime


class BoardingBooking(BoardingBookingCreate, table=True):
    __tablename__ = "boarding_bookings"
    id: int | None = Field(default=None, primary_key=True)
    email_sent: bool = False
    email_sent_at: datetime | None = None
    created_at: datetime = Field(default_factory=utc_naive_now)


class PetTransportationCreate(CustomerFields):
    pickup_address: str
    dropoff_address: str
    pickup_date: datetime
    transport_type: str | None = None


class PetTransportation(PetTransportationCreate, table=True):
    __tablename__ = "pet_transportation"
    id: int | None = Field(default=None, primary_key=True)
    email_sent: bool = False
    email_sent_at: datetime | None = None
    created_at: datetime = Field(default_factory=utc_naive_now)


class BookingReceipt(SQLModel):
    id: int
    created_at: datetime
