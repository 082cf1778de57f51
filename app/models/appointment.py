from datetime import datetime
from enum import Enum

from pydantic import EmailStr
from sqlalchemy import String
from sqlmodel import Field, SQLModel

from app.core.clock import utc_naive_now


class AppointmentStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class AppointmentFilter(str, Enum):
    UPCOMING = "upcoming"
    TODAY = "today"
    PAST = "past"
    ALL = "all"


class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    id: int | None = Field(default=None, primary_key=True)
    provider_id: int = Field(foreign_key="providers.id", index=True)
    provider_name: str
    slot_id: int | None = Field(default=None, foreign_key="slots.id", index=True)
    appointment_date: datetime = Field(index=True)
    start_time: str = Field(max_length=5)
    end_time: str = Field(max_length=5)
    client_name: str
    client_email: str | None = None
    client_phone: str | None = None
    pet_name: str | None = None
    pet_type: str | None = None
    status: str = Field(default=AppointmentStatus.PENDING.value, sa_type=String, index=True)
    notes: str | None = None
    created_at: datetime = Field(default_factory=utc_naive_now)
    updated_at: datetime = Field(default_factory=utc_naive_now)


class AppointmentPublic(SQLModel):
    id: int
    provider_id: int
    provider_name: str
    slot_id: int | None = None
    appointment_date: datetime
    start_time: str
    end_time: str
    client_name: str
    client_email: str | None = None
    client_phone: str | None = None
    pet_name: str | None = None
    pet_type: str | None = None
    status: AppointmentStatus
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class AppointmentBooking(SQLModel):
    slot_id: int
    client_name: str
    client_email: EmailStr | None = None
    client_phone: str | None = None
    pet_name: str | None = None
    pet_type: str | None = None
    notes: str | None = None
