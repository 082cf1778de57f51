from datetime import date, datetime

from sqlmodel import Field, SQLModel

from app.core.clock import utc_naive_now

# Zero-padded 24h "HH:MM"; fixed width keeps string order equal to time order.
HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class Slot(SQLModel, table=True):
    __tablename__ = "slots"
    id: int | None = Field(default=None, primary_key=True)
    provider_id: int = Field(foreign_key="providers.id", index=True)
    provider_name: str
    date: datetime = Field(index=True)  # calendar day at 00:00
    start_time: str = Field(max_length=5)
    end_time: str = Field(max_length=5)
    is_reserved: bool = Field(default=False, index=True)
    created_at: datetime = Field(default_factory=utc_naive_now)


class SlotCreate(SQLModel):
    date: date
    start_time: str
    end_time: str


class SlotPublic(SQLModel):
    id: int
    provider_id: int
    provider_name: str
    date: datetime
    start_time: str
    end_time: str
    is_reserved: bool
    created_at: datetime
