from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import JSON
from sqlmodel import Field, SQLModel

from app.core.clock import utc_naive_now

DEFAULT_WORKING_DAYS = {
    "monday": True,
    "tuesday": True,
    "wednesday": True,
    "thursday": True,
    "friday": True,
    "saturday": False,
    "sunday": False,
}


def _default_working_days() -> dict[str, bool]:
    return dict(DEFAULT_WORKING_DAYS)


@dataclass(frozen=True)
class CurrentProvider:
    """The signed-in provider, resolved once per request and passed explicitly."""

    id: int
    username: str
    name: str


class ProviderBase(SQLModel):
    name: str
    email: str | None = None
    phone: str | None = None
    specialization: str | None = None
    experience: str | None = None
    qualifications: str | None = None
    about: str | None = None
    consultation_fee: str | None = None


class Provider(ProviderBase, table=True):
    __tablename__ = "providers"
    id: int | None = Field(default=None, primary_key=True)
    username: str = Field(unique=True, index=True)
    hashed_password: str
    working_days: dict[str, bool] = Field(default_factory=_default_working_days, sa_type=JSON)
    profile_image_url: str | None = None
    profile_image_key: str | None = None
    # [{"key": ..., "url": ..., "name": ...}]
    certificates: list[dict[str, str]] = Field(default_factory=list, sa_type=JSON)
    created_at: datetime = Field(default_factory=utc_naive_now)


class ProviderUpdate(SQLModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    specialization: str | None = None
    experience: str | None = None
    qualifications: str | None = None
    about: str | None = None
    consultation_fee: str | None = None
    working_days: dict[str, bool] | None = None


class ProviderPublic(ProviderBase):
    id: int
    username: str
    working_days: dict[str, bool]
    profile_image_url: str | None = None
    certificates: list[dict[str, str]] = []
