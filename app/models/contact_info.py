from datetime import datetime

from sqlmodel import Field, SQLModel

from app.core.clock import utc_naive_now

CONTACT_INFO_ID = "main"


class ContactInfoBase(SQLModel):
    email: str = ""
    phone: str = ""
    address: str = ""
    state: str = ""
    country: str = ""


class ContactInfo(ContactInfoBase, table=True):
    __tablename__ = "contact_info"
    id: str = Field(default=CONTACT_INFO_ID, primary_key=True)
    last_updated: datetime = Field(default_factory=utc_naive_now)


class ContactInfoUpdate(ContactInfoBase):
    pass


class ContactInfoPublic(ContactInfoBase):
    last_updated: datetime | None = None
