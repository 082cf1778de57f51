from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import utc_naive_now
from app.models.contact_info import CONTACT_INFO_ID, ContactInfo, ContactInfoPublic, ContactInfoUpdate


async def get_contact_info(session: AsyncSession) -> ContactInfoPublic:
    row = await session.get(ContactInfo, CONTACT_INFO_ID)
    if row is None:
        return ContactInfoPublic()
    return ContactInfoPublic.model_validate(row)


async def save_contact_info(session: AsyncSession, data: ContactInfoUpdate) -> ContactInfoPublic:
    row = await session.get(ContactInfo, CONTACT_INFO_ID)
    if row is None:
        row = ContactInfo(id=CONTACT_INFO_ID)
    for field, value in data.model_dump().items():
        setattr(row, field, value)
    row.last_updated = utc_naive_now()
    session.add(row)
    await session.flush()
    await session.refresh(row)
    return ContactInfoPublic.model_validate(row)
