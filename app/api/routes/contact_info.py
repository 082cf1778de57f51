from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_provider, get_session
from app.models.contact_info import ContactInfoPublic, ContactInfoUpdate
from app.models.provider import CurrentProvider
from app.services.contact_info_service import get_contact_info, save_contact_info

router = APIRouter(prefix="/contact-info", tags=["contact-info"])


@router.get("", response_model=ContactInfoPublic)
async def read_contact_info(session: AsyncSession = Depends(get_session)) -> ContactInfoPublic:
    return await get_contact_info(session)


@router.put("", response_model=ContactInfoPublic)
async def update_contact_info(
    body: ContactInfoUpdate,
    session: AsyncSession = Depends(get_session),
    _provider: CurrentProvider = Depends(get_current_provider),
) -> ContactInfoPublic:
    return await save_contact_info(session, body)
