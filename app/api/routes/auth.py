import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.schemas.auth import AccessToken, LoginRequest
from app.core.config import settings
from app.core.db import get_session
from app.services.provider_service import login_provider, provider_to_public

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=AccessToken)
async def login(
    body: LoginRequest,
    session: AsyncSession = Depends(get_session),
) -> AccessToken:
    result = await login_provider(session, body.username, body.password)
    if not result:
        logger.info("Failed login for %s", body.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )
    provider, access = result
    return AccessToken(
        access_token=access,
        expires_in=settings.access_token_expire_minutes * 60,
        provider=provider_to_public(provider),
    )
