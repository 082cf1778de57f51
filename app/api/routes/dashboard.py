from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.api.deps import get_current_provider
from app.api.schemas.appointment import DashboardResponse
from app.core.db import get_session_factory
from app.models.provider import CurrentProvider
from app.services.dashboard import get_dashboard_stats

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
async def provider_dashboard(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    provider: CurrentProvider = Depends(get_current_provider),
) -> DashboardResponse:
    """Advisory counts; returns zeros rather than an error when the store is unavailable."""
    stats = await get_dashboard_stats(session_factory, provider.id)
    return DashboardResponse(**stats.as_dict())
