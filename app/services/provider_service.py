import asyncio
import logging
import time
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import BlobStoreError, NotFoundError, ValidationError
from app.core.security import create_access_token, hash_password, verify_password
from app.models.provider import CurrentProvider, Provider, ProviderPublic, ProviderUpdate
from app.services.blob_store import BlobStore, certificate_key, profile_image_key

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


@dataclass(frozen=True)
class UploadedFile:
    filename: str
    content_type: str | None
    data: bytes


def _now_ms() -> int:
    return int(time.time() * 1000)


async def get_provider_by_username(session: AsyncSession, username: str) -> Provider | None:
    result = await session.execute(select(Provider).where(Provider.username == username))
    return result.scalar_one_or_none()


async def get_provider(session: AsyncSession, provider_id: int) -> Provider:
    provider = await session.get(Provider, provider_id)
    if provider is None:
        raise NotFoundError("Doctor profile not found")
    return provider


async def create_provider(
    session: AsyncSession, username: str, password: str, name: str, email: str | None = None
) -> Provider:
    provider = Provider(
        username=username,
        hashed_password=hash_password(password),
        name=name,
        email=email,
    )
    session.add(provider)
    await session.flush()
    await session.refresh(provider)
    return provider


def to_current_provider(provider: Provider) -> CurrentProvider:
    return CurrentProvider(id=provider.id, username=provider.username, name=provider.name)


def provider_to_public(provider: Provider) -> ProviderPublic:
    return ProviderPublic.model_validate(provider)


async def login_provider(session: AsyncSession, username: str, password: str) -> tuple[Provider, str] | None:
    provider = await get_provider_by_username(session, username)
    if not provider or not verify_password(password, provider.hashed_password):
        return None
    return provider, create_access_token(provider.id)


async def update_profile(session: AsyncSession, provider_id: int, data: ProviderUpdate) -> Provider:
    """Merge-update: only fields present in the request are written."""
    provider = await get_provider(session, provider_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        if field == "name" and not value:
            continue
        if field == "working_days" and value is not None:
            value = {**provider.working_days, **value}
        setattr(provider, field, value)
    session.add(provider)
    await session.flush()
    await session.refresh(provider)
    return provider


async def change_password(
    session: AsyncSession, provider_id: int, current_password: str, new_password: str
) -> None:
    provider = await get_provider(session, provider_id)
    if not verify_password(current_password, provider.hashed_password):
        raise ValidationError("Current password is incorrect")
    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"New password must be at least {MIN_PASSWORD_LENGTH} characters")
    provider.hashed_password = hash_password(new_password)
    session.add(provider)
    await session.flush()


async def upload_profile_image(
    session: AsyncSession, blob_store: BlobStore, provider_id: int, file: UploadedFile
) -> tuple[Provider, str | None]:
    """Upload a new profile image and point the provider at it.

    Returns the provider and the key of the image it replaced. The old object is
    left in place; remove it with discard_blob once the row change is committed.
    """
    provider = await get_provider(session, provider_id)
    key = profile_image_key(provider_id, _now_ms())
    await asyncio.to_thread(blob_store.upload, key, file.data, file.content_type)
    previous_key = provider.profile_image_key
    provider.profile_image_key = key
    provider.profile_image_url = blob_store.public_url(key)
    session.add(provider)
    await session.flush()
    await session.refresh(provider)
    if previous_key == key:
        previous_key = None
    return provider, previous_key


def discard_blob(blob_store: BlobStore, key: str) -> None:
    """Best-effort removal of a superseded object (call from background task)."""
    try:
        blob_store.delete(key)
    except BlobStoreError:
        logger.warning("Old file %s could not be removed", key)


async def add_certificates(
    session: AsyncSession, blob_store: BlobStore, provider_id: int, files: list[UploadedFile]
) -> Provider:
    provider = await get_provider(session, provider_id)
    timestamp = _now_ms()
    added: list[dict[str, str]] = []
    for index, file in enumerate(files):
        key = certificate_key(provider_id, timestamp, index, file.filename)
        await asyncio.to_thread(blob_store.upload, key, file.data, file.content_type)
        added.append({"key": key, "url": blob_store.public_url(key), "name": file.filename})
    provider.certificates = [*provider.certificates, *added]
    session.add(provider)
    await session.flush()
    await session.refresh(provider)
    return provider


async def remove_certificate(
    session: AsyncSession, blob_store: BlobStore, provider_id: int, key: str
) -> Provider:
    provider = await get_provider(session, provider_id)
    if not any(c.get("key") == key for c in provider.certificates):
        raise NotFoundError("Certificate not found")
    await asyncio.to_thread(blob_store.delete, key)
    provider.certificates = [c for c in provider.certificates if c.get("key") != key]
    session.add(provider)
    await session.flush()
    await session.refresh(provider)
    return provider
