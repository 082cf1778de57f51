from fastapi import APIRouter, BackgroundTasks, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_provider, get_session
from app.api.schemas.auth import PasswordChangeRequest
from app.core.errors import BlobStoreError
from app.models.provider import CurrentProvider, ProviderPublic, ProviderUpdate
from app.services.blob_store import BlobStore, get_blob_store
from app.services.provider_service import (
    UploadedFile,
    add_certificates,
    change_password,
    discard_blob,
    get_provider,
    provider_to_public,
    remove_certificate,
    update_profile,
    upload_profile_image,
)

router = APIRouter(prefix="/providers", tags=["providers"])

ALLOWED_IMAGE_TYPES = {"image/png", "image/jpeg", "image/jpg", "image/webp", "image/gif"}
ALLOWED_CERTIFICATE_TYPES = ALLOWED_IMAGE_TYPES | {"application/pdf"}
MAX_UPLOAD_BYTES = 5 * 1024 * 1024


def blob_store_dep() -> BlobStore:
    try:
        return get_blob_store()
    except BlobStoreError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message) from e


async def _read_upload(file: UploadFile, allowed: set[str]) -> UploadedFile:
    if file.content_type not in allowed:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid file type {file.content_type!r}",
        )
    data = await file.read()
    if len(data) > MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="File is larger than 5 MB",
        )
    return UploadedFile(filename=file.filename or "file", content_type=file.content_type, data=data)


@router.get("/me", response_model=ProviderPublic)
async def my_profile(
    session: AsyncSession = Depends(get_session),
    provider: CurrentProvider = Depends(get_current_provider),
) -> ProviderPublic:
    return provider_to_public(await get_provider(session, provider.id))


@router.patch("/me", response_model=ProviderPublic)
async def update_my_profile(
    body: ProviderUpdate,
    session: AsyncSession = Depends(get_session),
    provider: CurrentProvider = Depends(get_current_provider),
) -> ProviderPublic:
    return provider_to_public(await update_profile(session, provider.id, body))


@router.post("/me/password", status_code=status.HTTP_204_NO_CONTENT)
async def update_my_password(
    body: PasswordChangeRequest,
    session: AsyncSession = Depends(get_session),
    provider: CurrentProvider = Depends(get_current_provider),
) -> None:
    await change_password(session, provider.id, body.current_password, body.new_password)


@router.post("/me/profile-image", response_model=ProviderPublic)
async def upload_my_profile_image(
    background_tasks: BackgroundTasks,
    file: UploadFile = File(...),
    session: AsyncSession = Depends(get_session),
    provider: CurrentProvider = Depends(get_current_provider),
    blob_store: BlobStore = Depends(blob_store_dep),
) -> ProviderPublic:
    upload = await _read_upload(file, ALLOWED_IMAGE_TYPES)
    updated, previous_key = await upload_profile_image(session, blob_store, provider.id, upload)
    # The old image is removed only once the new key is committed.
    await session.commit()
    if previous_key:
        background_tasks.add_task(discard_blob, blob_store, previous_key)
    return provider_to_public(updated)


@router.post("/me/certificates", response_model=ProviderPublic)
async def upload_my_certificates(
    files: list[UploadFile] = File(...),
    session: AsyncSession = Depends(get_session),
    provider: CurrentProvider = Depends(get_current_provider),
    blob_store: BlobStore = Depends(blob_store_dep),
) -> ProviderPublic:
    uploads = [await _read_upload(f, ALLOWED_CERTIFICATE_TYPES) for f in files]
    return provider_to_public(await add_certificates(session, blob_store, provider.id, uploads))


@router.delete("/me/certificates", response_model=ProviderPublic)
async def delete_my_certificate(
    key: str = Query(...),
    session: AsyncSession = Depends(get_session),
    provider: CurrentProvider = Depends(get_current_provider),
    blob_store: BlobStore = Depends(blob_store_dep),
) -> ProviderPublic:
    return provider_to_public(await remove_certificate(session, blob_store, provider.id, key))
