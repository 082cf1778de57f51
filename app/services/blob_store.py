import logging
import re
from typing import Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import settings
from app.core.errors import BlobStoreError

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def sanitize_filename(name: str) -> str:
    cleaned = _UNSAFE_CHARS.sub("_", name.strip()).strip("._")
    return cleaned or "file"


def profile_image_key(provider_id: int, timestamp_ms: int) -> str:
    return f"providers/{provider_id}/profile_{timestamp_ms}"


def certificate_key(provider_id: int, timestamp_ms: int, index: int, filename: str) -> str:
    return f"providers/{provider_id}/certificates/{timestamp_ms}_{index}_{sanitize_filename(filename)}"


class BlobStore(Protocol):
    def upload(self, key: str, data: bytes, content_type: str | None = None) -> None:
        ...

    def public_url(self, key: str) -> str:
        ...

    def delete(self, key: str) -> None:
        ...


class S3BlobStore:
    """S3-compatible object storage (AWS S3, Cloudflare R2, MinIO)."""

    def __init__(self, bucket: str, public_base_url: str, client=None) -> None:
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")
        self.client = client or boto3.client(
            "s3",
            endpoint_url=settings.storage_endpoint_url or None,
            aws_access_key_id=settings.storage_access_key_id or None,
            aws_secret_access_key=settings.storage_secret_access_key or None,
            config=Config(signature_version="s3v4"),
        )

    def upload(self, key: str, data: bytes, content_type: str | None = None) -> None:
        extra = {"ContentType": content_type} if content_type else {}
        try:
            self.client.put_object(Bucket=self.bucket, Key=key, Body=data, **extra)
        except (BotoCoreError, ClientError) as e:
            logger.error("Upload of %s failed: %s", key, e)
            raise BlobStoreError("Upload failed. Please try again.") from e
        logger.info("Uploaded %s (%d bytes)", key, len(data))

    def public_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        return f"https://{self.bucket}.s3.amazonaws.com/{key}"

    def delete(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            logger.error("Delete of %s failed: %s", key, e)
            raise BlobStoreError("Could not delete file.") from e


def get_blob_store() -> BlobStore:
    if not settings.storage_enabled:
        raise BlobStoreError("File uploads are not configured")
    return S3BlobStore(settings.storage_bucket, settings.storage_public_base_url)
