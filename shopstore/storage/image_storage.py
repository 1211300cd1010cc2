"""
Blob storage for product images.

The catalog only needs ``upload(bytes, name) -> url``. The Supabase
implementation stores images under a configurable prefix in a storage
bucket and returns the object's public URL.
"""

import asyncio
import re
import uuid
from abc import ABC, abstractmethod

from supabase import Client as SupabaseClient

from ..config import settings
from ..domain.exceptions import UploadError
from ..logging_config import get_logger

logger = get_logger(__name__)

UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class ImageStorage(ABC):
    """Abstract base class for image blob storage."""

    @abstractmethod
    async def upload(
        self, data: bytes, name: str, content_type: str = "application/octet-stream"
    ) -> str:
        """
        Store an image.

        Args:
            data: File content
            name: Original file name
            content_type: Media type of the content

        Returns:
            URL of the stored image

        Raises:
            UploadError: If the upload fails
        """
        pass


def build_object_path(prefix: str, name: str) -> str:
    """
    Build a collision-free storage path for an upload.

    Args:
        prefix: Folder inside the bucket
        name: Original file name

    Returns:
        ``<prefix>/<random>-<sanitized name>``
    """
    safe_name = UNSAFE_NAME_CHARS.sub("-", name).strip("-") or "image"
    return f"{prefix.strip('/')}/{uuid.uuid4().hex}-{safe_name}"


class SupabaseImageStorage(ImageStorage):
    """Image storage backed by a Supabase Storage bucket."""

    def __init__(
        self,
        client: SupabaseClient,
        bucket: str = settings.PRODUCT_IMAGE_BUCKET,
        prefix: str = settings.PRODUCT_IMAGE_PREFIX,
    ):
        """
        Initialize the storage adapter.

        Args:
            client: Supabase client
            bucket: Bucket name
            prefix: Folder for product images
        """
        self.client = client
        self.bucket = bucket
        self.prefix = prefix

    async def upload(
        self, data: bytes, name: str, content_type: str = "application/octet-stream"
    ) -> str:
        path = build_object_path(self.prefix, name)
        bucket = self.client.storage.from_(self.bucket)

        try:
            await asyncio.to_thread(
                bucket.upload,
                path,
                data,
                {"content-type": content_type},
            )
            url = await asyncio.to_thread(bucket.get_public_url, path)
        except Exception as e:
            logger.error("image_upload_failed", path=path, error=str(e))
            raise UploadError(name, str(e)) from e

        logger.info("image_uploaded", path=path, size=len(data))
        return url
