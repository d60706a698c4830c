"""
Image upload service.
Optimizes uploaded images and writes them to S3 or to a local directory
served under /public.
"""
import logging
import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from app.exceptions import ValidationFailure
from app.services.s3_storage_service import S3StorageService
from app.utils.image_converter import InvalidImageError, create_thumbnail, optimize_image

logger = logging.getLogger(__name__)

LOCAL_URL_PREFIX = "/public"
JPEG_CONTENT_TYPE = "image/jpeg"


@dataclass
class UploadedImage:
    original_url: str
    original_key: str
    filename: str
    thumbnail_url: Optional[str] = None
    thumbnail_key: Optional[str] = None


class ImageUploadService:
    """
    Stores optimized images on the configured backend.

    Keys are bare filenames on the local backend and "{folder}/{filename}"
    on S3, so a key with a slash always refers to an S3 object.
    """

    def __init__(self, backend: str, storage: S3StorageService, local_dir: str = "public"):
        if backend not in ("s3", "local"):
            raise ValueError(f"Unknown storage backend: {backend}")
        self.backend = backend
        self.storage = storage
        self.local_dir = Path(local_dir)
        if backend == "local":
            self.local_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def generate_filename(original_name: Optional[str]) -> str:
        ext = os.path.splitext(original_name or "")[1].lower() or ".jpg"
        return f"{uuid.uuid4()}{ext}"

    async def _write(self, data: bytes, filename: str, folder: str) -> tuple[str, str]:
        if self.backend == "s3":
            key = f"{folder}/{filename}"
            url = await self.storage.upload_bytes(key, data, JPEG_CONTENT_TYPE)
            return url, key

        (self.local_dir / filename).write_bytes(data)
        logger.info(f"Saved image locally: {self.local_dir / filename}")
        return f"{LOCAL_URL_PREFIX}/{filename}", filename

    async def upload_image(
        self,
        data: bytes,
        original_name: Optional[str],
        folder: str = "uploads",
        with_thumbnail: bool = False,
    ) -> UploadedImage:
        """
        Optimize and store an image, optionally with a 300x300 thumbnail.

        Raises:
            ValidationFailure: If the bytes are not a decodable image
        """
        try:
            optimized = await optimize_image(data)
            thumbnail = await create_thumbnail(data) if with_thumbnail else None
        except InvalidImageError as e:
            raise ValidationFailure("Invalid image file", details=str(e))

        filename = self.generate_filename(original_name)
        original_url, original_key = await self._write(optimized, filename, folder)

        uploaded = UploadedImage(original_url=original_url, original_key=original_key, filename=filename)
        if thumbnail is not None:
            uploaded.thumbnail_url, uploaded.thumbnail_key = await self._write(
                thumbnail, f"thumb_{filename}", folder
            )

        logger.info(f"Uploaded image {original_key} via {self.backend} backend")
        return uploaded

    async def delete_image(self, key: Optional[str]) -> bool:
        """
        Best-effort delete by key. Never raises.

        Returns:
            bool: True if the object was deleted
        """
        if not key:
            return False

        try:
            if self.backend == "local" and "/" not in key:
                path = self.local_dir / Path(key).name
                if path.exists():
                    path.unlink()
                    logger.info(f"Deleted local image: {path}")
                return True

            await self.storage.delete_file(key)
            return True

        except Exception as e:
            logger.error(f"Failed to delete stored image {key}: {str(e)}", exc_info=True)
            return False


def create_image_upload_service(settings, storage: S3StorageService) -> ImageUploadService:
    return ImageUploadService(
        backend=settings.STORAGE_BACKEND,
        storage=storage,
        local_dir=settings.LOCAL_UPLOAD_DIR,
    )
