"""
Gallery services: photo items with thumbnails, and the categories that
group them.
"""
import logging
import re
import unicodedata
from typing import Any, Dict, List, Optional, Tuple

from app.exceptions import ConflictError, ValidationFailure
from app.models import GalleryCategory, GalleryItem
from app.repositories.gallery import GalleryCategoryRepository, GalleryItemRepository
from app.services.content_service import OrderableContentService
from app.services.image_upload_service import ImageUploadService, UploadedImage

logger = logging.getLogger(__name__)

GALLERY_FOLDER = "gallery"


def slugify(value: str) -> str:
    """
    Lowercase, strip accents, collapse anything non-alphanumeric to '-'.

    >>> slugify("Desfile del 15 de Septiembre")
    'desfile-del-15-de-septiembre'
    """
    normalized = unicodedata.normalize("NFD", value)
    ascii_only = "".join(ch for ch in normalized if not unicodedata.combining(ch))
    return re.sub(r"[^a-z0-9]+", "-", ascii_only.lower()).strip("-")


class GalleryService(OrderableContentService):
    resource_name = "Gallery item"
    upload_folder = GALLERY_FOLDER
    image_fields = {"image_url": "image_s3_key", "thumbnail_url": "thumbnail_s3_key"}

    repository: GalleryItemRepository

    def __init__(self, session, uploader: ImageUploadService):
        super().__init__(GalleryItemRepository(session), uploader)
        self.categories = GalleryCategoryRepository(session)

    async def _check_category(self, data: Dict[str, Any]) -> None:
        category_id = data.get("category_id")
        if category_id and await self.categories.get(category_id) is None:
            raise ValidationFailure("Category not found", details=f"ID {category_id} does not exist")

    async def _create(self, data: Dict[str, Any]) -> GalleryItem:
        await self._check_category(data)
        return await self.repository.create(data)

    async def _update(self, obj: GalleryItem, data: Dict[str, Any]) -> GalleryItem:
        await self._check_category(data)
        return await self.repository.update(obj, data)

    def resolve_changed_images(self, current: Any, data: Dict[str, Any]) -> Tuple[Dict[str, Any], List[str]]:
        """A new image without a new thumbnail drops the old thumbnail."""
        replaces_image = "image_url" in data and data["image_url"] != current.image_url
        sends_thumbnail = "thumbnail_url" in data

        data, stale_keys = super().resolve_changed_images(current, data)

        if replaces_image and not sends_thumbnail and current.thumbnail_url:
            data["thumbnail_url"] = None
            data["thumbnail_s3_key"] = None
            if current.thumbnail_s3_key:
                stale_keys.append(current.thumbnail_s3_key)
        return data, stale_keys

    async def list_by_category(self, category_id: str) -> List[GalleryItem]:
        return await self.repository.list_by_category(category_id)

    async def list_uncategorized(self) -> List[GalleryItem]:
        return await self.repository.list_uncategorized()

    async def _upload(self, image: bytes, filename: Optional[str]) -> UploadedImage:
        return await self.uploader.upload_image(image, filename, folder=GALLERY_FOLDER, with_thumbnail=True)

    async def _discard(self, uploaded: UploadedImage) -> None:
        await self.delete_keys([uploaded.original_key, uploaded.thumbnail_key])

    async def create_with_image(self, data: Dict[str, Any], image: bytes, filename: Optional[str]) -> GalleryItem:
        """Upload the file (original and thumbnail) and create the row."""
        await self._check_category(data)
        uploaded = await self._upload(image, filename)
        data = dict(data)
        data.update({
            "image_url": uploaded.original_url,
            "image_s3_key": uploaded.original_key,
            "thumbnail_url": uploaded.thumbnail_url,
            "thumbnail_s3_key": uploaded.thumbnail_key,
        })
        try:
            item = await self.repository.create(data)
            await self.session.commit()
        except Exception:
            await self._discard(uploaded)
            raise

        logger.info(f"Created gallery item {item.id} with uploaded image {uploaded.original_key}")
        return item

    async def update_with_image(
        self, item_id: str, data: Dict[str, Any], image: bytes, filename: Optional[str]
    ) -> Optional[GalleryItem]:
        """Replace the item's image and apply field changes; old objects go after commit."""
        item = await self.repository.get(item_id)
        if item is None:
            return None

        await self._check_category(data)
        old_keys = self.stored_keys(item)
        uploaded = await self._upload(image, filename)
        data = dict(data)
        data.update({
            "image_url": uploaded.original_url,
            "image_s3_key": uploaded.original_key,
            "thumbnail_url": uploaded.thumbnail_url,
            "thumbnail_s3_key": uploaded.thumbnail_key,
        })
        try:
            item = await self.repository.update(item, data)
            await self.session.commit()
        except Exception:
            await self._discard(uploaded)
            raise

        await self.delete_keys(old_keys)
        return item

    async def attach_image(self, entity_id: str, data: bytes, filename: Optional[str]) -> Optional[GalleryItem]:
        return await self.update_with_image(entity_id, {}, data, filename)


class GalleryCategoryService(OrderableContentService):
    resource_name = "Gallery category"

    repository: GalleryCategoryRepository

    def __init__(self, session, uploader: ImageUploadService):
        super().__init__(GalleryCategoryRepository(session), uploader)
        self.items = GalleryItemRepository(session)

    async def _ensure_unique(self, name: Optional[str], slug: Optional[str], current_id: Optional[str] = None) -> None:
        if name:
            existing = await self.repository.get_by_name(name)
            if existing is not None and existing.id != current_id:
                raise ConflictError("Category name already exists", details=name)
        if slug:
            existing = await self.repository.get_by_slug(slug)
            if existing is not None and existing.id != current_id:
                raise ConflictError("Category slug already exists", details=slug)

    @staticmethod
    def _slug_for(name: str, slug: Optional[str]) -> str:
        result = slugify(slug or name)
        if not result:
            raise ValidationFailure("Cannot derive a slug from the category name", details=name)
        return result

    async def _create(self, data: Dict[str, Any]) -> GalleryCategory:
        data["name"] = data["name"].strip()
        data["slug"] = self._slug_for(data["name"], data.get("slug"))
        await self._ensure_unique(data["name"], data["slug"])
        return await self.repository.create(data)

    async def _update(self, obj: GalleryCategory, data: Dict[str, Any]) -> GalleryCategory:
        if data.get("name"):
            data["name"] = data["name"].strip()
        if data.get("slug"):
            data["slug"] = self._slug_for(data["slug"], None)
        elif data.get("name") and data["name"] != obj.name:
            data["slug"] = self._slug_for(data["name"], None)
        await self._ensure_unique(data.get("name"), data.get("slug"), current_id=obj.id)
        return await self.repository.update(obj, data)

    async def get_by_slug(self, slug: str) -> Optional[GalleryCategory]:
        return await self.repository.get_by_slug(slug)

    async def delete(self, entity_id: str) -> bool:
        """Delete the category and its items, then their stored images."""
        category = await self.repository.get(entity_id)
        if category is None:
            return False

        items = await self.items.list_by_category(entity_id)
        keys = [key for item in items for key in (item.image_s3_key, item.thumbnail_s3_key) if key]

        removed = await self.items.delete_by_category(entity_id)
        await self.repository.delete(category)
        await self.session.commit()
        logger.info(f"Deleted gallery category {entity_id} with {removed} item(s)")

        await self.delete_keys(keys)
        return True
