"""
Service layer for orderable content resources.

Every content table (leadership periods, shields, shield values, gallery
categories and items, historical milestones and images) shares the same
list/get/create/update/delete/reorder behavior. Image-bearing tables also
keep a storage key next to each public URL; the key is derived here, never
taken from the client, and old objects are deleted only after the database
commit succeeds.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from app.exceptions import UntrustedUrlError
from app.models import HistoricalImage, HistoricalMilestone, LeadershipPeriod, ShieldValue
from app.repositories.base import OrderableRepository
from app.services.image_upload_service import ImageUploadService

logger = logging.getLogger(__name__)


class ImageLifecycle:
    """
    URL -> key bookkeeping shared by content services and site configuration.
    Subclasses list their (url_field, key_field) pairs in image_fields.
    """

    image_fields: Dict[str, str] = {}

    def __init__(self, uploader: ImageUploadService):
        self.uploader = uploader
        self.storage = uploader.storage

    def derive_key(self, url: str) -> str:
        """
        Raises:
            UntrustedUrlError: If the URL does not point at the configured bucket
        """
        parts = self.storage.parse_trusted_url(url)
        if parts is None:
            logger.warning(f"Rejected untrusted image URL: {url}")
            raise UntrustedUrlError(url)
        return parts.key

    def resolve_new_images(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Validate every image URL of a new row and attach the derived keys."""
        for url_field, key_field in self.image_fields.items():
            url = data.get(url_field)
            if url:
                data[key_field] = self.derive_key(url)
            else:
                data[url_field] = None
                data[key_field] = None
        return data

    def resolve_changed_images(self, current: Any, data: Dict[str, Any]) -> Tuple[Dict[str, Any], List[str]]:
        """
        Apply image URL changes of a partial update.

        A URL equal to the stored one is a no-op, an empty string clears the
        image, anything else must validate.

        Returns:
            (data to write, keys to delete after commit)
        """
        stale_keys: List[str] = []
        for url_field, key_field in self.image_fields.items():
            if url_field not in data:
                continue

            url = data[url_field]
            current_url = getattr(current, url_field, None) if current is not None else None
            current_key = getattr(current, key_field, None) if current is not None else None

            if url == current_url:
                data.pop(url_field)
                continue

            if not url:
                data[url_field] = None
                data[key_field] = None
                if current_key:
                    stale_keys.append(current_key)
                continue

            new_key = self.derive_key(url)
            data[key_field] = new_key
            if current_key and current_key != new_key:
                stale_keys.append(current_key)

        return data, stale_keys

    def stored_keys(self, obj: Any) -> List[str]:
        keys = []
        for key_field in self.image_fields.values():
            key = getattr(obj, key_field, None)
            if key:
                keys.append(key)
        return keys

    async def delete_keys(self, keys: Iterable[Optional[str]]) -> None:
        """Best-effort removal of stored objects; failures are only logged."""
        for key in keys:
            if key:
                await self.uploader.delete_image(key)


class OrderableContentService(ImageLifecycle):
    """CRUD and ordering for one content table."""

    resource_name = "Item"
    upload_folder = "uploads"

    def __init__(self, repository: OrderableRepository, uploader: ImageUploadService):
        super().__init__(uploader)
        self.repository = repository
        self.session = repository.session

    async def list(self) -> List[Any]:
        return await self.repository.list()

    async def get(self, entity_id: str) -> Optional[Any]:
        return await self.repository.get(entity_id)

    async def _create(self, data: Dict[str, Any]) -> Any:
        return await self.repository.create(data)

    async def _update(self, obj: Any, data: Dict[str, Any]) -> Any:
        return await self.repository.update(obj, data)

    async def create(self, data: Dict[str, Any]) -> Any:
        data = self.resolve_new_images(dict(data))
        obj = await self._create(data)
        await self.session.commit()
        logger.info(f"Created {self.resource_name} {obj.id} (display_order={obj.display_order})")
        return obj

    async def update(self, entity_id: str, data: Dict[str, Any]) -> Optional[Any]:
        obj = await self.repository.get(entity_id)
        if obj is None:
            return None

        data, stale_keys = self.resolve_changed_images(obj, dict(data))
        obj = await self._update(obj, data)
        await self.session.commit()
        logger.info(f"Updated {self.resource_name} {entity_id}")

        await self.delete_keys(stale_keys)
        return obj

    async def delete(self, entity_id: str) -> bool:
        obj = await self.repository.get(entity_id)
        if obj is None:
            return False

        keys = self.stored_keys(obj)
        await self.repository.delete(obj)
        await self.session.commit()
        logger.info(f"Deleted {self.resource_name} {entity_id}")

        await self.delete_keys(keys)
        return True

    async def reorder(self, items: List[Any]) -> int:
        updated = await self.repository.reorder(items)
        await self.session.commit()
        logger.info(f"Reordered {updated} of {len(items)} {self.resource_name} rows")
        return updated

    async def attach_image(self, entity_id: str, data: bytes, filename: Optional[str]) -> Optional[Any]:
        """Store an uploaded file and make it the row's image."""
        obj = await self.repository.get(entity_id)
        if obj is None:
            return None

        uploaded = await self.uploader.upload_image(data, filename, folder=self.upload_folder)
        old_key = obj.image_s3_key
        try:
            obj = await self._update(obj, {"image_url": uploaded.original_url, "image_s3_key": uploaded.original_key})
            await self.session.commit()
        except Exception:
            await self.uploader.delete_image(uploaded.original_key)
            raise

        if old_key and old_key != uploaded.original_key:
            await self.uploader.delete_image(old_key)
        return obj


class LeadershipService(OrderableContentService):
    resource_name = "Leadership period"
    upload_folder = "leadership"
    image_fields = {"image_url": "image_s3_key"}

    def __init__(self, session, uploader: ImageUploadService):
        super().__init__(OrderableRepository(session, LeadershipPeriod), uploader)


class HistoryService(OrderableContentService):
    resource_name = "Historical milestone"

    def __init__(self, session, uploader: ImageUploadService):
        super().__init__(OrderableRepository(session, HistoricalMilestone), uploader)


class HistoricalImageService(OrderableContentService):
    resource_name = "Historical image"
    upload_folder = "historical-images"
    image_fields = {"image_url": "image_s3_key"}

    def __init__(self, session, uploader: ImageUploadService):
        super().__init__(OrderableRepository(session, HistoricalImage), uploader)


class ShieldValueService(OrderableContentService):
    resource_name = "Shield value"

    def __init__(self, session, uploader: ImageUploadService):
        super().__init__(OrderableRepository(session, ShieldValue), uploader)
