"""
Shield service.
Keeps at most one main shield: the flag is cleared on every other row in
the same transaction that sets it, and the partial unique index on
shields.is_main_shield rejects a concurrent writer with a conflict.
"""
import logging
from typing import Any, Dict, Optional

from app.models import Shield
from app.repositories.shields import ShieldRepository
from app.services.content_service import OrderableContentService
from app.services.image_upload_service import ImageUploadService

logger = logging.getLogger(__name__)


class ShieldService(OrderableContentService):
    resource_name = "Shield"
    upload_folder = "shields"
    image_fields = {"image_url": "image_s3_key"}

    repository: ShieldRepository

    def __init__(self, session, uploader: ImageUploadService):
        super().__init__(ShieldRepository(session), uploader)

    async def _create(self, data: Dict[str, Any]) -> Shield:
        if data.get("is_main_shield"):
            await self.repository.clear_main()
            logger.info("Cleared previous main shield before creating a new one")
        return await self.repository.create(data)

    async def _update(self, obj: Shield, data: Dict[str, Any]) -> Shield:
        if data.get("is_main_shield") is True:
            await self.repository.clear_main(except_id=obj.id)
            logger.info(f"Cleared previous main shield before promoting {obj.id}")
        return await self.repository.update(obj, data)

    async def get_main(self) -> Optional[Shield]:
        return await self.repository.get_main()

    async def set_main(self, shield_id: str) -> Optional[Shield]:
        shield = await self.repository.get(shield_id)
        if shield is None:
            return None

        shield = await self._update(shield, {"is_main_shield": True})
        await self.session.commit()
        logger.info(f"Shield {shield_id} is now the main shield")
        return shield
