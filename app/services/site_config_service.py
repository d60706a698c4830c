"""
Site configuration service.
There is one configuration row; until it is first saved, reads return the
built-in defaults.
"""
import logging
from typing import Any, Dict

from app.models import SITE_CONFIG_DEFAULTS, SiteConfig
from app.repositories.site_config import SiteConfigRepository
from app.services.content_service import ImageLifecycle
from app.services.image_upload_service import ImageUploadService

logger = logging.getLogger(__name__)


class SiteConfigService(ImageLifecycle):
    image_fields = {
        "logo_url": "logo_s3_key",
        "favicon_url": "favicon_s3_key",
        "leadership_image_url": "leadership_image_s3_key",
    }

    def __init__(self, session, uploader: ImageUploadService):
        super().__init__(uploader)
        self.session = session
        self.repository = SiteConfigRepository(session)

    @staticmethod
    def defaults() -> Dict[str, Any]:
        config = dict(SITE_CONFIG_DEFAULTS)
        config["admission_requirements"] = list(config["admission_requirements"])
        config.update({"id": None, "updated_at": None})
        return config

    async def get_config(self) -> Any:
        config = await self.repository.get_config()
        return config if config is not None else self.defaults()

    async def update_config(self, data: Dict[str, Any]) -> SiteConfig:
        """Partially update the configuration, creating the row on first save."""
        existing = await self.repository.get_config()
        data, stale_keys = self.resolve_changed_images(existing, dict(data))

        if existing is None:
            config = await self.repository.create_config(data)
            logger.info("Created site configuration")
        else:
            config = await self.repository.update_config(existing, data)
            logger.info(f"Updated site configuration fields: {sorted(data)}")

        await self.session.commit()
        await self.delete_keys(stale_keys)
        return config
