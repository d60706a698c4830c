"""
FastAPI dependencies that hand request-scoped services to the routes.
"""
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.container import ServiceContainer
from app.database import get_db
from app.services.content_service import (
    HistoricalImageService,
    HistoryService,
    LeadershipService,
    ShieldValueService,
)
from app.services.gallery_service import GalleryCategoryService, GalleryService
from app.services.shield_service import ShieldService
from app.services.site_config_service import SiteConfigService
from app.services.user_service import UserService


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def _content_service(service_cls):
    def provider(
        db: AsyncSession = Depends(get_db),
        container: ServiceContainer = Depends(get_container),
    ):
        return service_cls(db, container.image_uploader)

    provider.__name__ = f"get_{service_cls.__name__}"
    return provider


get_leadership_service = _content_service(LeadershipService)
get_history_service = _content_service(HistoryService)
get_historical_image_service = _content_service(HistoricalImageService)
get_shield_value_service = _content_service(ShieldValueService)
get_shield_service = _content_service(ShieldService)
get_gallery_service = _content_service(GalleryService)
get_gallery_category_service = _content_service(GalleryCategoryService)
get_site_config_service = _content_service(SiteConfigService)


def get_user_service(
    db: AsyncSession = Depends(get_db),
    container: ServiceContainer = Depends(get_container),
) -> UserService:
    return UserService(db, container.email)
