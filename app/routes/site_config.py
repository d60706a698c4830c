"""
Site configuration routes (singleton resource).
"""
import logging

from fastapi import APIRouter, Depends, HTTPException

from app.dependencies import get_site_config_service
from app.exceptions import ContentError
from app.routes.crud import admin_only, fail
from app.schemas import SiteConfigResponse, SiteConfigUpdate
from app.services.site_config_service import SiteConfigService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/site-config", tags=["Admin - Site Config"])


@router.get("", response_model=SiteConfigResponse)
async def get_site_config(service: SiteConfigService = Depends(get_site_config_service)):
    """Current configuration, or the built-in defaults if it was never saved."""
    try:
        config = await service.get_config()
        return SiteConfigResponse.model_validate(config)
    except Exception as e:
        await fail(service, "fetch site configuration", e)


@router.put("", response_model=SiteConfigResponse, dependencies=admin_only)
async def update_site_config(
    payload: SiteConfigUpdate,
    service: SiteConfigService = Depends(get_site_config_service),
):
    """
    Partially update the configuration.
    Logo, favicon and leadership image URLs must point at the configured bucket;
    replaced objects are deleted after the change is saved.
    """
    try:
        config = await service.update_config(payload.model_dump(exclude_unset=True))
        return SiteConfigResponse.model_validate(config)
    except (HTTPException, ContentError):
        raise
    except Exception as e:
        await fail(service, "update site configuration", e)
