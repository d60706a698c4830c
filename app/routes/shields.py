"""
Shield (escudo) routes.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException

from app.dependencies import get_shield_service
from app.exceptions import ContentError, NotFoundError
from app.routes.crud import admin_only, fail, register_content_routes
from app.schemas import ShieldCreate, ShieldResponse, ShieldUpdate
from app.services.shield_service import ShieldService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/shields", tags=["Admin - Shields"])


@router.get("/main", response_model=ShieldResponse)
async def get_main_shield(service: ShieldService = Depends(get_shield_service)):
    """Return the shield flagged as main, or 404 when none is."""
    try:
        shield = await service.get_main()
    except Exception as e:
        await fail(service, "fetch main shield", e)
    if shield is None:
        raise NotFoundError("Main shield")
    return ShieldResponse.model_validate(shield)


@router.put("/{entity_id}/set-main", response_model=ShieldResponse, dependencies=admin_only)
async def set_main_shield(entity_id: str, service: ShieldService = Depends(get_shield_service)):
    """Make this shield the main one; the previous main shield is unflagged in the same transaction."""
    try:
        shield = await service.set_main(entity_id)
    except (HTTPException, ContentError):
        raise
    except Exception as e:
        await fail(service, "set main shield", e)
    if shield is None:
        raise NotFoundError("Shield", entity_id)
    return ShieldResponse.model_validate(shield)


register_content_routes(
    router,
    resource_name="Shield",
    plural_name="shields",
    service_dependency=get_shield_service,
    create_schema=ShieldCreate,
    update_schema=ShieldUpdate,
    response_schema=ShieldResponse,
    json_create_paths=["", "/with-url"],
    json_update_paths=["/{entity_id}", "/{entity_id}/with-url"],
    image_upload=True,
)
