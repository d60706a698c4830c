"""
Leadership period (jefatura) routes.
"""
from fastapi import APIRouter

from app.dependencies import get_leadership_service
from app.routes.crud import register_content_routes
from app.schemas import LeadershipPeriodCreate, LeadershipPeriodResponse, LeadershipPeriodUpdate

router = APIRouter(prefix="/admin/leadership", tags=["Admin - Leadership"])

register_content_routes(
    router,
    resource_name="Leadership period",
    plural_name="leadership periods",
    service_dependency=get_leadership_service,
    create_schema=LeadershipPeriodCreate,
    update_schema=LeadershipPeriodUpdate,
    response_schema=LeadershipPeriodResponse,
    json_create_paths=["", "/with-url"],
    json_update_paths=["/{entity_id}", "/{entity_id}/with-url"],
    image_upload=True,
)
