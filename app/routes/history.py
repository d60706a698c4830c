"""
Historical milestone and historical image routes.
"""
from fastapi import APIRouter

from app.dependencies import get_historical_image_service, get_history_service
from app.routes.crud import register_content_routes
from app.schemas import (
    HistoricalImageCreate,
    HistoricalImageResponse,
    HistoricalImageUpdate,
    HistoricalMilestoneCreate,
    HistoricalMilestoneResponse,
    HistoricalMilestoneUpdate,
)

router = APIRouter(prefix="/admin/history", tags=["Admin - History"])

register_content_routes(
    router,
    resource_name="Historical milestone",
    plural_name="historical milestones",
    service_dependency=get_history_service,
    create_schema=HistoricalMilestoneCreate,
    update_schema=HistoricalMilestoneUpdate,
    response_schema=HistoricalMilestoneResponse,
)

images_router = APIRouter(prefix="/admin/historical-images", tags=["Admin - Historical Images"])

register_content_routes(
    images_router,
    resource_name="Historical image",
    plural_name="historical images",
    service_dependency=get_historical_image_service,
    create_schema=HistoricalImageCreate,
    update_schema=HistoricalImageUpdate,
    response_schema=HistoricalImageResponse,
    json_create_paths=["", "/with-url"],
    json_update_paths=["/{entity_id}", "/{entity_id}/with-url"],
    image_upload=True,
)
