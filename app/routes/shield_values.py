from fastapi import APIRouter

from app.dependencies import get_shield_value_service
from app.routes.crud import register_content_routes
from app.schemas import ShieldValueCreate, ShieldValueResponse, ShieldValueUpdate

router = APIRouter(prefix="/admin/shield-values", tags=["Admin - Shield Values"])

register_content_routes(
    router,
    resource_name="Shield value",
    plural_name="shield values",
    service_dependency=get_shield_value_service,
    create_schema=ShieldValueCreate,
    update_schema=ShieldValueUpdate,
    response_schema=ShieldValueResponse,
)
