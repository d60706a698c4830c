"""
Route factory for orderable content resources.

Each resource module creates its APIRouter, registers its own special
paths first (so /main or /uncategorized win over /{entity_id}) and then
calls register_content_routes for the shared list/get/create/update/
delete/reorder endpoints.
"""
import logging
from typing import Any, Callable, List, Optional, Type

from fastapi import APIRouter, Depends, File, HTTPException, Request, Response, UploadFile, status
from pydantic import BaseModel

from app.exceptions import ContentError, NotFoundError, ValidationFailure
from app.schemas import ReorderRequest, ReorderResponse
from app.utils.jwt_auth import require_admin

logger = logging.getLogger(__name__)

admin_only = [Depends(require_admin)]


async def fail(service: Any, action: str, error: Exception):
    """Log an unexpected error, roll back the request's session and raise a 500."""
    logger.error(f"Error trying to {action}: {str(error)}", exc_info=True)
    await service.session.rollback()
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": f"Failed to {action}", "details": str(error)},
    )


async def read_image_upload(request: Request, file: UploadFile) -> bytes:
    """
    Buffer an uploaded image in memory.

    Raises:
        ValidationFailure: If the file is not an image or exceeds MAX_UPLOAD_BYTES
    """
    max_bytes = request.app.state.container.settings.MAX_UPLOAD_BYTES

    if not file.content_type or not file.content_type.startswith("image/"):
        raise ValidationFailure("Only image files are allowed", details=file.content_type)

    data = await file.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise ValidationFailure(
            "File too large",
            details=f"Maximum upload size is {max_bytes // (1024 * 1024)} MB",
        )
    if not data:
        raise ValidationFailure("Empty file")
    return data


def register_content_routes(
    router: APIRouter,
    *,
    resource_name: str,
    plural_name: str,
    service_dependency: Callable,
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
    response_schema: Type[BaseModel],
    json_create_paths: Optional[List[str]] = None,
    json_update_paths: Optional[List[str]] = None,
    image_upload: bool = False,
) -> APIRouter:
    """
    Add the shared endpoints of an orderable resource to `router`.

    GETs are public; every write requires an admin token.
    """
    json_create_paths = json_create_paths if json_create_paths is not None else [""]
    json_update_paths = json_update_paths if json_update_paths is not None else ["/{entity_id}"]

    async def list_items(service=Depends(service_dependency)):
        try:
            items = await service.list()
            logger.info(f"Retrieved {len(items)} {plural_name}")
            return [response_schema.model_validate(item) for item in items]
        except (HTTPException, ContentError):
            raise
        except Exception as e:
            await fail(service, f"fetch {plural_name}", e)

    async def reorder_items(payload: ReorderRequest, service=Depends(service_dependency)):
        try:
            updated = await service.reorder(payload.items)
            return ReorderResponse(message=f"{plural_name.capitalize()} reordered successfully", updated=updated)
        except (HTTPException, ContentError):
            raise
        except Exception as e:
            await fail(service, f"reorder {plural_name}", e)

    async def get_item(entity_id: str, service=Depends(service_dependency)):
        try:
            item = await service.get(entity_id)
        except Exception as e:
            await fail(service, f"fetch {resource_name.lower()}", e)
        if item is None:
            raise NotFoundError(resource_name, entity_id)
        return response_schema.model_validate(item)

    async def create_item(payload: create_schema, service=Depends(service_dependency)):
        try:
            item = await service.create(payload.model_dump())
            return response_schema.model_validate(item)
        except (HTTPException, ContentError):
            raise
        except Exception as e:
            await fail(service, f"create {resource_name.lower()}", e)

    async def update_item(entity_id: str, payload: update_schema, service=Depends(service_dependency)):
        try:
            item = await service.update(entity_id, payload.model_dump(exclude_unset=True))
        except (HTTPException, ContentError):
            raise
        except Exception as e:
            await fail(service, f"update {resource_name.lower()}", e)
        if item is None:
            raise NotFoundError(resource_name, entity_id)
        return response_schema.model_validate(item)

    async def delete_item(entity_id: str, service=Depends(service_dependency)):
        try:
            deleted = await service.delete(entity_id)
        except (HTTPException, ContentError):
            raise
        except Exception as e:
            await fail(service, f"delete {resource_name.lower()}", e)
        if not deleted:
            raise NotFoundError(resource_name, entity_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    async def upload_item_image(
        request: Request,
        entity_id: str,
        image: UploadFile = File(...),
        service=Depends(service_dependency),
    ):
        data = await read_image_upload(request, image)
        try:
            item = await service.attach_image(entity_id, data, image.filename)
        except (HTTPException, ContentError):
            raise
        except Exception as e:
            await fail(service, f"upload {resource_name.lower()} image", e)
        if item is None:
            raise NotFoundError(resource_name, entity_id)
        return response_schema.model_validate(item)

    router.add_api_route("", list_items, methods=["GET"], response_model=List[response_schema],
                         summary=f"List {plural_name}")
    router.add_api_route("/reorder", reorder_items, methods=["POST"], response_model=ReorderResponse,
                         dependencies=admin_only, summary=f"Reorder {plural_name}")
    for path in json_create_paths:
        router.add_api_route(path, create_item, methods=["POST"], response_model=response_schema,
                             status_code=status.HTTP_201_CREATED, dependencies=admin_only,
                             summary=f"Create {resource_name.lower()}")
    router.add_api_route("/{entity_id}", get_item, methods=["GET"], response_model=response_schema,
                         summary=f"Get {resource_name.lower()}")
    for path in json_update_paths:
        router.add_api_route(path, update_item, methods=["PUT"], response_model=response_schema,
                             dependencies=admin_only, summary=f"Update {resource_name.lower()}")
    router.add_api_route("/{entity_id}", delete_item, methods=["DELETE"],
                         status_code=status.HTTP_204_NO_CONTENT, response_class=Response,
                         dependencies=admin_only, summary=f"Delete {resource_name.lower()}")
    if image_upload:
        router.add_api_route("/{entity_id}/image", upload_item_image, methods=["PUT"],
                             response_model=response_schema, dependencies=admin_only,
                             summary=f"Upload {resource_name.lower()} image")
    return router
