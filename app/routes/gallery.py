"""
Gallery routes: photo items (multipart upload or client-direct S3 URL)
and the categories that group them.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status

from app.dependencies import get_gallery_category_service, get_gallery_service
from app.exceptions import ContentError, NotFoundError
from app.routes.crud import admin_only, fail, read_image_upload, register_content_routes
from app.schemas import (
    GalleryCategoryCreate,
    GalleryCategoryResponse,
    GalleryCategoryUpdate,
    GalleryItemCreate,
    GalleryItemResponse,
    GalleryItemUpdate,
)
from app.services.gallery_service import GalleryCategoryService, GalleryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/gallery", tags=["Admin - Gallery"])


@router.get("/uncategorized", response_model=List[GalleryItemResponse])
async def get_uncategorized_items(service: GalleryService = Depends(get_gallery_service)):
    try:
        items = await service.list_uncategorized()
        return [GalleryItemResponse.model_validate(item) for item in items]
    except Exception as e:
        await fail(service, "fetch uncategorized gallery items", e)


@router.get("/category/{category_id}", response_model=List[GalleryItemResponse])
async def get_items_by_category(category_id: str, service: GalleryService = Depends(get_gallery_service)):
    try:
        items = await service.list_by_category(category_id)
        logger.info(f"Retrieved {len(items)} gallery items for category {category_id}")
        return [GalleryItemResponse.model_validate(item) for item in items]
    except Exception as e:
        await fail(service, "fetch gallery items by category", e)


@router.post(
    "",
    response_model=GalleryItemResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=admin_only,
)
async def create_gallery_item(
    request: Request,
    title: str = Form(..., min_length=1),
    description: Optional[str] = Form(None),
    category_id: Optional[str] = Form(None, alias="categoryId"),
    year: Optional[str] = Form(None),
    display_order: Optional[int] = Form(None, alias="displayOrder", ge=0),
    image: UploadFile = File(...),
    service: GalleryService = Depends(get_gallery_service),
):
    """
    Create a gallery item from a multipart upload.
    The image is optimized, a 300x300 thumbnail is generated and both are stored.
    """
    data = await read_image_upload(request, image)
    try:
        item = await service.create_with_image(
            {
                "title": title,
                "description": description or None,
                "category_id": category_id or None,
                "year": year or None,
                "display_order": display_order,
            },
            data,
            image.filename,
        )
        return GalleryItemResponse.model_validate(item)
    except (HTTPException, ContentError):
        raise
    except Exception as e:
        await fail(service, "create gallery item", e)


@router.put("/{entity_id}", response_model=GalleryItemResponse, dependencies=admin_only)
async def update_gallery_item(
    request: Request,
    entity_id: str,
    title: Optional[str] = Form(None, min_length=1),
    description: Optional[str] = Form(None),
    category_id: Optional[str] = Form(None, alias="categoryId"),
    year: Optional[str] = Form(None),
    display_order: Optional[int] = Form(None, alias="displayOrder", ge=0),
    image: Optional[UploadFile] = File(None),
    service: GalleryService = Depends(get_gallery_service),
):
    """Update fields from a multipart form; a new image replaces the old one and its thumbnail."""
    fields = {
        "title": title,
        "description": description,
        "category_id": category_id,
        "year": year,
        "display_order": display_order,
    }
    changes = {name: value for name, value in fields.items() if value is not None}

    upload = await read_image_upload(request, image) if image is not None and image.filename else None
    try:
        if upload is not None:
            item = await service.update_with_image(entity_id, changes, upload, image.filename)
        else:
            item = await service.update(entity_id, changes)
    except (HTTPException, ContentError):
        raise
    except Exception as e:
        await fail(service, "update gallery item", e)
    if item is None:
        raise NotFoundError("Gallery item", entity_id)
    return GalleryItemResponse.model_validate(item)


register_content_routes(
    router,
    resource_name="Gallery item",
    plural_name="gallery items",
    service_dependency=get_gallery_service,
    create_schema=GalleryItemCreate,
    update_schema=GalleryItemUpdate,
    response_schema=GalleryItemResponse,
    json_create_paths=["/with-url"],
    json_update_paths=["/{entity_id}/with-url"],
    image_upload=True,
)


categories_router = APIRouter(prefix="/admin/gallery-categories", tags=["Admin - Gallery Categories"])


@categories_router.get("/slug/{slug}", response_model=GalleryCategoryResponse)
async def get_category_by_slug(slug: str, service: GalleryCategoryService = Depends(get_gallery_category_service)):
    try:
        category = await service.get_by_slug(slug)
    except Exception as e:
        await fail(service, "fetch gallery category", e)
    if category is None:
        raise NotFoundError("Gallery category", slug)
    return GalleryCategoryResponse.model_validate(category)


register_content_routes(
    categories_router,
    resource_name="Gallery category",
    plural_name="gallery categories",
    service_dependency=get_gallery_category_service,
    create_schema=GalleryCategoryCreate,
    update_schema=GalleryCategoryUpdate,
    response_schema=GalleryCategoryResponse,
)
