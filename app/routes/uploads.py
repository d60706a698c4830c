"""
Presigned URL routes for browser-direct uploads to S3.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from botocore.exceptions import BotoCoreError, ClientError

from app.container import ServiceContainer
from app.dependencies import get_container
from app.exceptions import ContentError
from app.routes.crud import admin_only
from app.schemas import (
    PresignedDownloadRequest,
    PresignedDownloadResponse,
    PresignedUrlRequest,
    PresignedUrlResponse,
)
from app.utils.rate_limit import RATE_LIMITS, limiter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/uploads", tags=["Uploads"], dependencies=admin_only)


@router.post("/presigned-url", response_model=PresignedUrlResponse)
@limiter.limit(RATE_LIMITS["presign"])
async def create_presigned_upload_url(
    request: Request,
    payload: PresignedUrlRequest,
    container: ServiceContainer = Depends(get_container),
):
    """
    Issue a short-lived PUT URL. The client uploads the file directly to S3
    and then sends the returned publicUrl when creating or updating a resource.
    """
    try:
        presigned = container.storage.generate_presigned_upload_url(
            payload.file_type,
            folder=payload.folder,
            expires_in=container.settings.PRESIGNED_UPLOAD_EXPIRES,
        )
        return PresignedUrlResponse(
            upload_url=presigned.upload_url,
            file_key=presigned.file_key,
            public_url=presigned.public_url,
        )
    except ContentError:
        raise
    except (ClientError, BotoCoreError) as e:
        logger.error(f"Error generating presigned upload URL: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Failed to generate upload URL", "details": str(e)},
        )


@router.post("/presigned-download", response_model=PresignedDownloadResponse)
async def create_presigned_download_url(
    payload: PresignedDownloadRequest,
    container: ServiceContainer = Depends(get_container),
):
    try:
        expires_in = container.settings.PRESIGNED_DOWNLOAD_EXPIRES
        url = container.storage.generate_presigned_download_url(payload.file_key, expires_in=expires_in)
        return PresignedDownloadResponse(download_url=url, expires_in=expires_in)
    except ContentError:
        raise
    except (ClientError, BotoCoreError) as e:
        logger.error(f"Error generating presigned download URL: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Failed to generate download URL", "details": str(e)},
        )
