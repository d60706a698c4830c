"""
User profile routes and account lifecycle emails.
"""
import logging
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.dependencies import get_user_service
from app.exceptions import ContentError, NotFoundError
from app.routes.crud import admin_only, fail
from app.schemas import UserCreate, UserResponse, UserUpdate, VerifyEmailResponse
from app.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"], dependencies=admin_only)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(payload: UserCreate, service: UserService = Depends(get_user_service)):
    """Create a user; with sendInvite the user also gets an invitation email."""
    data = payload.model_dump(exclude={"send_invite", "language"})
    try:
        user, invited = await service.create_user(data, send_invite=payload.send_invite, language=payload.language)
        if payload.send_invite and not invited:
            logger.warning(f"Invitation email for {user.email} was not sent")
        return user
    except (HTTPException, ContentError):
        raise
    except Exception as e:
        await fail(service, "create user", e)


@router.get("/{user_id}/profile", response_model=UserResponse)
async def get_user_profile(user_id: str, service: UserService = Depends(get_user_service)):
    try:
        user = await service.get_user(user_id)
    except Exception as e:
        await fail(service, "fetch user profile", e)
    if user is None:
        raise NotFoundError("User", user_id)
    return user


@router.put("/{user_id}/profile", response_model=UserResponse)
async def update_user_profile(user_id: str, payload: UserUpdate, service: UserService = Depends(get_user_service)):
    try:
        user = await service.update_user(user_id, payload.model_dump(exclude_unset=True))
    except (HTTPException, ContentError):
        raise
    except Exception as e:
        await fail(service, "update user profile", e)
    if user is None:
        raise NotFoundError("User", user_id)
    return user


@router.post("/{user_id}/verify-email-complete", response_model=VerifyEmailResponse)
async def verify_email_complete(
    user_id: str,
    language: Literal["es", "en"] = Query("es"),
    service: UserService = Depends(get_user_service),
):
    """Mark email verification as complete and send the welcome email in the user's language."""
    try:
        user, sent = await service.verify_email_complete(user_id, language)
    except (HTTPException, ContentError):
        raise
    except Exception as e:
        await fail(service, "process verification completion", e)

    message = "Welcome email sent" if sent else "Verification processed; welcome email not sent"
    return VerifyEmailResponse(user=user, message=message, email_sent=sent)
