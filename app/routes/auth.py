"""
Admin login/logout.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from app.container import ServiceContainer
from app.dependencies import get_container
from app.schemas import LoginRequest, LoginResponse, MessageResponse
from app.utils.auth import AuthFailure
from app.utils.jwt_auth import TOKEN_COOKIE_NAME
from app.utils.rate_limit import RATE_LIMITS, limiter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login", response_model=LoginResponse)
@limiter.limit(RATE_LIMITS["login"])
async def login(
    request: Request,
    response: Response,
    credentials: LoginRequest,
    container: ServiceContainer = Depends(get_container),
):
    """
    Exchange the admin password for an access token.
    The token is returned in the body and set as an httpOnly cookie.
    """
    result = container.auth_gate.authenticate(credentials.password)

    if isinstance(result, AuthFailure):
        logger.warning(f"Failed admin login from {request.client.host if request.client else 'unknown'}: {result.reason}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "Invalid credentials", "details": result.reason},
        )

    response.set_cookie(
        key=TOKEN_COOKIE_NAME,
        value=result.access_token,
        max_age=result.expires_in,
        httponly=True,
        secure=request.url.scheme == "https",
        samesite="lax",
    )
    logger.info("Admin logged in")
    return LoginResponse(access_token=result.access_token, expires_in=result.expires_in)


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    response.delete_cookie(TOKEN_COOKIE_NAME)
    return MessageResponse(message="Logged out")
