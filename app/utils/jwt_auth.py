"""
JWT token utilities for admin access.
Tokens are read from the httpOnly cms_token cookie or a Bearer header.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Header, HTTPException, Request, status
from jose import JWTError, jwt

from app.config import settings

SECRET_KEY = settings.JWT_SECRET_KEY
ALGORITHM = "HS256"
TOKEN_COOKIE_NAME = "cms_token"


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Dictionary of claims to include in token
        expires_delta: Optional custom expiration time

    Returns:
        str: Encoded JWT token
    """
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.JWT_EXPIRE_MINUTES))

    to_encode.update({
        "exp": expire,
        "iat": now,
        "type": "access",
    })

    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def verify_token(token: str) -> dict:
    """
    Verify and decode a JWT token.

    Raises:
        HTTPException: 401 if token is invalid, expired, or malformed
    """
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "Invalid token", "details": "Authentication token is invalid or expired"},
        )

    if payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "Invalid token type", "details": "Token is not an access token"},
        )

    return payload


def require_admin(
    request: Request,
    authorization: Optional[str] = Header(None, description="Bearer token (fallback to cookie)"),
) -> dict:
    """
    FastAPI dependency guarding every mutating admin endpoint.
    Prefers the httpOnly cookie, falls back to the Authorization header.

    Raises:
        HTTPException: 401 if the token is missing or invalid, 403 if not an admin token
    """
    token = request.cookies.get(TOKEN_COOKIE_NAME)

    if not token and authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            token = parts[1]

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "Missing token", "details": "Authentication required"},
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = verify_token(token)
    if payload.get("role") != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"error": "Forbidden", "details": "Admin role required"},
        )
    return payload
