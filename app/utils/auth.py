"""
Password authentication for the admin area.
Uses bcrypt for password hashing; AuthGate turns a password into a signed
session token.
"""
import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Union

import bcrypt

from app.utils.jwt_auth import create_access_token

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.
    Used for generating ADMIN_PASSWORD_HASH.
    """
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """
    Verify a password against a hashed password.

    Returns:
        True if password matches, False otherwise (including malformed hashes)
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


@dataclass
class Session:
    access_token: str
    expires_in: int
    role: str = "admin"


@dataclass
class AuthFailure:
    reason: str


class PasswordAuthGate:
    """
    Single-admin authentication: one bcrypt hash, one role.

    authenticate() never raises for bad credentials; it returns an
    AuthFailure the caller maps to 401.
    """

    def __init__(self, password_hash: str, expire_minutes: int = 60):
        self.password_hash = password_hash
        self.expire_minutes = expire_minutes

    @property
    def is_configured(self) -> bool:
        return bool(self.password_hash)

    def authenticate(self, password: str) -> Union[Session, AuthFailure]:
        if not self.is_configured:
            logger.error("Login attempted but ADMIN_PASSWORD_HASH is not configured")
            return AuthFailure("Authentication not configured")

        if not password or not verify_password(password, self.password_hash):
            return AuthFailure("Incorrect password")

        token = create_access_token(
            {"role": "admin", "sub": "cms_admin"},
            expires_delta=timedelta(minutes=self.expire_minutes),
        )
        return Session(access_token=token, expires_in=self.expire_minutes * 60)
