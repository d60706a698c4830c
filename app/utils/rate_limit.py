"""
Rate limiting for authentication and upload endpoints.
Uses slowapi keyed on the client address.
"""
from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address


def get_client_identifier(request: Request) -> str:
    """Forwarded client IP when behind a proxy, otherwise the remote address."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


limiter = Limiter(
    key_func=get_client_identifier,
    storage_uri="memory://",
)

RATE_LIMITS = {
    "login": "5/minute",
    "presign": "60/minute",
}
