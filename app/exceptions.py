"""
Domain exceptions raised by services and repositories.

Routes let these propagate; the application-level handler in app.main turns
each one into a JSON body of the form {"error": message[, "details": ...]}
with the status code carried by the exception class.
"""
from typing import Any, Optional


class ContentError(Exception):
    """Base exception for content management errors"""

    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class NotFoundError(ContentError):
    """Requested row does not exist"""

    status_code = 404

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        message = f"{resource} not found"
        super().__init__(message, details=f"ID {resource_id} does not exist" if resource_id else None)


class ValidationFailure(ContentError):
    """Input passed schema validation but violates a field rule"""

    status_code = 400


class UntrustedUrlError(ValidationFailure):
    """Client-supplied image URL does not point at the configured bucket"""

    def __init__(self, url: str):
        super().__init__("Invalid S3 URL. Must be from the configured bucket and region.", details=url)


class ConflictError(ContentError):
    """Unique constraint violated (name, slug, email, main shield)"""

    status_code = 409


class UpstreamFailure(ContentError):
    """Database or object storage failure"""

    status_code = 500


class StorageNotConfiguredError(UpstreamFailure):
    def __init__(self, message: str = "S3 storage is not configured"):
        super().__init__(message, details="Set AWS_S3_BUCKET and AWS_REGION")
