"""
Long-lived collaborators shared by every request.
Built once at startup and stored on app.state.container; tests swap in
their own container.
"""
from dataclasses import dataclass

from app.config import Settings
from app.services.email_service import EmailService, create_email_service
from app.services.image_upload_service import ImageUploadService, create_image_upload_service
from app.services.s3_storage_service import S3StorageService, create_s3_storage_service
from app.utils.auth import PasswordAuthGate


@dataclass
class ServiceContainer:
    settings: Settings
    storage: S3StorageService
    image_uploader: ImageUploadService
    email: EmailService
    auth_gate: PasswordAuthGate


def build_container(settings: Settings) -> ServiceContainer:
    storage = create_s3_storage_service(settings)
    return ServiceContainer(
        settings=settings,
        storage=storage,
        image_uploader=create_image_upload_service(settings, storage),
        email=create_email_service(settings),
        auth_gate=PasswordAuthGate(settings.ADMIN_PASSWORD_HASH, settings.JWT_EXPIRE_MINUTES),
    )
