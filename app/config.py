"""
Configuration management for the FastAPI application.
Uses Pydantic Settings for environment variable management.
"""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Configuration
    API_TITLE: str = "Cuerpo de Banderas API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Content management API for the Cuerpo de Banderas institutional site"

    # CORS Configuration
    CORS_ORIGINS: List[str] = [
        "http://localhost:5000",
        "http://localhost:5173",
        "http://127.0.0.1:5000",
        "http://127.0.0.1:5173",
    ]

    LOG_LEVEL: str = "INFO"

    # Database Configuration
    # Empty means a local SQLite file (development only)
    DATABASE_URL: str = ""

    # Image storage backend: "s3" or "local"
    STORAGE_BACKEND: str = "s3"
    LOCAL_UPLOAD_DIR: str = "public"

    # AWS S3 Configuration
    AWS_REGION: str = "us-east-1"
    AWS_S3_BUCKET: str = ""
    AWS_ACCESS_KEY_ID: Optional[str] = None
    AWS_SECRET_ACCESS_KEY: Optional[str] = None
    # Optional CDN domain in front of the bucket (e.g. d111111abcdef8.cloudfront.net)
    CLOUDFRONT_DOMAIN: Optional[str] = None

    # Upload limits and presigned URL lifetimes (seconds)
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024
    PRESIGNED_UPLOAD_EXPIRES: int = 300
    PRESIGNED_DOWNLOAD_EXPIRES: int = 3600

    # Admin Password
    # Should be bcrypt hashed password (see admin_password.py)
    ADMIN_PASSWORD_HASH: str = ""

    # JWT Configuration
    # SECRET_KEY should be a long random string (e.g., generated with: openssl rand -hex 32)
    JWT_SECRET_KEY: str = "change-this-secret-key-in-production"
    JWT_EXPIRE_MINUTES: int = 60

    # Email Configuration
    # When delivery is disabled, emails are rendered and logged only
    EMAIL_DELIVERY_ENABLED: bool = False
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = ""
    EMAIL_FROM: str = "cuerpo.banderas@liceocostarica.ed.cr"
    EMAIL_FROM_NAME: str = "Cuerpo de Banderas"
    FRONTEND_URL: str = "http://localhost:5000"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env that aren't defined in Settings


# Global settings instance
settings = Settings()
