"""
Cuerpo de Banderas CMS - Test Configuration and Fixtures
"""
import io
import os
from typing import AsyncGenerator, List

import pytest
from botocore.exceptions import ClientError
from httpx import ASGITransport, AsyncClient
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Set testing environment before the app reads its settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_banderas.db"
os.environ["STORAGE_BACKEND"] = "s3"
os.environ["AWS_S3_BUCKET"] = "test-bucket"
os.environ["AWS_REGION"] = "us-east-1"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret-key-for-testing"
os.environ["EMAIL_DELIVERY_ENABLED"] = "false"

from app.config import settings  # noqa: E402
from app.container import ServiceContainer  # noqa: E402
from app.database import Base, enable_sqlite_foreign_keys, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.services.email_service import EmailService  # noqa: E402
from app.services.image_upload_service import ImageUploadService  # noqa: E402
from app.services.s3_storage_service import BatchDeleteResult, S3StorageService, StoredObject  # noqa: E402
from app.utils.auth import PasswordAuthGate, hash_password  # noqa: E402
from app.utils.jwt_auth import create_access_token  # noqa: E402
from app.utils.rate_limit import limiter  # noqa: E402

TEST_BUCKET = "test-bucket"
TEST_REGION = "us-east-1"
ADMIN_PASSWORD = "banderas-admin-test"
ADMIN_PASSWORD_HASH = hash_password(ADMIN_PASSWORD)


def s3_url(key: str) -> str:
    """Public URL of a key in the test bucket."""
    return f"https://{TEST_BUCKET}.s3.{TEST_REGION}.amazonaws.com/{key}"


def make_image_bytes(size=(640, 480), color=(200, 30, 30), fmt="PNG") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


class RecordingStorage(S3StorageService):
    """S3 storage that keeps objects in memory and records every call."""

    def __init__(self):
        super().__init__(
            bucket=TEST_BUCKET,
            region=TEST_REGION,
            access_key_id="testing",
            secret_access_key="testing",
        )
        self.uploaded = {}
        self.deleted: List[str] = []
        self.objects: List[StoredObject] = []
        self.fail_deletes = False

    async def upload_bytes(self, key: str, data: bytes, content_type: str) -> str:
        self.uploaded[key] = data
        return self.get_public_url(key)

    async def delete_file(self, key: str) -> None:
        self.deleted.append(key)
        if self.fail_deletes:
            raise ClientError({"Error": {"Code": "InternalError", "Message": "S3 unavailable"}}, "DeleteObject")

    async def list_objects(self, prefix: str = "") -> List[StoredObject]:
        return [obj for obj in self.objects if obj.key.startswith(prefix)]

    async def delete_objects(self, keys: List[str]) -> BatchDeleteResult:
        self.deleted.extend(keys)
        return BatchDeleteResult(deleted=len(keys), errors=[])

    async def check_connection(self):
        return {"bucket": self.bucket, "region": self.region}


@pytest.fixture
async def engine(tmp_path):
    """Fresh SQLite database per test"""
    test_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    enable_sqlite_foreign_keys(test_engine)
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def storage() -> RecordingStorage:
    return RecordingStorage()


@pytest.fixture
def uploader(storage) -> ImageUploadService:
    return ImageUploadService("s3", storage)


@pytest.fixture
def email_service() -> EmailService:
    return EmailService(
        delivery_enabled=False,
        smtp_host="smtp.test",
        smtp_port=587,
        smtp_user="",
        smtp_password="",
        from_email="noreply@test.local",
        from_name="Cuerpo de Banderas",
        frontend_url="http://frontend.test",
    )


@pytest.fixture
def container(storage, uploader, email_service) -> ServiceContainer:
    return ServiceContainer(
        settings=settings,
        storage=storage,
        image_uploader=uploader,
        email=email_service,
        auth_gate=PasswordAuthGate(ADMIN_PASSWORD_HASH, expire_minutes=60),
    )


@pytest.fixture
async def client(container, session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Test client with a per-request session on the test database and the test container"""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    original_container = app.state.container
    app.state.container = container
    app.dependency_overrides[get_db] = override_get_db
    limiter.reset()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    app.state.container = original_container


@pytest.fixture
def admin_headers() -> dict:
    token = create_access_token({"role": "admin", "sub": "cms_admin"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_password() -> str:
    return ADMIN_PASSWORD


@pytest.fixture
def bucket_url():
    """Build public URLs in the test bucket: bucket_url("shields/a.jpg")"""
    return s3_url


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes()
