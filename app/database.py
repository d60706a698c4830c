"""
Database connection and session management for SQLAlchemy 2.0.
Configured for async operations with PostgreSQL (asyncpg) and a SQLite
fallback (aiosqlite) for local development.
"""
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy import event, text
from urllib.parse import urlparse
import logging
import socket

from app.config import settings

logger = logging.getLogger(__name__)

# Create declarative base for models
Base = declarative_base()

DEFAULT_SQLITE_URL = "sqlite+aiosqlite:///./banderas.db"

DATABASE_URL = settings.DATABASE_URL or DEFAULT_SQLITE_URL

_engine_args = {
    "echo": False,  # Set to True for SQL query logging in development
}

# Pool settings only apply to PostgreSQL (not SQLite)
if DATABASE_URL.startswith("postgresql"):
    _engine_args.update({
        "pool_size": 10,
        "max_overflow": 20,
        "pool_pre_ping": True,  # Handles stale connections
        "pool_recycle": 3600,
        "connect_args": {
            "server_settings": {
                "application_name": "banderas-cms"
            }
        }
    })


def enable_sqlite_foreign_keys(async_engine: AsyncEngine) -> None:
    """
    Turn on foreign key enforcement for every new SQLite connection.
    SQLite ignores ON DELETE CASCADE unless the pragma is set per connection.
    """
    if async_engine.dialect.name != "sqlite":
        return

    @event.listens_for(async_engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_async_engine(DATABASE_URL, **_engine_args)
enable_sqlite_foreign_keys(engine)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncSession:
    """
    FastAPI dependency for database sessions.
    Provides async database session with automatic commit/rollback.

    Usage:
        @router.get("/endpoint")
        async def my_endpoint(db: AsyncSession = Depends(get_db)):
            pass
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            await session.rollback()
            logger.error(f"Database session error: {str(e)}", exc_info=True)
            raise
        finally:
            await session.close()


def _validate_database_url(url: str) -> tuple[bool, str]:
    """
    Validate database URL and provide diagnostic information.
    Returns (is_valid, diagnostic_message)
    """
    if not url:
        return False, "DATABASE_URL is empty"

    if url.startswith("sqlite"):
        return True, f"Using SQLite database: {url}"

    try:
        parsed = urlparse(url)

        if not url.startswith(("postgresql://", "postgresql+asyncpg://")):
            return False, f"Invalid database URL scheme. Expected postgresql+asyncpg:// or sqlite+aiosqlite://, got: {parsed.scheme}"

        hostname = parsed.hostname
        if not hostname:
            return False, "No hostname found in DATABASE_URL"

        try:
            socket.getaddrinfo(hostname, None)
            dns_status = "DNS resolution successful"
        except socket.gaierror as e:
            dns_status = f"DNS resolution failed: {str(e)}"

        return True, f"URL format valid. Hostname: {hostname}, Port: {parsed.port or 5432}, Database: {parsed.path or '/postgres'}. {dns_status}"

    except Exception as e:
        return False, f"Error parsing DATABASE_URL: {str(e)}"


async def init_db():
    """
    Initialize database connection.
    Verifies connectivity; on SQLite the schema is created directly since
    Alembic migrations target PostgreSQL deployments.
    """
    is_valid, diagnostic = _validate_database_url(DATABASE_URL)
    if not is_valid:
        logger.error(f"Invalid DATABASE_URL: {diagnostic}")
        raise ValueError(f"Invalid DATABASE_URL: {diagnostic}")

    logger.info(f"Database URL validation: {diagnostic}")

    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            if engine.dialect.name == "sqlite":
                # Models must be registered on Base.metadata before create_all
                import app.models  # noqa: F401
                await conn.run_sync(Base.metadata.create_all)
            logger.info("Database connection initialized successfully")
    except Exception as e:
        error_msg = str(e)
        if "connection refused" in error_msg.lower() or "timeout" in error_msg.lower():
            logger.error(
                f"Database connection failed - Connection refused/timeout: {error_msg}\n"
                f"Diagnostic: {diagnostic}"
            )
        elif "authentication failed" in error_msg.lower() or "password" in error_msg.lower():
            logger.error(
                f"Database connection failed - Authentication error: {error_msg}\n"
                f"Diagnostic: {diagnostic}"
            )
        else:
            logger.error(
                f"Database connection failed ({type(e).__name__}): {error_msg}\n"
                f"Diagnostic: {diagnostic}"
            )
        raise


async def close_db():
    """
    Close database connections.
    Can be used for shutdown events.
    """
    await engine.dispose()
    logger.info("Database connections closed")
