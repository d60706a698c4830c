"""
FastAPI application entry point.
Main application instance with middleware and route configuration.
"""
from fastapi import FastAPI, Request, status, Depends, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
import logging
import asyncio
import time

from app.config import settings
from app.container import ServiceContainer, build_container
from app.database import get_db, init_db, close_db
from app.dependencies import get_container
from app.exceptions import ContentError
from app.routes import auth, gallery, history, leadership, shield_values, shields, site_config, uploads, users
from app.utils.rate_limit import limiter

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Create FastAPI application instance
app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION,
)

app.state.container = build_container(settings)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# The admin token travels in an httpOnly cookie; origins must stay explicit
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    max_age=3600,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log method, path, status and duration of every request."""
    method = request.method
    path = request.url.path
    started = time.perf_counter()

    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"Error processing {method} {path}: {str(e)} ({type(e).__name__})", exc_info=True)
        raise

    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(f"{method} {path} -> {response.status_code} ({elapsed_ms:.1f} ms)")
    return response


# Admin content resources
app.include_router(site_config.router, prefix="/api")
app.include_router(leadership.router, prefix="/api")
app.include_router(shields.router, prefix="/api")
app.include_router(shield_values.router, prefix="/api")
app.include_router(gallery.categories_router, prefix="/api")
app.include_router(gallery.router, prefix="/api")
app.include_router(history.router, prefix="/api")
app.include_router(history.images_router, prefix="/api")

app.include_router(uploads.router, prefix="/api")
app.include_router(auth.router, prefix="/api")
app.include_router(users.router, prefix="/api")

if settings.STORAGE_BACKEND == "local":
    # Locally stored uploads are served from /public/{filename}
    app.mount("/public", StaticFiles(directory=settings.LOCAL_UPLOAD_DIR, check_dir=False), name="public")


# Exception Handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions (401, 403, 404, etc.)."""
    logger.warning(f"HTTPException on {request.method} {request.url.path}: {exc.status_code} {exc.detail}")

    # Handle both string and dict detail formats
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {"error": exc.detail}

    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


@app.exception_handler(ContentError)
async def content_exception_handler(request: Request, exc: ContentError):
    """Render domain errors raised by services (404, 400, 409, storage failures)."""
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.warning(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors as 400 with per-field details."""
    details = [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]
    logger.warning(f"Validation error on {request.method} {request.url.path}: {details}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Validation error", "details": details},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions. The stack trace stays in the server log."""
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}: {str(exc)} ({type(exc).__name__})",
        exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error", "details": "An unexpected error occurred"},
    )


# Root Endpoints
@app.get("/")
async def root():
    return {
        "message": settings.API_TITLE,
        "status": "healthy",
        "version": settings.API_VERSION
    }


@app.get("/api/health")
async def health_check():
    """Liveness check."""
    return {"status": "healthy"}


@app.get("/api/health/db")
async def health_check_db(db: AsyncSession = Depends(get_db)):
    """
    Database health check endpoint.
    Tests database connection and returns status.
    """
    try:
        result = await db.execute(text("SELECT 1"))
        return {
            "database": "connected",
            "status": "healthy",
            "result": result.scalar()
        }
    except Exception as e:
        logger.error(f"Database health check failed: {str(e)}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"database": "error", "status": "unhealthy", "error": "Database connection failed"},
        )


@app.get("/api/health/storage")
async def health_check_storage(container: ServiceContainer = Depends(get_container)):
    """
    Storage health check endpoint.
    Reports the active backend and, for S3, whether the bucket is reachable.
    """
    backend = container.image_uploader.backend
    storage = container.storage

    if not storage.is_configured:
        return {
            "storage": "not_configured",
            "backend": backend,
            "status": "warning" if backend == "local" else "unhealthy",
            "message": "AWS_S3_BUCKET / AWS_REGION not set",
        }

    try:
        details = await storage.check_connection()
        return {"storage": "connected", "backend": backend, "status": "healthy", **details}
    except Exception as e:
        logger.error(f"Storage health check failed: {str(e)}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"storage": "error", "backend": backend, "status": "unhealthy", "error": str(e)},
        )


@app.on_event("startup")
async def startup_event():
    """
    Initialize database connection on application startup.
    Non-blocking: the app starts even if the database is unreachable.
    """
    logger.info(f"CORS allowed origins: {settings.CORS_ORIGINS}")
    logger.info(f"Image storage backend: {settings.STORAGE_BACKEND}")

    try:
        await init_db()
        logger.info("Database connection established successfully")
    except Exception as e:
        logger.error(
            f"Failed to initialize database on startup: {str(e)}\n"
            f"The application will continue to run, but database-dependent endpoints will fail."
        )


@app.on_event("shutdown")
async def shutdown_event():
    """Close database connections on application shutdown."""
    try:
        await close_db()
    except Exception as e:
        if not isinstance(e, (KeyboardInterrupt, asyncio.CancelledError)):
            logger.warning(f"Error during database shutdown: {str(e)}")
