"""
FastAPI application entry point.
Main application instance with middleware and route configuration.
"""
import asyncio
import logging

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from transfer_site.config import settings
from transfer_site.database import close_db, get_db, init_db
from transfer_site.routes import (
    auth,
    blog,
    feeds,
    galleries,
    indexnow,
    leads,
    reviews,
    site_settings,
    transfer_routes,
    uploads,
    vehicles,
)
from transfer_site.services.cloudinary_service import validate_cloudinary_config
from transfer_site.services.slugs import SlugConflictError
from transfer_site.utils.rate_limit import limiter

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Create FastAPI application instance
app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION,
)

app.state.limiter = limiter

# Credentials (the admin cookie) require explicit origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    max_age=3600,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every request with its response status."""
    method = request.method
    path = request.url.path

    try:
        response = await call_next(request)
        logger.info(f"Response status: {response.status_code} for {method} {path}")
        return response
    except Exception as e:
        logger.error(
            f"Error processing {method} {path}: {str(e)}\n"
            f"  Error type: {type(e).__name__}",
            exc_info=True
        )
        raise


# JSON API
app.include_router(auth.router, prefix="/api", tags=["auth"])
app.include_router(blog.router, prefix="/api", tags=["blog"])
app.include_router(galleries.router, prefix="/api", tags=["galleries"])
app.include_router(reviews.router, prefix="/api", tags=["reviews"])
app.include_router(transfer_routes.router, prefix="/api", tags=["routes"])
app.include_router(vehicles.router, prefix="/api", tags=["vehicles"])
app.include_router(leads.router, prefix="/api", tags=["leads"])
app.include_router(site_settings.router, prefix="/api", tags=["settings"])
app.include_router(uploads.router, prefix="/api", tags=["uploads"])
app.include_router(indexnow.router, prefix="/api", tags=["indexnow"])
# XML feeds carry their full paths (/api/feed/..., /sitemap.xml, /robots.txt)
app.include_router(feeds.router, tags=["feeds"])


def _field_errors(errors) -> dict:
    """Flatten pydantic errors into {field: message}, keyed by the JSON field path."""
    details = {}
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "form")]
        field = ".".join(loc) or "body"
        details.setdefault(field, error.get("msg", "Invalid value"))
    return details


def add_cors_headers(response: JSONResponse, request: Request) -> JSONResponse:
    """
    Add CORS headers to error responses.
    Responses built outside CORSMiddleware (unhandled errors) would otherwise
    reach the browser without them. Only configured origins are echoed back.
    """
    origin = request.headers.get("origin")
    if origin and origin in settings.CORS_ORIGINS:
        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Access-Control-Allow-Credentials"] = "true"
        response.headers["Vary"] = "Origin"
    return response


# Exception Handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions (401, 404, ...) with a uniform JSON body."""
    logger.warning(
        f"HTTPException on {request.method} {request.url.path}: "
        f"status={exc.status_code} detail={exc.detail}"
    )

    # Handle both string and dict detail formats
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {"error": exc.detail, "detail": str(exc.detail)}

    response = JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)
    return add_cors_headers(response, request)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Request validation errors become 400 with a field -> message map."""
    details = _field_errors(exc.errors())
    logger.info(f"Validation error on {request.method} {request.url.path}: {details}")
    response = JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Validation error", "details": details},
    )
    return add_cors_headers(response, request)


@app.exception_handler(SlugConflictError)
async def slug_conflict_handler(request: Request, exc: SlugConflictError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": str(exc), "detail": f"Slug '{exc.slug}' is already in use"},
    )


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    """Constraint violations that escaped a router are reported as conflicts."""
    logger.warning(f"Integrity error on {request.method} {request.url.path}: {str(exc.orig)}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Conflict", "detail": "The record conflicts with existing data"},
    )


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    logger.warning(f"Rate limit exceeded on {request.method} {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"error": "Too many requests", "detail": f"Rate limit exceeded: {exc.detail}"},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions."""
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}:\n"
        f"  Error: {str(exc)}\n"
        f"  Error type: {type(exc).__name__}",
        exc_info=True
    )
    response = JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "detail": "An unexpected error occurred"
        }
    )
    return add_cors_headers(response, request)


# Root Endpoints
@app.get("/")
async def root():
    """Root endpoint - API health check."""
    return {
        "message": settings.API_TITLE,
        "status": "healthy",
        "version": settings.API_VERSION
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/health/db")
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
        return {
            "database": "error",
            "status": "unhealthy",
            "error": "Database connection failed"
        }


@app.get("/health/cloudinary")
async def health_check_cloudinary():
    """
    Cloudinary health check endpoint.
    Reports whether the remote image host is configured.
    """
    if validate_cloudinary_config():
        return {
            "cloudinary": "configured",
            "status": "healthy",
            "cloud_name": settings.CLOUDINARY_CLOUD_NAME
        }
    return {
        "cloudinary": "not_configured",
        "status": "warning",
        "message": "Cloudinary credentials not set; uploads are stored locally"
    }


@app.on_event("startup")
async def startup_event():
    """
    Check security settings and connect to the database.
    Missing credentials outside development abort startup.
    """
    settings.validate_security()
    if settings.is_development and not settings.ADMIN_PASSWORD_HASH:
        logger.warning("ENVIRONMENT=development: using the built-in development admin credentials")

    logger.info(f"CORS allowed origins: {settings.CORS_ORIGINS}")

    if settings.DATABASE_URL:
        await init_db()
    else:
        logger.info("DATABASE_URL not configured - database features will be unavailable")


@app.on_event("shutdown")
async def shutdown_event():
    """Close database connections on application shutdown."""
    if settings.DATABASE_URL:
        try:
            await close_db()
        except Exception as e:
            # Ignore cancellation errors during shutdown - they're expected
            if not isinstance(e, (KeyboardInterrupt, asyncio.CancelledError)):
                logger.warning(f"Error during database shutdown: {str(e)}")
