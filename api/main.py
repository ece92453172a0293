"""
Cloudinary Bot Backend API - FastAPI application.

Provides endpoints for:
- Linking a user's Cloudinary account (credentials validated, then stored in Supabase)
- Uploading media from a URL, base64 payload or multipart file
- Listing a user's uploaded images
- Re-uploading an image with a transformation applied
- Reading back a user's linked account profile
"""
from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.deps import error_envelope
from api.routers import accounts, media

logger = logging.getLogger(__name__)


def get_cors_origins() -> list[str]:
    """
    Get CORS allowed origins from environment.
    Set CORS_ALLOW_ORIGINS as comma-separated list of origins.
    Example: CORS_ALLOW_ORIGINS=https://bot.example.com,https://admin.example.com
    """
    origins_str = os.getenv("CORS_ALLOW_ORIGINS", "")
    if not origins_str:
        return []
    return [origin.strip() for origin in origins_str.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    logger.info("Starting up Cloudinary Bot Backend API...")
    yield
    logger.info("Shutting down Cloudinary Bot Backend API...")


app = FastAPI(
    title="Cloudinary Bot Backend",
    description="Relays media operations to each user's own Cloudinary account",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS configuration
# If no origins configured, allows all origins but disables credentials
cors_origins = get_cors_origins()
allow_credentials = len(cors_origins) > 0

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins if cors_origins else ["*"],
    allow_credentials=allow_credentials,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


# --- Error envelope ---


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg") or "invalid value"
    return f"Invalid request: {location}: {message}" if location else f"Invalid request: {message}"


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_envelope(str(exc.detail), exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return error_envelope(_describe_validation_error(exc), 400)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return error_envelope("Internal server error", 500)


# Include routers
app.include_router(accounts.router, prefix="/api")
app.include_router(media.router, prefix="/api")


@app.get("/")
def root():
    """Service identification endpoint."""
    return {"status": "ok", "service": "cloudbot-backend"}


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "OK", "timestamp": datetime.now(UTC).isoformat()}
