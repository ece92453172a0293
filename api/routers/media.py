"""
Media endpoints relayed to the user's own Cloudinary account.

Each call resolves the user's linked account and builds a Cloudinary client
for that request only.
"""

from __future__ import annotations

from fastapi import APIRouter, File, Form, UploadFile

from api.deps import CloudinaryClientFactory, SupabaseAdminClient, outcome_response
from api.routers.models import RelayRequest
from cloudbot_backend.relay import operations

router = APIRouter(tags=["media"])


# --- Pydantic models ---


class UploadRequest(RelayRequest):
    """Either `imageUrl` or base64 `fileData` (with optional `fileName` / `fileType`)."""

    user_id: str | None = None
    image_url: str | None = None
    file_data: str | None = None
    file_name: str | None = None
    file_type: str | None = None


class TransformRequest(RelayRequest):
    user_id: str | None = None
    image_url: str | None = None
    transformation: str | None = None


# --- Endpoints ---


@router.post("/upload")
def upload_media(
    payload: UploadRequest,
    db: SupabaseAdminClient,
    client_factory: CloudinaryClientFactory,
):
    """Upload from a remote URL or a base64 payload; Cloudinary infers the resource type."""
    prepared = operations.source_from_fields(
        image_url=payload.image_url,
        file_data=payload.file_data,
        file_type=payload.file_type,
        file_name=payload.file_name,
    )
    if not prepared.ok:
        return outcome_response(prepared)
    return outcome_response(operations.upload(db, payload.user_id, prepared.value, client_factory=client_factory))


@router.post("/upload/file")
def upload_media_file(
    db: SupabaseAdminClient,
    client_factory: CloudinaryClientFactory,
    file: UploadFile = File(...),
    user_id: str | None = Form(default=None, alias="userId"),
):
    """Multipart variant of /upload for raw file bytes."""
    prepared = operations.source_from_file(
        file.file.read(),
        filename=file.filename,
        content_type=file.content_type,
    )
    if not prepared.ok:
        return outcome_response(prepared)
    return outcome_response(operations.upload(db, user_id, prepared.value, client_factory=client_factory))


@router.get("/assets/{user_id}")
def list_assets(user_id: str, db: SupabaseAdminClient, client_factory: CloudinaryClientFactory):
    """
    Up to 50 uploaded images from the user's account, with their context metadata.

    There is no pagination; accounts with more images only show the first page.
    """
    outcome = operations.list_assets(db, user_id, client_factory=client_factory)
    if not outcome.ok:
        return outcome_response(outcome)
    return {"status": "success", "total_count": len(outcome.value), "assets": outcome.value}


@router.post("/transform")
def transform_media(
    payload: TransformRequest,
    db: SupabaseAdminClient,
    client_factory: CloudinaryClientFactory,
):
    """
    Re-upload an image with a transformation applied.

    Supported tags: `grayscale`, `sepia`, `blur`, `<width>x<height>`. Other
    tags re-upload the image unchanged.
    """
    outcome = operations.transform(
        db,
        payload.user_id,
        payload.image_url,
        payload.transformation,
        client_factory=client_factory,
    )
    return outcome_response(outcome)
