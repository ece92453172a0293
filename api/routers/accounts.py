"""
Linked account endpoints: configure Cloudinary credentials and read back the profile.

The caller identity is the opaque `userId` supplied by the bot; there is no
further authentication.
"""

from __future__ import annotations

from fastapi import APIRouter

from api.deps import CloudinaryClientFactory, SupabaseAdminClient, outcome_response
from api.routers.models import RelayRequest
from cloudbot_backend.relay import operations

router = APIRouter(tags=["accounts"])


# --- Pydantic models ---


class ConfigureRequest(RelayRequest):
    """Credentials to link. All fields are required; blanks are rejected with 400."""

    user_id: str | None = None
    cloud_name: str | None = None
    api_key: str | None = None
    api_secret: str | None = None


# --- Endpoints ---


@router.post("/configure")
def configure_account(
    payload: ConfigureRequest,
    db: SupabaseAdminClient,
    client_factory: CloudinaryClientFactory,
):
    """
    Validate credentials with a Cloudinary ping and store them for the user.

    Replaces any bundle previously stored for the same userId. Rejects a
    Cloudinary account that is already linked to a different userId.
    """
    outcome = operations.configure(
        db,
        user_id=payload.user_id,
        cloud_name=payload.cloud_name,
        api_key=payload.api_key,
        api_secret=payload.api_secret,
        client_factory=client_factory,
    )
    return outcome_response(outcome, message="Cloudinary credentials configured successfully!")


@router.get("/user/{user_id}")
def get_user_info(user_id: str, db: SupabaseAdminClient):
    """Non-secret fields of the user's linked account."""
    outcome = operations.get_user_info(db, user_id)
    if not outcome.ok:
        return outcome_response(outcome)
    return {"status": "success", "data": outcome.value}
