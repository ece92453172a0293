"""
Dependency injection for the Supabase credential store and response helpers.
"""
from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import Depends
from fastapi.responses import JSONResponse
from supabase import Client

from cloudbot_backend.db.supabase import create_supabase_admin_client
from cloudbot_backend.integrations.cloudinary.client import CloudinaryClient
from cloudbot_backend.relay.operations import ClientFactory
from cloudbot_backend.relay.outcomes import Outcome
from cloudbot_backend.utils.env import load_env

# Load environment variables if running standalone
load_env()

logger = logging.getLogger(__name__)


def get_supabase_admin_client() -> Client:
    """
    Returns a Supabase client using the service role key.

    Linked accounts carry API secrets, so every endpoint goes through the service role.
    """
    return create_supabase_admin_client()


def get_cloudinary_client_factory() -> ClientFactory:
    """
    Returns the factory used to build one Cloudinary client per request.

    Overridden in tests to swap in a fake provider.
    """
    return CloudinaryClient


# Type aliases for dependency injection
SupabaseAdminClient = Annotated[Client, Depends(get_supabase_admin_client)]
CloudinaryClientFactory = Annotated[ClientFactory, Depends(get_cloudinary_client_factory)]


def error_envelope(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"status": "error", "message": message})


def outcome_response(outcome: Outcome, **extra: Any) -> dict[str, Any] | JSONResponse:
    """
    Render an operation outcome.

    Success merges `extra` and the outcome value (when it is a dict) into a
    `status: success` body; failures become the shared error envelope.
    """
    if not outcome.ok:
        return error_envelope(outcome.message or "Request failed", outcome.http_status)

    body: dict[str, Any] = {"status": "success", **extra}
    if isinstance(outcome.value, dict):
        body.update(outcome.value)
    return body
