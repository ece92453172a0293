"""
Credential-bound relay operations.

Every operation resolves the caller's linked account, builds a Cloudinary
client for that call only, performs one provider call and reports the result
as an `Outcome`. Expected failures never escape as exceptions.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from supabase import Client

from cloudbot_backend.integrations.cloudinary.client import MAX_LIST_RESULTS, CloudinaryClient, CloudinaryClientError
from cloudbot_backend.media.sources import (
    UploadSource,
    UploadSourceError,
    build_file_source,
    build_upload_source,
    derive_public_id,
)
from cloudbot_backend.media.transformations import TransformationError, parse_transformation
from cloudbot_backend.models.linked_accounts import LinkedAccountUpsert, SecretBundle
from cloudbot_backend.relay.outcomes import Outcome
from cloudbot_backend.repositories.linked_accounts import (
    LinkedAccountRepositoryError,
    find_linked_account,
    find_public_profile,
    find_user_ids_for_cloud_account,
    upsert_linked_account,
)

logger = logging.getLogger(__name__)

ClientFactory = Callable[[SecretBundle], CloudinaryClient]

NOT_CONFIGURED_MESSAGE = "Cloudinary not configured. Please run /configure first."


def _clean(value: str | None) -> str:
    return (value or "").strip()


def _asset_result(payload: Mapping[str, Any]) -> dict[str, Any]:
    result = {
        "secure_url": payload.get("secure_url"),
        "public_id": payload.get("public_id"),
        "format": payload.get("format"),
        "bytes": payload.get("bytes"),
    }
    # Raw and some video assets come back without dimensions.
    for key in ("width", "height"):
        if payload.get(key) is not None:
            result[key] = payload[key]
    return result


def _asset_summary(payload: Mapping[str, Any]) -> dict[str, Any]:
    summary = _asset_result(payload)
    summary["created_at"] = payload.get("created_at")
    summary["context"] = payload.get("context") or {}
    return summary


def resolve_credentials(db: Client, user_id: str | None) -> Outcome:
    """
    Look up the caller's secret bundle.

    A missing row and a failing store both read as "not configured"; the
    caller is asked to run configure either way.
    """

    user_id = _clean(user_id)
    if not user_id:
        return Outcome.invalid_input("User ID is required")

    try:
        account = find_linked_account(db, user_id)
    except LinkedAccountRepositoryError as exc:
        logger.error(f"Credential lookup failed for user {user_id}: {exc}")
        return Outcome.not_configured(NOT_CONFIGURED_MESSAGE)

    if account is None:
        return Outcome.not_configured(NOT_CONFIGURED_MESSAGE)
    return Outcome.success(account.bundle)


def validate_credentials(bundle: SecretBundle, *, client_factory: ClientFactory = CloudinaryClient) -> bool:
    client = client_factory(bundle)
    try:
        client.ping()
    except CloudinaryClientError as exc:
        logger.info(f"Credential test failed for cloud {bundle.cloud_name}: {exc}")
        return False
    logger.info(f"Credential test passed for cloud {bundle.cloud_name}")
    return True


def configure(
    db: Client,
    *,
    user_id: str | None,
    cloud_name: str | None,
    api_key: str | None,
    api_secret: str | None,
    client_factory: ClientFactory = CloudinaryClient,
) -> Outcome:
    user_id, cloud_name, api_key, api_secret = (
        _clean(user_id),
        _clean(cloud_name),
        _clean(api_key),
        _clean(api_secret),
    )
    if not (user_id and cloud_name and api_key and api_secret):
        return Outcome.invalid_input("All fields are required")

    # Not transactional with the upsert below: two concurrent claims can both pass.
    try:
        owners = find_user_ids_for_cloud_account(db, cloud_name, api_key)
    except LinkedAccountRepositoryError as exc:
        logger.error(f"Duplicate account check failed for user {user_id}: {exc}")
        return Outcome.store_error("Failed to verify Cloudinary account ownership")
    if any(owner != user_id for owner in owners):
        logger.warning(f"User {user_id} tried to link cloud {cloud_name}, already linked to another user")
        return Outcome.rejected("This Cloudinary account is already linked to another user")

    bundle = SecretBundle(cloud_name=cloud_name, api_key=api_key, api_secret=api_secret)
    if not validate_credentials(bundle, client_factory=client_factory):
        return Outcome.rejected("Invalid Cloudinary credentials. Please check and try again.")

    try:
        upsert_linked_account(
            db,
            LinkedAccountUpsert(user_id=user_id, cloud_name=cloud_name, api_key=api_key, api_secret=api_secret),
        )
    except LinkedAccountRepositoryError as exc:
        logger.error(f"Failed to store credentials for user {user_id}: {exc}")
        return Outcome.store_error("Failed to store credentials")

    return Outcome.success({"cloud_name": cloud_name})


def source_from_fields(
    *,
    image_url: str | None = None,
    file_data: str | None = None,
    file_type: str | None = None,
    file_name: str | None = None,
) -> Outcome:
    try:
        source = build_upload_source(image_url=image_url, file_data=file_data, file_type=file_type, file_name=file_name)
    except UploadSourceError as exc:
        return Outcome.invalid_input(str(exc))
    return Outcome.success(source)


def source_from_file(content: bytes, *, filename: str | None, content_type: str | None) -> Outcome:
    try:
        source = build_file_source(content, filename=filename, content_type=content_type)
    except UploadSourceError as exc:
        return Outcome.invalid_input(str(exc))
    return Outcome.success(source)


def upload(
    db: Client,
    user_id: str | None,
    source: UploadSource | None,
    *,
    client_factory: ClientFactory = CloudinaryClient,
) -> Outcome:
    if not _clean(user_id):
        return Outcome.invalid_input("User ID is required")
    if source is None:
        return Outcome.invalid_input("An image URL, base64 file data or a file upload is required")

    resolved = resolve_credentials(db, user_id)
    if not resolved.ok:
        return resolved

    client = client_factory(resolved.value)
    try:
        payload = client.upload(
            source.as_file(),
            resource_type="auto",
            public_id=derive_public_id(source.filename),
            filename=source.filename,
        )
    except CloudinaryClientError as exc:
        logger.error(f"Upload failed for user {user_id}: {exc}")
        return Outcome.provider_error(f"Upload failed: {exc}")

    return Outcome.success(_asset_result(payload))


def list_assets(db: Client, user_id: str | None, *, client_factory: ClientFactory = CloudinaryClient) -> Outcome:
    resolved = resolve_credentials(db, user_id)
    if not resolved.ok:
        return resolved

    client = client_factory(resolved.value)
    try:
        payload = client.list_resources(
            resource_type="image",
            delivery_type="upload",
            max_results=MAX_LIST_RESULTS,
            context=True,
        )
    except CloudinaryClientError as exc:
        logger.error(f"List assets failed for user {user_id}: {exc}")
        return Outcome.provider_error(f"Failed to fetch assets: {exc}")

    resources = payload.get("resources") or []
    assets = [_asset_summary(r) for r in resources if isinstance(r, Mapping)][:MAX_LIST_RESULTS]
    return Outcome.success(assets)


def transform(
    db: Client,
    user_id: str | None,
    image_url: str | None,
    transformation: str | None,
    *,
    client_factory: ClientFactory = CloudinaryClient,
) -> Outcome:
    if not (_clean(user_id) and _clean(image_url)):
        return Outcome.invalid_input("User ID and image URL are required")

    try:
        options = parse_transformation(transformation)
    except TransformationError as exc:
        return Outcome.invalid_input(str(exc))

    resolved = resolve_credentials(db, user_id)
    if not resolved.ok:
        return resolved

    client = client_factory(resolved.value)
    try:
        payload = client.upload(_clean(image_url), resource_type="image", transformation=options or None)
    except CloudinaryClientError as exc:
        logger.error(f"Transformation {transformation!r} failed for user {user_id}: {exc}")
        return Outcome.provider_error(f"Transformation failed: {exc}")

    return Outcome.success(
        {
            "secure_url": payload.get("secure_url"),
            "public_id": payload.get("public_id"),
            "transformation": transformation,
        }
    )


def get_user_info(db: Client, user_id: str | None) -> Outcome:
    user_id = _clean(user_id)
    if not user_id:
        return Outcome.invalid_input("User ID is required")

    try:
        profile = find_public_profile(db, user_id)
    except LinkedAccountRepositoryError as exc:
        logger.error(f"User info lookup failed for user {user_id}: {exc}")
        return Outcome.not_found("User not configured")

    if not profile:
        return Outcome.not_found("User not configured")
    return Outcome.success(
        {
            "cloud_name": profile.get("cloud_name"),
            "created_at": profile.get("created_at"),
            "updated_at": profile.get("updated_at"),
        }
    )
