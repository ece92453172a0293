from __future__ import annotations

import io
import os
from typing import Any, Mapping

import cloudinary.api
import cloudinary.uploader
from cloudinary import exceptions as cloudinary_exceptions

from cloudbot_backend.models.linked_accounts import SecretBundle
from cloudbot_backend.utils.env import env_float

DEFAULT_TIMEOUT_SECONDS = 60.0
MAX_LIST_RESULTS = 50

_STATUS_BY_ERROR = {
    cloudinary_exceptions.BadRequest: 400,
    cloudinary_exceptions.AuthorizationRequired: 401,
    cloudinary_exceptions.NotAllowed: 403,
    cloudinary_exceptions.NotFound: 404,
    cloudinary_exceptions.AlreadyExists: 409,
    cloudinary_exceptions.RateLimited: 420,
    cloudinary_exceptions.GeneralError: 500,
}


class CloudinaryClientError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _wrap_error(exc: cloudinary_exceptions.Error) -> CloudinaryClientError:
    return CloudinaryClientError(str(exc) or type(exc).__name__, status_code=_STATUS_BY_ERROR.get(type(exc)))


class CloudinaryClient:
    """
    Request-scoped Cloudinary client bound to one account's credentials.

    The bundle is passed to the SDK on every call; `cloudinary.config()` is never
    touched, so concurrent requests for different users cannot see each other's
    account.
    """

    def __init__(
        self,
        bundle: SecretBundle,
        *,
        upload_prefix: str | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self.bundle = bundle
        self.upload_prefix = (upload_prefix or os.getenv("CLOUDINARY_UPLOAD_PREFIX") or "").rstrip("/") or None
        self.timeout_seconds = timeout_seconds or env_float("CLOUDINARY_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS)

    def _options(self) -> dict[str, Any]:
        options: dict[str, Any] = {
            "cloud_name": self.bundle.cloud_name,
            "api_key": self.bundle.api_key,
            "api_secret": self.bundle.api_secret,
            "timeout": self.timeout_seconds,
        }
        if self.upload_prefix:
            options["upload_prefix"] = self.upload_prefix
        return options

    def ping(self) -> dict[str, Any]:
        """Authenticated no-op; raises CloudinaryClientError when the credentials are rejected."""
        try:
            return dict(cloudinary.api.ping(**self._options()))
        except cloudinary_exceptions.Error as exc:
            raise _wrap_error(exc) from exc

    def upload(
        self,
        file: str | bytes,
        *,
        resource_type: str = "auto",
        public_id: str | None = None,
        transformation: Mapping[str, Any] | None = None,
        filename: str | None = None,
    ) -> dict[str, Any]:
        """
        Upload a remote URL, a `data:` URI or raw bytes.

        `transformation` options (`effect`, `width`, `height`, `crop`) are applied
        as an incoming transformation, so the stored asset is the transformed one.
        """

        if isinstance(file, bytes):
            stream = io.BytesIO(file)
            stream.name = filename or "upload"
            file = stream

        options = {**self._options(), **dict(transformation or {})}
        if public_id:
            options["public_id"] = public_id
        try:
            return dict(cloudinary.uploader.upload(file, resource_type=resource_type, **options))
        except cloudinary_exceptions.Error as exc:
            raise _wrap_error(exc) from exc

    def list_resources(
        self,
        *,
        resource_type: str = "image",
        delivery_type: str = "upload",
        max_results: int = MAX_LIST_RESULTS,
        context: bool = True,
    ) -> dict[str, Any]:
        try:
            return dict(
                cloudinary.api.resources(
                    type=delivery_type,
                    resource_type=resource_type,
                    max_results=max(1, min(int(max_results), MAX_LIST_RESULTS)),
                    context=context,
                    **self._options(),
                )
            )
        except cloudinary_exceptions.Error as exc:
            raise _wrap_error(exc) from exc
