"""
Cloudinary integration client.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cloudbot_backend.integrations.cloudinary.client import (
        CloudinaryClient,
        CloudinaryClientError,
    )

__all__ = [
    "CloudinaryClient",
    "CloudinaryClientError",
]


def __getattr__(name: str):
    if name in __all__:
        from cloudbot_backend.integrations.cloudinary import client

        return getattr(client, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
