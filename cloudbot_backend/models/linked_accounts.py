from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass(frozen=True)
class SecretBundle:
    """
    Everything needed to authenticate against one Cloudinary account.
    """

    cloud_name: str
    api_key: str
    api_secret: str = field(repr=False)


@dataclass(frozen=True)
class LinkedAccount:
    """
    Canonical linked account record (maps to `public.cloudinary_users`).
    """

    user_id: str
    cloud_name: str
    api_key: str
    api_secret: str = field(repr=False)
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def bundle(self) -> SecretBundle:
        return SecretBundle(cloud_name=self.cloud_name, api_key=self.api_key, api_secret=self.api_secret)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> LinkedAccount:
        return cls(
            user_id=str(row.get("user_id") or ""),
            cloud_name=str(row.get("cloud_name") or ""),
            api_key=str(row.get("api_key") or ""),
            api_secret=str(row.get("api_secret") or ""),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )


@dataclass(frozen=True)
class LinkedAccountUpsert:
    user_id: str
    cloud_name: str
    api_key: str
    api_secret: str = field(repr=False)
