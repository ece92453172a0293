from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient

from api import deps
from api.main import app
from cloudbot_backend.integrations.cloudinary.client import CloudinaryClientError
from cloudbot_backend.models.linked_accounts import SecretBundle

CREATED_AT = "2025-01-01T00:00:00+00:00"


class _FakeResponse:
    def __init__(self, *, data=None, error=None):  # noqa: ANN001
        self.data = data if data is not None else []
        self.error = error


class _FakeQuery:
    def __init__(self, db: FakeSupabase, table_name: str) -> None:
        self._db = db
        self._table_name = table_name
        self._columns = "*"
        self._filters: list[tuple[str, Any]] = []
        self._limit: int | None = None
        self._upsert: tuple[dict[str, Any], str | None] | None = None

    def select(self, columns: str = "*"):  # noqa: ANN201
        self._columns = columns
        return self

    def eq(self, column: str, value: Any):  # noqa: ANN201
        self._filters.append((column, value))
        return self

    def limit(self, n: int):  # noqa: ANN201
        self._limit = n
        return self

    def upsert(self, payload: dict[str, Any], on_conflict: str | None = None):  # noqa: ANN201
        self._upsert = (dict(payload), on_conflict)
        return self

    def _project(self, row: dict[str, Any]) -> dict[str, Any]:
        if self._columns.strip() == "*":
            return dict(row)
        columns = [c.strip() for c in self._columns.split(",")]
        return {c: row.get(c) for c in columns}

    def execute(self) -> _FakeResponse:
        rows = self._db.tables.setdefault(self._table_name, [])
        if self._upsert is not None:
            payload, on_conflict = self._upsert
            self._db.upserts.append((self._table_name, payload, on_conflict))
            if self._db.fail_writes:
                raise RuntimeError("connection reset by peer")
            key = on_conflict or "id"
            for row in rows:
                if row.get(key) == payload.get(key):
                    row.update(payload)
                    return _FakeResponse(data=[dict(row)])
            row = {"created_at": CREATED_AT, **payload}
            rows.append(row)
            return _FakeResponse(data=[dict(row)])

        if self._db.fail_reads:
            return _FakeResponse(error="PGRST000: could not connect")
        matched = [r for r in rows if all(r.get(c) == v for c, v in self._filters)]
        if self._limit is not None:
            matched = matched[: self._limit]
        return _FakeResponse(data=[self._project(r) for r in matched])


class FakeSupabase:
    """In-memory stand-in for the PostgREST table API used by the repositories."""

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.upserts: list[tuple[str, dict[str, Any], str | None]] = []
        self.fail_reads = False
        self.fail_writes = False

    def table(self, name: str) -> _FakeQuery:
        return _FakeQuery(self, name)

    def rows(self, name: str = "cloudinary_users") -> list[dict[str, Any]]:
        return self.tables.get(name, [])


class _FakeCloudinaryClient:
    def __init__(self, provider: FakeCloudinary, bundle: SecretBundle) -> None:
        self._provider = provider
        self.bundle = bundle

    def ping(self) -> dict[str, Any]:
        self._provider.pings.append(self.bundle)
        triple = (self.bundle.cloud_name, self.bundle.api_key, self.bundle.api_secret)
        if self._provider.valid_credentials is not None and triple not in self._provider.valid_credentials:
            raise CloudinaryClientError("Invalid api_key", status_code=401)
        return {"status": "ok"}

    def upload(
        self,
        file,  # noqa: ANN001
        *,
        resource_type: str = "auto",
        public_id: str | None = None,
        transformation=None,  # noqa: ANN001
        filename: str | None = None,
    ) -> dict[str, Any]:
        if self._provider.error_message:
            raise CloudinaryClientError(self._provider.error_message, status_code=500)
        self._provider.uploads.append(
            {
                "bundle": self.bundle,
                "file": file,
                "resource_type": resource_type,
                "public_id": public_id,
                "transformation": transformation,
                "filename": filename,
            }
        )
        public_id = public_id or f"asset_{len(self._provider.uploads)}"
        result = {
            "secure_url": f"https://res.cloudinary.com/{self.bundle.cloud_name}/image/upload/v1/{public_id}.png",
            "public_id": public_id,
            "format": "png",
            "bytes": 1234,
        }
        if self._provider.with_dimensions:
            result.update({"width": 640, "height": 480})
        return result

    def list_resources(self, **kwargs: Any) -> dict[str, Any]:
        self._provider.list_calls.append(kwargs)
        if self._provider.error_message:
            raise CloudinaryClientError(self._provider.error_message, status_code=500)
        return {"resources": list(self._provider.resources)}


class FakeCloudinary:
    """
    Provider double used as the client factory.

    Every call builds a new client bound to the given bundle, and the bundles
    are recorded so tests can check which account each request used.
    """

    def __init__(self) -> None:
        self.valid_credentials: set[tuple[str, str, str]] | None = None
        self.error_message: str | None = None
        self.with_dimensions = True
        self.resources: list[dict[str, Any]] = []
        self.clients: list[_FakeCloudinaryClient] = []
        self.pings: list[SecretBundle] = []
        self.uploads: list[dict[str, Any]] = []
        self.list_calls: list[dict[str, Any]] = []

    def __call__(self, bundle: SecretBundle) -> _FakeCloudinaryClient:
        client = _FakeCloudinaryClient(self, bundle)
        self.clients.append(client)
        return client


@pytest.fixture
def fake_db() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def fake_cloudinary() -> FakeCloudinary:
    return FakeCloudinary()


@pytest.fixture
def client(fake_db: FakeSupabase, fake_cloudinary: FakeCloudinary):
    """Test client with the credential store and Cloudinary replaced by fakes."""
    app.dependency_overrides[deps.get_supabase_admin_client] = lambda: fake_db
    app.dependency_overrides[deps.get_cloudinary_client_factory] = lambda: fake_cloudinary
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def link_account(fake_db: FakeSupabase):
    """Insert a linked account row directly, bypassing configure."""

    def _link(
        user_id: str,
        *,
        cloud_name: str = "demo",
        api_key: str = "k",
        api_secret: str = "s",
    ) -> None:
        fake_db.tables.setdefault("cloudinary_users", []).append(
            {
                "user_id": user_id,
                "cloud_name": cloud_name,
                "api_key": api_key,
                "api_secret": api_secret,
                "created_at": CREATED_AT,
                "updated_at": CREATED_AT,
            }
        )

    return _link
