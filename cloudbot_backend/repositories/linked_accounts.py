from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from supabase import Client

from cloudbot_backend.models.linked_accounts import LinkedAccount, LinkedAccountUpsert

TABLE_NAME = "cloudinary_users"
PUBLIC_COLUMNS = "cloud_name, created_at, updated_at"


class LinkedAccountRepositoryError(RuntimeError):
    pass


def _raise_for_supabase_error(response: Any, context: str) -> None:
    if hasattr(response, "error") and response.error:
        raise LinkedAccountRepositoryError(f"Supabase error during {context}: {response.error}")


def _execute(query: Any, context: str) -> Any:
    """
    Run a PostgREST query, folding raised client errors into the repository error.
    """

    try:
        response = query.execute()
    except Exception as exc:
        raise LinkedAccountRepositoryError(f"Supabase error during {context}: {exc}") from exc
    _raise_for_supabase_error(response, context)
    return response


def _first_row(response: Any) -> dict[str, Any] | None:
    data = response.data or []
    if isinstance(data, list) and data:
        return data[0]
    if isinstance(data, dict) and data:
        return data
    return None


def find_linked_account(db: Client, user_id: str) -> LinkedAccount | None:
    response = _execute(
        db.table(TABLE_NAME).select("*").eq("user_id", user_id).limit(1),
        "finding linked account by user id",
    )
    row = _first_row(response)
    return LinkedAccount.from_row(row) if row else None


def find_public_profile(db: Client, user_id: str) -> dict[str, Any] | None:
    """
    Return the non-secret columns of a linked account, or None.
    """

    response = _execute(
        db.table(TABLE_NAME).select(PUBLIC_COLUMNS).eq("user_id", user_id).limit(1),
        "fetching linked account profile",
    )
    return _first_row(response)


def find_user_ids_for_cloud_account(db: Client, cloud_name: str, api_key: str) -> list[str]:
    response = _execute(
        db.table(TABLE_NAME).select("user_id").eq("cloud_name", cloud_name).eq("api_key", api_key),
        "finding linked accounts by cloud name",
    )
    data = response.data or []
    if not isinstance(data, list):
        return []
    return [str(row["user_id"]) for row in data if isinstance(row, dict) and row.get("user_id")]


def upsert_linked_account(db: Client, account: LinkedAccountUpsert) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "user_id": account.user_id,
        "cloud_name": account.cloud_name,
        "api_key": account.api_key,
        "api_secret": account.api_secret,
        "updated_at": datetime.now(UTC).isoformat(),
    }
    response = _execute(
        db.table(TABLE_NAME).upsert(payload, on_conflict="user_id"),
        "upserting linked account",
    )
    row = _first_row(response)
    # PostgREST can be configured with return=minimal; the payload is then the best record we have.
    return row if row else payload
