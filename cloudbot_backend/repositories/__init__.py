"""
Repository layer for DB access patterns.
"""

from cloudbot_backend.repositories.linked_accounts import (
    LinkedAccountRepositoryError,
    find_linked_account,
    find_public_profile,
    find_user_ids_for_cloud_account,
    upsert_linked_account,
)

__all__ = [
    "LinkedAccountRepositoryError",
    "find_linked_account",
    "find_public_profile",
    "find_user_ids_for_cloud_account",
    "upsert_linked_account",
]
