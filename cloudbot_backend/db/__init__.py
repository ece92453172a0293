"""
Database helpers for the credential store.
"""

from cloudbot_backend.db.supabase import create_supabase_admin_client

__all__ = [
    "create_supabase_admin_client",
]
