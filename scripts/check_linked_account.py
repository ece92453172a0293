#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys

from cloudbot_backend.db.supabase import create_supabase_admin_client
from cloudbot_backend.relay.operations import resolve_credentials, validate_credentials
from cloudbot_backend.utils.env import load_env


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="check_linked_account",
        description="Resolve a user's stored Cloudinary credentials and ping Cloudinary with them.",
    )
    parser.add_argument("user_ids", nargs="+", help="Bot user id(s) to check.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv if argv is not None else sys.argv[1:])
    load_env()

    db = create_supabase_admin_client()
    failures = 0
    for user_id in args.user_ids:
        resolved = resolve_credentials(db, user_id)
        if not resolved.ok:
            failures += 1
            print(f"{user_id}: {resolved.kind.value} ({resolved.message})")
            continue
        bundle = resolved.value
        if validate_credentials(bundle):
            print(f"{user_id}: ok cloud_name={bundle.cloud_name}")
        else:
            failures += 1
            print(f"{user_id}: invalid credentials cloud_name={bundle.cloud_name}")
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
