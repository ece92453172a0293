"""
Shared Cloudinary bot backend library code.

This package holds the code reused by:
- the FastAPI app in `api/`
- operational scripts in `scripts/`

App entrypoints (FastAPI routers, CLI scripts) live outside this package and
import from `cloudbot_backend` rather than the other way around.
"""
