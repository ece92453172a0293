"""
External system integrations (Cloudinary).

Provider clients live under this namespace so they remain decoupled from app
entrypoints (`api/`) and operational scripts (`scripts/`).
"""
