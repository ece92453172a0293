"""
Run the API with uvicorn: `python -m api`.

Binds to HOST (default 0.0.0.0) and PORT (default 3000).
"""
from __future__ import annotations

import logging
import os

import uvicorn

from cloudbot_backend.utils.env import load_env


def main() -> None:
    load_env()
    logging.basicConfig(
        level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    uvicorn.run(
        "api.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3000")),
    )


if __name__ == "__main__":
    main()
