"""Serve the API with uvicorn using the host and port from settings.

Usage:
    python -m src.api.server
"""

from __future__ import annotations

import uvicorn

from src.config import settings


def run() -> None:
    uvicorn.run(
        "src.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
