"""Entrypoint: python -m miniapp_rooms"""
from __future__ import annotations

import uvicorn

from miniapp_rooms.config import settings
from miniapp_rooms.logging_config import build_logging_config


def main() -> None:
    uvicorn.run(
        "miniapp_rooms.app:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        log_level=settings.LOG_LEVEL.lower(),
        log_config=build_logging_config(settings.LOG_LEVEL),
    )


if __name__ == "__main__":
    main()
