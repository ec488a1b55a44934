"""Create all tables for the configured database (idempotent)."""
from __future__ import annotations

import asyncio
import logging

from miniapp_rooms.config import settings
from miniapp_rooms.infrastructure.db import models  # noqa: F401  (registers tables)
from miniapp_rooms.infrastructure.db.base import Base
from miniapp_rooms.infrastructure.db.session import engine
from miniapp_rooms.logging_config import configure_logging

logger = logging.getLogger(__name__)


async def create_schema() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()
    logger.info("Created tables: %s", ", ".join(sorted(Base.metadata.tables)))


def main() -> None:
    configure_logging(settings.LOG_LEVEL)
    asyncio.run(create_schema())


if __name__ == "__main__":
    main()
