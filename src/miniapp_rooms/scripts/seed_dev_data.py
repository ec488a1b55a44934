"""Seed development data: two users and a shared room."""
from __future__ import annotations

import asyncio
import logging

from miniapp_rooms.config import settings
from miniapp_rooms.domain.entities.identity import Identity
from miniapp_rooms.infrastructure.db.session import AsyncSessionLocal
from miniapp_rooms.infrastructure.db.uow import SqlAlchemyUoW
from miniapp_rooms.logging_config import configure_logging
from miniapp_rooms.services import room_service

logger = logging.getLogger(__name__)

DEV_USERS = [
    Identity(id=42, first_name="Ada", last_name="Lovelace", username="ada"),
    Identity(id=7, first_name="Alan", username="turing", language="en"),
]


async def seed() -> None:
    async with AsyncSessionLocal() as session:
        uow = SqlAlchemyUoW(session)
        async with uow:
            for identity in DEV_USERS:
                await uow.identities_w.upsert(identity)
            await uow.commit()

        room = await room_service.create_room("Lab Room", DEV_USERS[0].id, uow)
        room = await room_service.join_room(room.room_id, DEV_USERS[1].id, uow)
        logger.info("Seeded room %s with members %s", room.room_id, list(room.members))


def main() -> None:
    configure_logging(settings.LOG_LEVEL)
    asyncio.run(seed())


if __name__ == "__main__":
    main()
