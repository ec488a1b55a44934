from __future__ import annotations

import logging
from typing import Callable

from miniapp_rooms.application.exceptions import (
    ConflictError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from miniapp_rooms.application.policies.permissions import (
    assert_room_exists,
    assert_room_owner,
)
from miniapp_rooms.application.ports.clock import Clock, SystemClock
from miniapp_rooms.application.uow import UnitOfWork
from miniapp_rooms.domain.entities.room import Room
from miniapp_rooms.domain.value_objects.ids import new_room_id

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3


async def create_room(
    room_name: str,
    owner_id: int,
    uow: UnitOfWork,
    *,
    clock: Clock | None = None,
    id_factory: Callable[[], str] = new_room_id,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> Room:
    """Create a room owned by ``owner_id`` with the owner as sole member.

    The owner check and the insert run in one scope; nothing is visible
    unless both succeed. Room-id collisions are retried with a fresh id.
    """
    name = room_name.strip()
    if not name:
        raise ValidationError("room_name must not be empty")

    now = (clock or SystemClock()).now()
    async with uow:
        owner = await uow.identities.get_by_id(owner_id)
        if owner is None:
            raise ValidationError(f"Unknown owner: {owner_id}")

        for attempt in range(1, max_attempts + 1):
            room = Room(
                room_id=id_factory(),
                room_name=name,
                created_by=owner_id,
                members=(owner_id,),
                created_at=now,
            )
            try:
                room = await uow.rooms_w.insert(room)
            except ConflictError:
                logger.warning(
                    "Room id collision on attempt %d/%d", attempt, max_attempts,
                )
                continue
            await uow.commit()
            logger.info("Room %s created by %s", room.room_id, owner_id)
            return room

        raise StorageError(f"Could not allocate a unique room id after {max_attempts} attempts")


async def join_room(room_id: str, user_id: int, uow: UnitOfWork) -> Room:
    async with uow:
        assert_room_exists(await uow.rooms.get_by_id(room_id))
        if not await uow.rooms_w.add_member(room_id, user_id):
            # deleted between the lookup and the insert
            raise NotFoundError("Room not found")
        await uow.commit()
        room = assert_room_exists(await uow.rooms.get_by_id(room_id))
    logger.info("User %s joined room %s", user_id, room_id)
    return room


async def exit_room(room_id: str, user_id: int, uow: UnitOfWork) -> Room:
    async with uow:
        assert_room_exists(await uow.rooms.get_by_id(room_id))
        await uow.rooms_w.remove_member(room_id, user_id)
        await uow.commit()
        room = assert_room_exists(await uow.rooms.get_by_id(room_id))
    logger.info("User %s left room %s", user_id, room_id)
    return room


async def delete_room(room_id: str, requester_id: int, uow: UnitOfWork) -> None:
    async with uow:
        room = assert_room_exists(await uow.rooms.get_by_id(room_id))
        assert_room_owner(room, requester_id)
        if not await uow.rooms_w.delete_owned(room_id, requester_id):
            raise NotFoundError("Room not found")
        await uow.commit()
    logger.info("Room %s deleted by %s", room_id, requester_id)


async def list_rooms_for_member(user_id: int, uow: UnitOfWork) -> list[Room]:
    return list(await uow.rooms.list_for_member(user_id))
