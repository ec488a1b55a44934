from __future__ import annotations

from miniapp_rooms.application.exceptions import ForbiddenError, NotFoundError
from miniapp_rooms.domain.entities.identity import Identity
from miniapp_rooms.domain.entities.room import Room


def assert_room_exists(room: Room | None) -> Room:
    if room is None:
        raise NotFoundError("Room not found")
    return room


def assert_room_owner(room: Room, requester_id: int) -> None:
    # Ownership is independent of membership: an owner who exited still owns.
    if room.created_by != requester_id:
        raise ForbiddenError("Only the room creator can delete it")


def assert_acting_as(caller: Identity, user_id: int) -> None:
    """A caller may only act on behalf of their own user id."""
    if caller.id != user_id:
        raise ForbiddenError("user_id does not match the authenticated user")
