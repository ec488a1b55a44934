from __future__ import annotations

from typing import Protocol

from miniapp_rooms.domain.entities.room import Room


class RoomReader(Protocol):
    async def get_by_id(self, room_id: str) -> Room | None: ...

    async def list_for_member(self, user_id: int) -> list[Room]:
        """Rooms containing the user, newest first."""
        ...


class RoomWriter(Protocol):
    async def insert(self, room: Room) -> Room:
        """Insert a new room with its members.

        Raises ConflictError if ``room.room_id`` is already taken.
        """
        ...

    async def add_member(self, room_id: str, user_id: int) -> bool:
        """Atomic add-to-set. Returns False if the room does not exist."""
        ...

    async def remove_member(self, room_id: str, user_id: int) -> None: ...

    async def delete_owned(self, room_id: str, owner_id: int) -> bool:
        """Delete the room only if ``owner_id`` created it."""
        ...
