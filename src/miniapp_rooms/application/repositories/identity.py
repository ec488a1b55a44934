from __future__ import annotations

from typing import Protocol

from miniapp_rooms.domain.entities.identity import Identity


class IdentityReader(Protocol):
    async def get_by_id(self, user_id: int) -> Identity | None: ...


class IdentityWriter(Protocol):
    async def upsert(self, identity: Identity) -> Identity:
        """Insert, or replace every field of an existing identity."""
        ...
