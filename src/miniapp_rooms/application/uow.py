from __future__ import annotations

from types import TracebackType
from typing import Protocol, Self

from miniapp_rooms.application.repositories.identity import (
    IdentityReader,
    IdentityWriter,
)
from miniapp_rooms.application.repositories.room import RoomReader, RoomWriter


class UnitOfWork(Protocol):
    rooms: RoomReader
    rooms_w: RoomWriter
    identities: IdentityReader
    identities_w: IdentityWriter

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...

    async def __aenter__(self) -> Self: ...
    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None: ...
