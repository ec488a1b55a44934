from __future__ import annotations

from types import TracebackType
from typing import Self

from sqlalchemy.ext.asyncio import AsyncSession

from miniapp_rooms.infrastructure.db.errors import storage_errors
from miniapp_rooms.infrastructure.db.repositories.identity import (
    IdentityReaderRepo,
    IdentityWriterRepo,
)
from miniapp_rooms.infrastructure.db.repositories.room import (
    RoomReaderRepo,
    RoomWriterRepo,
)


class SqlAlchemyUoW:
    """Concrete Unit-of-Work backed by a single AsyncSession.

    Used as ``async with uow:`` it is one atomic scope: leaving the block with
    an exception rolls back everything done since the last commit.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self.rooms = RoomReaderRepo(session)
        self.rooms_w = RoomWriterRepo(session)
        self.identities = IdentityReaderRepo(session)
        self.identities_w = IdentityWriterRepo(session)

    @storage_errors
    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            await self.rollback()
