from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from miniapp_rooms.application.exceptions import ConflictError
from miniapp_rooms.domain.entities.room import Room
from miniapp_rooms.infrastructure.db.errors import (
    FOREIGN_KEY_VIOLATION,
    UNIQUE_VIOLATION,
    sqlstate,
    storage_errors,
)
from miniapp_rooms.infrastructure.db.mappers import room as mapper
from miniapp_rooms.infrastructure.db.models.room import RoomModel
from miniapp_rooms.infrastructure.db.models.room_member import RoomMemberModel


class RoomReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @storage_errors
    async def get_by_id(self, room_id: str) -> Room | None:
        # populate_existing: membership may have changed through core statements
        stmt = (
            select(RoomModel)
            .where(RoomModel.room_id == room_id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    @storage_errors
    async def list_for_member(self, user_id: int) -> list[Room]:
        stmt = (
            select(RoomModel)
            .join(RoomMemberModel, RoomMemberModel.room_id == RoomModel.room_id)
            .where(RoomMemberModel.user_id == user_id)
            .order_by(RoomModel.created_at.desc(), RoomModel.room_id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]


class RoomWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @storage_errors
    async def insert(self, room: Room) -> Room:
        model = mapper.entity_to_model(room)
        try:
            # savepoint keeps the surrounding transaction usable after a conflict
            async with self._session.begin_nested():
                self._session.add(model)
                await self._session.flush()
        except IntegrityError as exc:
            if sqlstate(exc) == UNIQUE_VIOLATION:
                raise ConflictError(f"Room id already taken: {room.room_id}") from exc
            raise
        return mapper.model_to_entity(model)

    @storage_errors
    async def add_member(self, room_id: str, user_id: int) -> bool:
        stmt = (
            pg_insert(RoomMemberModel)
            .values(room_id=room_id, user_id=user_id)
            .on_conflict_do_nothing(constraint="uq_room_member")
        )
        try:
            async with self._session.begin_nested():
                await self._session.execute(stmt)
        except IntegrityError as exc:
            if sqlstate(exc) == FOREIGN_KEY_VIOLATION:
                return False
            raise
        return True

    @storage_errors
    async def remove_member(self, room_id: str, user_id: int) -> None:
        stmt = delete(RoomMemberModel).where(
            RoomMemberModel.room_id == room_id,
            RoomMemberModel.user_id == user_id,
        )
        await self._session.execute(stmt)

    @storage_errors
    async def delete_owned(self, room_id: str, owner_id: int) -> bool:
        stmt = delete(RoomModel).where(
            RoomModel.room_id == room_id,
            RoomModel.created_by == owner_id,
        )
        result = await self._session.execute(stmt)
        return result.rowcount > 0
