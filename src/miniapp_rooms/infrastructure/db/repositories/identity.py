from __future__ import annotations

from sqlalchemy import func
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from miniapp_rooms.domain.entities.identity import Identity
from miniapp_rooms.infrastructure.db.errors import storage_errors
from miniapp_rooms.infrastructure.db.mappers import identity as mapper
from miniapp_rooms.infrastructure.db.models.identity import IdentityModel


class IdentityReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @storage_errors
    async def get_by_id(self, user_id: int) -> Identity | None:
        result = await self._session.get(IdentityModel, user_id)
        return mapper.model_to_entity(result) if result else None


class IdentityWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @storage_errors
    async def upsert(self, identity: Identity) -> Identity:
        values = mapper.entity_to_values(identity)
        stmt = pg_insert(IdentityModel).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[IdentityModel.id],
            set_={
                **{k: stmt.excluded[k] for k in values if k != "id"},
                "updated_at": func.now(),
            },
        ).returning(IdentityModel)
        result = await self._session.execute(
            stmt, execution_options={"populate_existing": True},
        )
        return mapper.model_to_entity(result.scalar_one())
