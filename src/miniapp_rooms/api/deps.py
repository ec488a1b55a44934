"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated, AsyncIterator

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader

from miniapp_rooms.application.dto.identity_fields import IdentityFieldMap
from miniapp_rooms.application.ports.auth import IdentityExtractor, LaunchDataVerifier
from miniapp_rooms.config import settings
from miniapp_rooms.domain.entities.identity import Identity
from miniapp_rooms.infrastructure.auth.identity_extractor import FieldMapIdentityExtractor
from miniapp_rooms.infrastructure.auth.webapp_verifier import WebAppDataVerifier
from miniapp_rooms.infrastructure.db.session import AsyncSessionLocal
from miniapp_rooms.infrastructure.db.uow import SqlAlchemyUoW
from miniapp_rooms.services import auth_service

_init_data_scheme = APIKeyHeader(
    name=settings.INIT_DATA_HEADER,
    scheme_name="InitData",
    auto_error=False,
)


async def get_uow() -> AsyncIterator[SqlAlchemyUoW]:
    async with AsyncSessionLocal() as session:
        uow = SqlAlchemyUoW(session)
        try:
            yield uow
        finally:
            await session.close()


UoWDep = Annotated[SqlAlchemyUoW, Depends(get_uow)]


_verifier: LaunchDataVerifier | None = None


def get_verifier() -> LaunchDataVerifier:
    global _verifier  # noqa: PLW0603
    if _verifier is None:
        _verifier = WebAppDataVerifier(
            settings.BOT_TOKEN,
            max_age_seconds=settings.INIT_DATA_MAX_AGE_SECONDS,
        )
    return _verifier


def get_extractor() -> IdentityExtractor:
    return FieldMapIdentityExtractor(
        IdentityFieldMap.from_mapping(
            settings.IDENTITY_FIELDS,
            user_object=settings.IDENTITY_USER_OBJECT_FIELD,
        )
    )


VerifierDep = Annotated[LaunchDataVerifier, Depends(get_verifier)]
ExtractorDep = Annotated[IdentityExtractor, Depends(get_extractor)]


async def get_init_data(
    init_data: Annotated[str | None, Depends(_init_data_scheme)],
) -> str:
    if not init_data:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing launch data",
        )
    return init_data


InitData = Annotated[str, Depends(get_init_data)]


async def get_current_identity(
    init_data: InitData,
    verifier: VerifierDep,
    extractor: ExtractorDep,
) -> Identity:
    return await auth_service.resolve_identity(init_data, verifier, extractor)


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
