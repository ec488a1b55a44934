from __future__ import annotations

import logging

from miniapp_rooms.application.ports.auth import IdentityExtractor, LaunchDataVerifier
from miniapp_rooms.application.uow import UnitOfWork
from miniapp_rooms.domain.entities.identity import Identity

logger = logging.getLogger(__name__)


async def resolve_identity(
    token: str,
    verifier: LaunchDataVerifier,
    extractor: IdentityExtractor,
) -> Identity:
    """Verify launch data and read the caller's identity, without persisting."""
    launch_data = await verifier.verify(token)
    return extractor.extract(launch_data)


async def authenticate(
    token: str,
    verifier: LaunchDataVerifier,
    extractor: IdentityExtractor,
    uow: UnitOfWork,
) -> Identity:
    """Verify launch data and upsert the identity it carries (latest wins)."""
    identity = await resolve_identity(token, verifier, extractor)
    async with uow:
        identity = await uow.identities_w.upsert(identity)
        await uow.commit()
    logger.info("Authenticated user %s", identity.id)
    return identity
