from __future__ import annotations

from fastapi import APIRouter

from miniapp_rooms.api.deps import ExtractorDep, InitData, UoWDep, VerifierDep
from miniapp_rooms.api.v1.schemas.identity import IdentityResponse
from miniapp_rooms.services import auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("", response_model=IdentityResponse)
async def authenticate(
    init_data: InitData,
    verifier: VerifierDep,
    extractor: ExtractorDep,
    uow: UoWDep,
) -> IdentityResponse:
    identity = await auth_service.authenticate(init_data, verifier, extractor, uow)
    return IdentityResponse.model_validate(identity, from_attributes=True)
