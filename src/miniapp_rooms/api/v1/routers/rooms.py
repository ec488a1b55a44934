from __future__ import annotations

from fastapi import APIRouter, Query

from miniapp_rooms.api.deps import CurrentIdentity, UoWDep
from miniapp_rooms.api.v1.schemas.room import (
    CreateRoomRequest,
    RoomDeletedResponse,
    RoomMemberRequest,
    RoomResponse,
)
from miniapp_rooms.application.policies.permissions import assert_acting_as
from miniapp_rooms.config import settings
from miniapp_rooms.domain.value_objects.ids import new_room_id
from miniapp_rooms.services import room_service

router = APIRouter(prefix="/rooms", tags=["rooms"])


def _room_id() -> str:
    return new_room_id(settings.ROOM_ID_BYTES)


@router.post("", response_model=RoomResponse)
async def create_room(
    body: CreateRoomRequest,
    caller: CurrentIdentity,
    uow: UoWDep,
) -> RoomResponse:
    assert_acting_as(caller, body.user_id)
    room = await room_service.create_room(
        body.room_name,
        body.user_id,
        uow,
        id_factory=_room_id,
        max_attempts=settings.ROOM_ID_MAX_ATTEMPTS,
    )
    return RoomResponse.model_validate(room, from_attributes=True)


@router.get("", response_model=list[RoomResponse])
async def list_rooms(
    caller: CurrentIdentity,
    uow: UoWDep,
    user_id: int = Query(...),
) -> list[RoomResponse]:
    assert_acting_as(caller, user_id)
    rooms = await room_service.list_rooms_for_member(user_id, uow)
    return [RoomResponse.model_validate(r, from_attributes=True) for r in rooms]


@router.api_route("/{room_id}/join", methods=["PUT", "POST"], response_model=RoomResponse)
async def join_room(
    room_id: str,
    body: RoomMemberRequest,
    caller: CurrentIdentity,
    uow: UoWDep,
) -> RoomResponse:
    assert_acting_as(caller, body.user_id)
    room = await room_service.join_room(room_id, body.user_id, uow)
    return RoomResponse.model_validate(room, from_attributes=True)


@router.api_route("/{room_id}/exit", methods=["PUT", "POST"], response_model=RoomResponse)
async def exit_room(
    room_id: str,
    body: RoomMemberRequest,
    caller: CurrentIdentity,
    uow: UoWDep,
) -> RoomResponse:
    assert_acting_as(caller, body.user_id)
    room = await room_service.exit_room(room_id, body.user_id, uow)
    return RoomResponse.model_validate(room, from_attributes=True)


@router.api_route("/{room_id}", methods=["DELETE", "POST"], response_model=RoomDeletedResponse)
async def delete_room(
    room_id: str,
    body: RoomMemberRequest,
    caller: CurrentIdentity,
    uow: UoWDep,
) -> RoomDeletedResponse:
    assert_acting_as(caller, body.user_id)
    await room_service.delete_room(room_id, body.user_id, uow)
    return RoomDeletedResponse(room_id=room_id)
