from __future__ import annotations

from miniapp_rooms.domain.entities.room import Room
from miniapp_rooms.infrastructure.db.models.room import RoomModel
from miniapp_rooms.infrastructure.db.models.room_member import RoomMemberModel


def model_to_entity(model: RoomModel) -> Room:
    return Room(
        room_id=model.room_id,
        room_name=model.room_name,
        created_by=model.created_by,
        members=tuple(m.user_id for m in model.members),
        created_at=model.created_at,
    )


def entity_to_model(entity: Room) -> RoomModel:
    return RoomModel(
        room_id=entity.room_id,
        room_name=entity.room_name,
        created_by=entity.created_by,
        created_at=entity.created_at,
        members=[
            RoomMemberModel(user_id=user_id, joined_at=entity.created_at)
            for user_id in entity.members
        ],
    )
