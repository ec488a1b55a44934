"""Import all models so Base.metadata sees every table."""
from miniapp_rooms.infrastructure.db.models.identity import IdentityModel
from miniapp_rooms.infrastructure.db.models.room import RoomModel
from miniapp_rooms.infrastructure.db.models.room_member import RoomMemberModel

__all__ = [
    "IdentityModel",
    "RoomMemberModel",
    "RoomModel",
]
