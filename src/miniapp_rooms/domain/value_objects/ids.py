from __future__ import annotations

import secrets
from typing import NewType

RoomId = NewType("RoomId", str)

MIN_ROOM_ID_BYTES = 8


def new_room_id(nbytes: int = MIN_ROOM_ID_BYTES) -> RoomId:
    """Random hex room id; never shorter than MIN_ROOM_ID_BYTES of entropy."""
    return RoomId(secrets.token_hex(max(nbytes, MIN_ROOM_ID_BYTES)))
