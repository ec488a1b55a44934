from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator


class CreateRoomRequest(BaseModel):
    room_name: str = Field(max_length=255)
    user_id: int

    @field_validator("room_name", mode="before")
    @classmethod
    def _strip_name(cls, value: Any) -> Any:
        # trim before max_length is checked
        return value.strip() if isinstance(value, str) else value


class RoomMemberRequest(BaseModel):
    user_id: int


class RoomResponse(BaseModel):
    room_id: str
    room_name: str
    created_by: int
    members: list[int]
    created_at: datetime

    model_config = {"from_attributes": True}


class RoomDeletedResponse(BaseModel):
    status: str = "deleted"
    room_id: str
