from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class Room:
    room_id: str
    room_name: str
    created_by: int
    members: tuple[int, ...]
    created_at: datetime
