"""Shared test fixtures."""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from types import TracebackType
from typing import Self

import pytest

from miniapp_rooms.application.exceptions import ConflictError
from miniapp_rooms.domain.entities.identity import Identity
from miniapp_rooms.domain.entities.room import Room
from miniapp_rooms.domain.value_objects.ids import new_room_id
from miniapp_rooms.infrastructure.auth.identity_extractor import FieldMapIdentityExtractor
from miniapp_rooms.infrastructure.auth.launch_data import sign_launch_data
from miniapp_rooms.infrastructure.auth.webapp_verifier import WebAppDataVerifier

BOT_TOKEN = "T1"


@pytest.fixture
def bot_token() -> str:
    return BOT_TOKEN


@pytest.fixture
def verifier() -> WebAppDataVerifier:
    return WebAppDataVerifier(BOT_TOKEN)


@pytest.fixture
def extractor() -> FieldMapIdentityExtractor:
    return FieldMapIdentityExtractor()


def make_init_data(bot_token: str = BOT_TOKEN, **fields: str) -> str:
    return sign_launch_data(fields, bot_token)


def make_identity(user_id: int = 42, first_name: str = "Ada") -> Identity:
    return Identity(id=user_id, first_name=first_name)


def make_room(
    *,
    room_id: str | None = None,
    name: str = "Lab Room",
    owner: int = 42,
    members: tuple[int, ...] | None = None,
    created_at: datetime | None = None,
) -> Room:
    return Room(
        room_id=room_id or new_room_id(),
        room_name=name,
        created_by=owner,
        members=members if members is not None else (owner,),
        created_at=created_at or datetime.now(timezone.utc),
    )


class FixedClock:
    def __init__(self, now: datetime | None = None) -> None:
        self._now = now or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._now

    def advance(self, seconds: float) -> None:
        self._now += timedelta(seconds=seconds)


@dataclass
class FakeDatabase:
    """Committed state shared by every FakeUoW bound to it."""
    rooms: dict[str, Room] = field(default_factory=dict)
    identities: dict[int, Identity] = field(default_factory=dict)

    def snapshot(self) -> tuple[dict[str, Room], dict[int, Identity]]:
        return dict(self.rooms), dict(self.identities)

    def restore(self, snap: tuple[dict[str, Room], dict[int, Identity]]) -> None:
        rooms, identities = snap
        self.rooms.clear()
        self.rooms.update(rooms)
        self.identities.clear()
        self.identities.update(identities)


@dataclass
class FakeRoomReader:
    _db: FakeDatabase

    async def get_by_id(self, room_id: str) -> Room | None:
        return self._db.rooms.get(room_id)

    async def list_for_member(self, user_id: int) -> list[Room]:
        rooms = [r for r in self._db.rooms.values() if user_id in r.members]
        rooms.sort(key=lambda r: r.room_id)
        rooms.sort(key=lambda r: r.created_at, reverse=True)
        return rooms


@dataclass
class FakeRoomWriter:
    _db: FakeDatabase
    insert_calls: int = 0

    async def insert(self, room: Room) -> Room:
        self.insert_calls += 1
        if room.room_id in self._db.rooms:
            raise ConflictError(f"Room id already taken: {room.room_id}")
        self._db.rooms[room.room_id] = room
        return room

    async def add_member(self, room_id: str, user_id: int) -> bool:
        room = self._db.rooms.get(room_id)
        if room is None:
            return False
        if user_id not in room.members:
            self._db.rooms[room_id] = dataclasses.replace(room, members=(*room.members, user_id))
        return True

    async def remove_member(self, room_id: str, user_id: int) -> None:
        room = self._db.rooms.get(room_id)
        if room is not None and user_id in room.members:
            members = tuple(m for m in room.members if m != user_id)
            self._db.rooms[room_id] = dataclasses.replace(room, members=members)

    async def delete_owned(self, room_id: str, owner_id: int) -> bool:
        room = self._db.rooms.get(room_id)
        if room is None or room.created_by != owner_id:
            return False
        del self._db.rooms[room_id]
        return True


@dataclass
class FakeIdentityReader:
    _db: FakeDatabase

    async def get_by_id(self, user_id: int) -> Identity | None:
        return self._db.identities.get(user_id)


@dataclass
class FakeIdentityWriter:
    _db: FakeDatabase

    async def upsert(self, identity: Identity) -> Identity:
        self._db.identities[identity.id] = identity
        return identity


@dataclass
class FakeUoW:
    """In-memory UoW for unit tests; rollback restores the last commit."""
    db: FakeDatabase = field(default_factory=FakeDatabase)
    rooms: FakeRoomReader | None = None
    rooms_w: FakeRoomWriter | None = None
    identities: FakeIdentityReader | None = None
    identities_w: FakeIdentityWriter | None = None
    _committed: bool = False
    _rolled_back: bool = False
    _snapshot: tuple | None = None

    def __post_init__(self) -> None:
        if self.rooms is None:
            self.rooms = FakeRoomReader(self.db)
        if self.rooms_w is None:
            self.rooms_w = FakeRoomWriter(self.db)
        if self.identities is None:
            self.identities = FakeIdentityReader(self.db)
        if self.identities_w is None:
            self.identities_w = FakeIdentityWriter(self.db)

    async def commit(self) -> None:
        self._committed = True
        self._snapshot = self.db.snapshot()

    async def rollback(self) -> None:
        self._rolled_back = True
        if self._snapshot is not None:
            self.db.restore(self._snapshot)

    async def __aenter__(self) -> Self:
        self._snapshot = self.db.snapshot()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            await self.rollback()


@pytest.fixture
def uow() -> FakeUoW:
    uow = FakeUoW()
    uow.db.identities[42] = make_identity(42, "Ada")
    uow.db.identities[7] = make_identity(7, "Alan")
    return uow
