"""SQLAlchemy repositories against a recording session, compiled for Postgres."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import IntegrityError, OperationalError

from miniapp_rooms.application.exceptions import ConflictError, StorageError
from miniapp_rooms.domain.entities.identity import Identity
from miniapp_rooms.infrastructure.db.errors import sqlstate
from miniapp_rooms.infrastructure.db.models.identity import IdentityModel
from miniapp_rooms.infrastructure.db.models.room import RoomModel
from miniapp_rooms.infrastructure.db.models.room_member import RoomMemberModel
from miniapp_rooms.infrastructure.db.repositories.identity import IdentityWriterRepo
from miniapp_rooms.infrastructure.db.repositories.room import RoomReaderRepo, RoomWriterRepo
from tests.conftest import make_room

CREATED_AT = datetime(2024, 1, 1, tzinfo=timezone.utc)


class DriverError(Exception):
    def __init__(self, code: str | None) -> None:
        super().__init__(f"sqlstate {code}")
        self.sqlstate = code


def integrity_error(code: str) -> IntegrityError:
    return IntegrityError("INSERT ...", {}, DriverError(code))


@dataclass
class FakeResult:
    rows: list[Any] = field(default_factory=list)
    rowcount: int = 0

    def scalar_one(self) -> Any:
        assert len(self.rows) == 1
        return self.rows[0]

    def scalar_one_or_none(self) -> Any:
        return self.rows[0] if self.rows else None

    def scalars(self) -> FakeResult:
        return self

    def all(self) -> list[Any]:
        return list(self.rows)


class FakeSavepoint:
    def __init__(self, session: RecordingSession) -> None:
        self._session = session

    async def __aenter__(self) -> FakeSavepoint:
        self._session.savepoints += 1
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is not None:
            self._session.savepoint_rollbacks += 1
        return False


@dataclass
class RecordingSession:
    """Stands in for AsyncSession; records statements instead of running them."""
    result: FakeResult = field(default_factory=FakeResult)
    error: Exception | None = None
    statements: list[Any] = field(default_factory=list)
    execution_options: list[dict[str, Any]] = field(default_factory=list)
    added: list[Any] = field(default_factory=list)
    savepoints: int = 0
    savepoint_rollbacks: int = 0

    def begin_nested(self) -> FakeSavepoint:
        return FakeSavepoint(self)

    def add(self, obj: Any) -> None:
        self.added.append(obj)

    async def flush(self) -> None:
        if self.error is not None:
            raise self.error

    async def execute(self, stmt: Any, *args: Any, **kwargs: Any) -> FakeResult:
        self.statements.append(stmt)
        self.execution_options.append(kwargs.get("execution_options") or {})
        if self.error is not None:
            raise self.error
        return self.result


def compile_pg(stmt: Any) -> tuple[str, dict[str, Any]]:
    compiled = stmt.compile(dialect=postgresql.dialect())
    return " ".join(str(compiled).split()), dict(compiled.params)


def room_model(room_id: str = "r1", owner: int = 42, members: tuple[int, ...] = (42,)) -> RoomModel:
    return RoomModel(
        room_id=room_id,
        room_name="Lab Room",
        created_by=owner,
        created_at=CREATED_AT,
        members=[RoomMemberModel(user_id=m, joined_at=CREATED_AT) for m in members],
    )


# -- RoomWriterRepo.add_member ---------------------------------------------


@pytest.mark.asyncio
async def test_add_member_is_single_insert_on_conflict_do_nothing():
    session = RecordingSession()

    added = await RoomWriterRepo(session).add_member("r1", 7)

    assert added is True
    assert len(session.statements) == 1
    sql, params = compile_pg(session.statements[0])
    assert sql.startswith("INSERT INTO room_members")
    assert "ON CONFLICT ON CONSTRAINT uq_room_member DO NOTHING" in sql
    assert "UPDATE" not in sql
    assert params["room_id"] == "r1"
    assert params["user_id"] == 7
    assert session.savepoints == 1


@pytest.mark.asyncio
async def test_add_member_to_missing_room_reports_false():
    session = RecordingSession(error=integrity_error("23503"))

    added = await RoomWriterRepo(session).add_member("gone", 7)

    assert added is False
    assert session.savepoint_rollbacks == 1


@pytest.mark.asyncio
async def test_add_member_other_integrity_error_is_storage_error():
    session = RecordingSession(error=integrity_error("23514"))

    with pytest.raises(StorageError):
        await RoomWriterRepo(session).add_member("r1", 7)


# -- RoomWriterRepo.remove_member ------------------------------------------


@pytest.mark.asyncio
async def test_remove_member_is_single_conditional_delete():
    session = RecordingSession()

    await RoomWriterRepo(session).remove_member("r1", 7)

    assert len(session.statements) == 1
    sql, params = compile_pg(session.statements[0])
    assert sql.startswith("DELETE FROM room_members WHERE")
    assert "room_members.room_id = " in sql
    assert "room_members.user_id = " in sql
    assert sorted(params.values(), key=str) == [7, "r1"]


# -- RoomWriterRepo.delete_owned -------------------------------------------


@pytest.mark.asyncio
async def test_delete_owned_is_conditioned_on_creator():
    session = RecordingSession(result=FakeResult(rowcount=1))

    deleted = await RoomWriterRepo(session).delete_owned("r1", 42)

    assert deleted is True
    sql, params = compile_pg(session.statements[0])
    assert sql.startswith("DELETE FROM rooms WHERE")
    assert "rooms.room_id = " in sql
    assert "rooms.created_by = " in sql
    assert sorted(params.values(), key=str) == [42, "r1"]


@pytest.mark.asyncio
async def test_delete_owned_no_matching_row():
    session = RecordingSession(result=FakeResult(rowcount=0))

    assert await RoomWriterRepo(session).delete_owned("r1", 7) is False


# -- RoomWriterRepo.insert -------------------------------------------------


@pytest.mark.asyncio
async def test_insert_adds_room_with_owner_membership_in_savepoint():
    session = RecordingSession()
    room = make_room(room_id="r1", owner=42, created_at=CREATED_AT)

    stored = await RoomWriterRepo(session).insert(room)

    assert stored == room
    assert session.savepoints == 1
    [model] = session.added
    assert isinstance(model, RoomModel)
    assert [m.user_id for m in model.members] == [42]


@pytest.mark.asyncio
async def test_insert_unique_violation_is_conflict():
    session = RecordingSession(error=integrity_error("23505"))

    with pytest.raises(ConflictError):
        await RoomWriterRepo(session).insert(make_room(room_id="taken"))

    assert session.savepoint_rollbacks == 1


@pytest.mark.asyncio
async def test_insert_foreign_key_violation_is_storage_error():
    session = RecordingSession(error=integrity_error("23503"))

    with pytest.raises(StorageError):
        await RoomWriterRepo(session).insert(make_room())


@pytest.mark.asyncio
async def test_connection_failure_is_storage_error():
    session = RecordingSession(error=OperationalError("SELECT 1", {}, DriverError(None)))

    with pytest.raises(StorageError):
        await RoomWriterRepo(session).remove_member("r1", 7)


def test_sqlstate_read_from_chained_driver_error():
    wrapper = Exception("adapted")
    wrapper.__cause__ = DriverError("23505")

    assert sqlstate(IntegrityError("INSERT ...", {}, wrapper)) == "23505"


# -- RoomReaderRepo --------------------------------------------------------


@pytest.mark.asyncio
async def test_get_by_id_reloads_membership():
    session = RecordingSession(result=FakeResult(rows=[room_model(members=(42, 7))]))

    room = await RoomReaderRepo(session).get_by_id("r1")

    assert room is not None
    assert room.members == (42, 7)
    stmt = session.statements[0]
    assert stmt.get_execution_options()["populate_existing"] is True
    sql, params = compile_pg(stmt)
    assert "WHERE rooms.room_id = " in sql
    assert list(params.values()) == ["r1"]


@pytest.mark.asyncio
async def test_get_by_id_missing():
    assert await RoomReaderRepo(RecordingSession()).get_by_id("nope") is None


@pytest.mark.asyncio
async def test_list_for_member_joins_members_newest_first():
    models = [room_model("r2"), room_model("r1")]
    session = RecordingSession(result=FakeResult(rows=models))

    rooms = await RoomReaderRepo(session).list_for_member(42)

    assert [r.room_id for r in rooms] == ["r2", "r1"]
    sql, params = compile_pg(session.statements[0])
    assert "JOIN room_members ON room_members.room_id = rooms.room_id" in sql
    assert "WHERE room_members.user_id = " in sql
    assert "ORDER BY rooms.created_at DESC, rooms.room_id" in sql
    assert list(params.values()) == [42]


# -- IdentityWriterRepo.upsert ---------------------------------------------


@pytest.mark.asyncio
async def test_upsert_replaces_every_field_on_conflict():
    stored = IdentityModel(id=42, first_name="Ada", last_name=None, username=None, language="en")
    session = RecordingSession(result=FakeResult(rows=[stored]))

    identity = await IdentityWriterRepo(session).upsert(Identity(id=42, first_name="Ada"))

    assert identity == Identity(id=42, first_name="Ada")
    assert session.execution_options[0] == {"populate_existing": True}
    sql, params = compile_pg(session.statements[0])
    assert sql.startswith("INSERT INTO identities")
    assert "ON CONFLICT (id) DO UPDATE SET" in sql
    for column in ("first_name", "last_name", "username", "language"):
        assert f"{column} = excluded.{column}" in sql
    assert "updated_at = now()" in sql
    assert "id = excluded.id" not in sql
    assert "RETURNING" in sql
    assert params["id"] == 42
    assert params["last_name"] is None
