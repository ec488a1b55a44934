from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, ForeignKey, Index, String, text
from sqlalchemy.dialects.postgresql import TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column, relationship

from miniapp_rooms.infrastructure.db.base import Base
from miniapp_rooms.infrastructure.db.models.room_member import RoomMemberModel


class RoomModel(Base):
    __tablename__ = "rooms"

    room_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    room_name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_by: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("identities.id"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )

    # relationships
    members: Mapped[list[RoomMemberModel]] = relationship(
        RoomMemberModel,
        back_populates="room",
        lazy="selectin",
        order_by=[RoomMemberModel.joined_at, RoomMemberModel.id],
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("ix_rooms_created_by", "created_by"),
        Index("ix_rooms_created_at", created_at.desc()),
    )
