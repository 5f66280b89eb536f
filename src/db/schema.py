"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBMatch(Base):
    __tablename__ = "matches"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    turn: Mapped[int]
    current_player: Mapped[str]
    check: Mapped[bool]
    checkmate: Mapped[bool]
    status: Mapped[str]
    # list of serialized PieceRecords
    pieces_on_board: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    captured_pieces: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
