"""Implementation of (Match)Repository using SQLAlchemy"""

from dataclasses import asdict
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.models import MatchModel, PieceRecord
from src.db.schema import DBMatch


class SQLMatchRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_match(self, match_id: UUID) -> MatchModel | None:
        """Get match by ID, if record exists."""
        match_db = self._fetch_match(match_id)
        if match_db:
            return self._to_model(match_db)
        return None

    def create_match(self, match: MatchModel) -> tuple[MatchModel, UUID]:
        """Store new match and return the stored data + newly created match ID."""
        new_id = uuid4()
        match_db = DBMatch(
            id=new_id,
            turn=match.turn,
            current_player=match.current_player,
            check=match.check,
            checkmate=match.checkmate,
            status=match.status,
            pieces_on_board=_records_to_json(match.pieces_on_board),
            captured_pieces=_records_to_json(match.captured_pieces),
        )
        self.db.add(match_db)
        self.db.commit()
        self.db.refresh(match_db)
        return self._to_model(match_db), new_id

    def update_match(self, match_id: UUID, match: MatchModel) -> MatchModel | None:
        """Add new info to existing record."""
        match_db = self._fetch_match(match_id)
        if not match_db:
            return None
        match_db.turn = match.turn
        match_db.current_player = match.current_player
        match_db.check = match.check
        match_db.checkmate = match.checkmate
        match_db.status = match.status
        # NOTE assign new lists: SQLAlchemy does not track in-place mutation of JSON columns
        match_db.pieces_on_board = _records_to_json(match.pieces_on_board)
        match_db.captured_pieces = _records_to_json(match.captured_pieces)
        self.db.commit()
        self.db.refresh(match_db)
        return self._to_model(match_db)

    def delete_match(self, match_id: UUID) -> MatchModel | None:
        """Remove a match's record."""
        match_db = self._fetch_match(match_id)
        if not match_db:
            return None
        match_model = self._to_model(match_db)
        self.db.delete(match_db)
        self.db.commit()
        return match_model

    def _fetch_match(self, match_id: UUID) -> DBMatch | None:
        query = select(DBMatch).where(DBMatch.id == match_id)
        return self.db.scalar(query)

    def _to_model(self, match_db: DBMatch) -> MatchModel:
        """Convert SQLAlchemy model to data transfer model."""
        return MatchModel(
            turn=match_db.turn,
            current_player=match_db.current_player,
            check=match_db.check,
            checkmate=match_db.checkmate,
            status=match_db.status,
            pieces_on_board=_records_from_json(match_db.pieces_on_board),
            captured_pieces=_records_from_json(match_db.captured_pieces),
        )


def _records_to_json(records: list[PieceRecord]) -> list[dict[str, Any]]:
    return [asdict(record) for record in records]


def _records_from_json(data: list[dict[str, Any]]) -> list[PieceRecord]:
    return [PieceRecord(**record) for record in data]
