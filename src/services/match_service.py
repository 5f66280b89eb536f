"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
from typing import Optional
from uuid import UUID

from src.api.models import (
    CreateMatchRequest,
    DeleteMatchRequest,
    GetMatchRequest,
    MatchResponse,
    MoveRequest,
    MoveResponse,
    PieceResponse,
    PossibleMovesRequest,
    PossibleMovesResponse,
)
from src.chess.match import ChessMatch
from src.chess.pieces import ChessPiece
from src.chess.square import Square
from src.core.exceptions import MatchStateError, RepositoryError
from src.core.models import MatchModel
from src.db.repository import MatchRepository

logger = logging.getLogger(__name__)


class MatchService:
    """Orchestration of layers for a chess match."""

    def __init__(self, repository: MatchRepository) -> None:
        self.repo = repository

    # -- API routes logic ---
    def create_match(self, request: CreateMatchRequest) -> MatchResponse:
        """Start a new match, in the standard starting position unless a layout is requested."""
        new_match = (
            ChessMatch.from_fen_layout(request.starting_layout, request.current_player)
            if request.starting_layout
            else ChessMatch()
        )
        stored_match, match_id = self.repo.create_match(new_match.to_model())
        logger.info("Created match %s", match_id)
        return self._create_match_response(match_id, ChessMatch.from_model(stored_match))

    def get_match(self, request: GetMatchRequest) -> MatchResponse:
        """
        Retrieve current match state.
        ----
        Used in "polling" loop by frontend to check when it is the player's turn for instance.
        """
        match = self._fetch_match(request.match_id)
        return self._create_match_response(request.match_id, match)

    def possible_moves(self, request: PossibleMovesRequest) -> PossibleMovesResponse:
        """Move hints for a single piece (of the side to move)."""
        match = self._fetch_match(request.match_id)
        self._assert_in_progress(match)
        targets = match.possible_moves(Square.from_algebraic(request.from_square))
        return PossibleMovesResponse(
            match_id=request.match_id,
            from_square=request.from_square,
            possible_moves=sorted(target.to_algebraic() for target in targets),
        )

    def perform_move(self, request: MoveRequest) -> MoveResponse:
        """
        Make a move attempt.

        A rejected move raises before anything gets stored, so the persisted match only ever advances by committed moves.
        """
        match = self._fetch_match(request.match_id)
        self._assert_in_progress(match)

        captured_piece = match.perform_chess_move(
            Square.from_algebraic(request.from_square),
            Square.from_algebraic(request.to_square),
        )
        self.repo.update_match(request.match_id, match.to_model())

        return MoveResponse(
            match=self._create_match_response(request.match_id, match),
            captured_piece=_piece_response(captured_piece),
        )

    def delete_match(self, request: DeleteMatchRequest) -> None:
        """Handle a request to delete a match record."""
        deleted = self.repo.delete_match(request.match_id)
        if deleted is None:
            raise RepositoryError(f"Match with match_id={request.match_id} not found.")
        logger.info("Deleted match %s", request.match_id)

    # -- Internal helpers --
    def _create_match_response(self, match_id: UUID, match: ChessMatch) -> MatchResponse:
        """Convert a ChessMatch to a MatchResponse (for match with given ID.)"""
        return MatchResponse(
            match_id=match_id,
            turn=match.turn,
            current_player=match.current_player,
            check=match.check,
            checkmate=match.checkmate,
            status=match.status,
            winner=match.winner,
            layout=match.board.to_fen(),
            captured_pieces=[
                response
                for piece in match.captured_pieces
                if (response := _piece_response(piece)) is not None
            ],
        )

    def _assert_in_progress(self, match: ChessMatch) -> None:
        """A checkmated match is over: no more moves."""
        if match.checkmate:
            raise MatchStateError(f"Match is over. status: {match.status}")

    def _fetch_match(self, match_id: UUID) -> ChessMatch:
        """Attempt to find the match in the repository and raise error if it fails."""
        match_model: Optional[MatchModel] = self.repo.get_match(match_id)
        if match_model is None:
            raise RepositoryError(f"Match with {match_id=} not found.")
        return ChessMatch.from_model(match_model)


def _piece_response(piece: Optional[ChessPiece]) -> Optional[PieceResponse]:
    if piece is None:
        return None
    return PieceResponse(
        piece_type=piece.type,
        color=piece.color,
        move_count=piece.move_count,
        square=Square.from_position(piece.position).to_algebraic()
        if piece.position is not None
        else None,
    )
