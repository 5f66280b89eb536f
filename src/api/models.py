"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.chess.square import Square
from src.core.exceptions import InvalidRequestError, InvalidSquareError
from src.core.shared_types import Color, PieceType, Status

SquareName = str


# --- REQUEST MODELS ---
class CreateMatchRequest(BaseModel):
    """Leave the layout out to start from the standard starting position."""

    starting_layout: Optional[str] = None
    current_player: Color = Color.WHITE

    @field_validator("starting_layout")
    @classmethod
    def validate_starting_layout(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        layout = value.strip()
        # only the piece placement part of a FEN string
        if " " in layout or len(layout.split("/")) != 8:
            raise InvalidRequestError(
                "Starting layout must be the piece placement part of a FEN string: 8 ranks separated by '/'."
            )
        return layout


class GetMatchRequest(BaseModel):
    match_id: UUID


class PossibleMovesRequest(BaseModel):
    match_id: UUID
    from_square: SquareName

    @field_validator("from_square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square_name(value)


class MoveRequest(BaseModel):
    match_id: UUID
    from_square: SquareName
    to_square: SquareName

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square_name(value)


class DeleteMatchRequest(BaseModel):
    match_id: UUID


def _validate_square_name(value: str) -> str:
    try:
        return Square.from_algebraic(value.strip()).to_algebraic()
    except InvalidSquareError as exc:
        raise InvalidRequestError(
            f"Cannot interpret {value!r} as a valid square name."
        ) from exc


# --- RESPONSE MODELS ---
class PieceResponse(BaseModel):
    piece_type: PieceType
    color: Color
    move_count: int
    square: Optional[SquareName]


class MatchResponse(BaseModel):
    match_id: UUID
    turn: int
    current_player: Color
    check: bool
    checkmate: bool
    status: Status
    winner: Optional[Color]
    # piece placement part of a FEN string, ex. rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
    layout: str
    captured_pieces: list[PieceResponse]


class PossibleMovesResponse(BaseModel):
    match_id: UUID
    from_square: SquareName
    possible_moves: list[SquareName]


class MoveResponse(BaseModel):
    match: MatchResponse
    captured_piece: Optional[PieceResponse]
