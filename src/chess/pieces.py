"""Defines the chess pieces"""

from dataclasses import dataclass
from typing import Optional, Self

from src.chess.moves import MOVEMENT_RULES, Board
from src.chess.square import Position
from src.core.shared_types import Color, PieceType

FEN_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}


# NOTE: eq=False -> two white pawns are still two different pieces. Lists of pieces rely on identity.
@dataclass(eq=False)
class ChessPiece:
    type: PieceType
    color: Color
    move_count: int = 0
    # cached for reverse lookup, kept up to date by the Board. None while off the board (captured).
    position: Optional[Position] = None

    @classmethod
    def from_fen(cls, character: str) -> Self:
        # lower case: Black pieces, upper case: White pieces
        color = Color.WHITE if character.isupper() else Color.BLACK
        piece_type = FEN_TO_PIECE[character.lower()]
        return cls(piece_type, color)

    def to_fen(self) -> str:
        return (
            PIECE_TO_FEN[self.type].upper()
            if self.color == Color.WHITE
            else PIECE_TO_FEN[self.type].lower()
        )

    def increase_move_count(self) -> None:
        self.move_count += 1

    def decrease_move_count(self) -> None:
        self.move_count -= 1

    def possible_moves(self, board: Board) -> set[Position]:
        """Squares this piece can reach on the given board (ignoring whether it exposes its own king)"""
        if self.position is None:
            return set()
        movement_rule = MOVEMENT_RULES[self.type]
        return movement_rule(self.position, board)

    def can_move_to(self, board: Board, position: Position) -> bool:
        return position in self.possible_moves(board)

    def is_there_any_possible_move(self, board: Board) -> bool:
        return bool(self.possible_moves(board))

    def __repr__(self) -> str:
        return f"ChessPiece({self.color} {self.type}, moves={self.move_count}, at={self.position})"
