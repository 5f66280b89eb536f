"""
Type definitions used across layers
"""

from enum import StrEnum
from typing import Self


class Status(StrEnum):
    IN_PROGRESS = "in progress"
    CHECKMATE = "checkmate"


class Color(StrEnum):
    """The two sides of a match. White always moves first."""

    WHITE = "white"
    BLACK = "black"

    def opponent(self) -> Self:
        return Color.BLACK if self == Color.WHITE else Color.WHITE


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"
