"""
Coordinates on the board

Two ways of addressing a cell:
* `Position`: (row, column) indices into the grid. Zero-based, row 0 is the 8th rank (top of the board as seen by white).
* `Square`: algebraic notation, 'a1' - 'h8', which is what players and frontends use.

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

from src.core.exceptions import InvalidSquareError

# Chess board is always 8x8. Just in case we want to try some funky stuff, make it adjustable
BOARD_DIMENSIONS = (8, 8)
FILES = "abcdefgh"


@dataclass(frozen=True)
class Position:
    row: int
    column: int

    def offset(self, d_row: int, d_column: int) -> Position:
        return Position(self.row + d_row, self.column + d_column)

    def is_within_bounds(self) -> bool:
        return (0 <= self.row < BOARD_DIMENSIONS[0]) and (
            0 <= self.column < BOARD_DIMENSIONS[1]
        )


@dataclass(frozen=True)
class Square:
    file: str
    rank: int

    def __post_init__(self) -> None:
        valid_file = len(self.file) == 1 and self.file in FILES[: BOARD_DIMENSIONS[1]]
        if not valid_file or not (
            1 <= self.rank <= BOARD_DIMENSIONS[0]
        ):
            raise InvalidSquareError(
                f"Error instantiating square {self.file}{self.rank}. Valid values are from a1 to h8."
            )

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a1' - 'h8'"""
        if len(sq) != 2 or not sq[1].isdigit():
            raise InvalidSquareError(f"Cannot interpret {sq!r} as a square.")
        return cls(sq[0].lower(), int(sq[1]))

    def to_algebraic(self) -> str:
        return f"{self.file}{self.rank}"

    def to_position(self) -> Position:
        """
        Rank 1 is the bottom row of the grid (highest row index), the a-file the leftmost column.
        ex. a8 -> (0, 0), h1 -> (7, 7), e2 -> (6, 4)
        """
        return Position(BOARD_DIMENSIONS[0] - self.rank, ord(self.file) - ord("a"))

    @classmethod
    def from_position(cls, position: Position) -> Square:
        """Exact inverse of `to_position`"""
        return cls(chr(ord("a") + position.column), BOARD_DIMENSIONS[0] - position.row)

    def __str__(self) -> str:
        return self.to_algebraic()
