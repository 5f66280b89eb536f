"""The board primitive: a grid of cells, each holding at most one piece."""

from typing import Optional, Self

from src.chess.pieces import ChessPiece
from src.chess.square import BOARD_DIMENSIONS, Position
from src.core.exceptions import BoardError


class Board:
    def __init__(self, rows: int = BOARD_DIMENSIONS[0], columns: int = BOARD_DIMENSIONS[1]) -> None:
        if rows < 1 or columns < 1:
            raise BoardError(
                f"Error creating board: there must be at least 1 row and 1 column. Got {rows}x{columns}"
            )
        self.rows = rows
        self.columns = columns
        self._grid: list[list[Optional[ChessPiece]]] = [
            [None] * columns for _ in range(rows)
        ]

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the piece placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank, starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank are the white pieces.
        """
        board = cls()
        fen_by_ranks = fen_str.split("/")
        if len(fen_by_ranks) != board.rows:
            raise BoardError(f"Expected {board.rows} ranks in FEN layout, got {fen_str!r}")

        # FEN string is read from top rank (8th) to bottom rank (1st), which matches the row order of the grid
        for row, fen_one_rank in enumerate(fen_by_ranks):
            column = 0
            for character in fen_one_rank:
                if character.isdigit():
                    # A number denotes the amount of empty squares after each other
                    column += int(character)
                    continue
                if character.lower() not in "pnbrqk":
                    raise BoardError(f"Unknown piece {character!r} in FEN layout {fen_str!r}")
                board.place_piece(ChessPiece.from_fen(character), Position(row, column))
                column += 1
            if column != board.columns:
                raise BoardError(f"Rank {fen_one_rank!r} does not cover {board.columns} files")
        return board

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(self._rank_to_fen(row) for row in range(self.rows))

    def _rank_to_fen(self, row: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for column in range(self.columns):
            piece = self.piece(Position(row, column))
            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def position_exists(self, position: Position) -> bool:
        return 0 <= position.row < self.rows and 0 <= position.column < self.columns

    def piece(self, position: Position) -> Optional[ChessPiece]:
        self._assert_exists(position)
        return self._grid[position.row][position.column]

    def has_piece(self, position: Position) -> bool:
        return self.piece(position) is not None

    def place_piece(self, piece: ChessPiece, position: Position) -> None:
        if self.has_piece(position):
            raise BoardError(f"There is already a piece on position {position}")
        self._grid[position.row][position.column] = piece
        piece.position = position

    def remove_piece(self, position: Position) -> Optional[ChessPiece]:
        """Take the piece off the board (if any) and return it"""
        piece = self.piece(position)
        if piece is None:
            return None
        self._grid[position.row][position.column] = None
        piece.position = None
        return piece

    def all_pieces(self) -> list[ChessPiece]:
        return [piece for row in self._grid for piece in row if piece is not None]

    def snapshot(self) -> list[list[Optional[ChessPiece]]]:
        """Copy of the grid (rows of piece-or-None), for rendering. Mutating it does not affect the board."""
        return [list(row) for row in self._grid]

    def _assert_exists(self, position: Position) -> None:
        if not self.position_exists(position):
            raise BoardError(f"Position {position} not on the board")
