"""
Geometry/Base movement rules

Key idea: Use strategy pattern to define the reachable squares for each piece type.

The rules only answer "where can this piece go?". Whether the move would expose your own king is checked later by the ChessMatch.
"""

from typing import Callable, Optional, Protocol

from src.chess.square import Position
from src.core.shared_types import Color, PieceType


class Occupant(Protocol):
    """Just the parts of a piece the movement strategies need"""

    color: Color
    move_count: int


class Board(Protocol):
    """Just the parts of the board the movement strategies need"""

    def piece(self, position: Position) -> Optional[Occupant]: ...


# (d_row, d_column). NOTE row 0 is the 8th rank, so "up the board" is a negative d_row.
Vector = tuple[int, int]

DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]


def _is_opponent_piece(board: Board, position: Position, color: Color) -> bool:
    occupant = board.piece(position)
    return occupant is not None and occupant.color != color


def _own_color(position: Position, board: Board) -> Color:
    piece = board.piece(position)
    if piece is None:
        raise ValueError(f"No piece to generate moves for at {position}")
    return piece.color


# --- MOVEMENT RULES ---
def raycasting_move(
    position: Position, board: Board, directions: list[Vector]
) -> set[Position]:
    """
    Raycasting algorithm
    -----

    ---
    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board.
    """
    player_color = _own_color(position, board)

    moves: set[Position] = set()
    for d_row, d_column in directions:
        target = position.offset(d_row, d_column)
        while target.is_within_bounds():
            if board.piece(target) is not None:
                # only the first occupied square counts, and only if it is the opponent's: then it can be captured.
                if _is_opponent_piece(board, target, player_color):
                    moves.add(target)
                break
            moves.add(target)
            target = target.offset(d_row, d_column)
    return moves


def single_step_move(
    position: Position, board: Board, deltas: list[Vector]
) -> set[Position]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just jump a single step along a direction"""
    player_color = _own_color(position, board)

    moves: set[Position] = set()
    for d_row, d_column in deltas:
        target = position.offset(d_row, d_column)
        if not target.is_within_bounds():
            continue
        occupant = board.piece(target)
        if occupant is None or occupant.color != player_color:
            moves.add(target)
    return moves


def candidate_pawn_moves(position: Position, board: Board) -> set[Position]:
    """
    A pawn:
    - moves by a single square forward, onto an empty square.
    - It can move by two in its first move (both squares must be empty)
    - takes diagonally (forward)

    NOTE: no en passant / promotion.
    """
    pawn = board.piece(position)
    if pawn is None:
        raise ValueError(f"No piece to generate moves for at {position}")

    # White moves up the board (towards row 0), Black moves down the board
    forward = -1 if pawn.color == Color.WHITE else 1

    moves: set[Position] = set()
    one_step = position.offset(forward, 0)
    if one_step.is_within_bounds() and board.piece(one_step) is None:
        moves.add(one_step)
        two_steps = position.offset(2 * forward, 0)
        if (
            pawn.move_count == 0
            and two_steps.is_within_bounds()
            and board.piece(two_steps) is None
        ):
            moves.add(two_steps)

    for d_column in (-1, 1):
        target = position.offset(forward, d_column)
        if target.is_within_bounds() and _is_opponent_piece(board, target, pawn.color):
            moves.add(target)
    return moves


def candidate_knight_moves(position: Position, board: Board) -> set[Position]:
    """Knights always move such that |delta_row| + |delta_column| = 3"""
    return single_step_move(position, board, KNIGHT_DELTAS)


def candidate_bishop_moves(position: Position, board: Board) -> set[Position]:
    """Bishops move diagonally: |delta_row| = |delta_column|"""
    return raycasting_move(position, board, DIAGONALS)


def candidate_rook_moves(position: Position, board: Board) -> set[Position]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(position, board, STRAIGHTS)


def candidate_queen_moves(position: Position, board: Board) -> set[Position]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return candidate_bishop_moves(position, board) | candidate_rook_moves(
        position, board
    )


def candidate_king_moves(position: Position, board: Board) -> set[Position]:
    """The king can move by a single square at the time."""
    return single_step_move(position, board, DIAGONALS + STRAIGHTS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Position, Board], set[Position]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}
