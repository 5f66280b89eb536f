"""Unit tests for /src/chess/moves.py"""

from typing import Callable

import pytest

import src.chess.moves as mv
from src.chess.board import Board
from src.chess.pieces import PIECE_TO_FEN, ChessPiece, Color, PieceType
from src.chess.square import Position, Square


def _squares(positions: set[Position]) -> set[str]:
    return {Square.from_position(position).to_algebraic() for position in positions}


def _position(square_name: str) -> Position:
    return Square.from_algebraic(square_name).to_position()


@pytest.fixture
def board_with_single_piece() -> Callable[[PieceType, Color, str], Board]:
    """Call the inner function that will be returned with the desired piece type, color, and square"""

    def _create_board(piece_type: PieceType, color: Color, square_name: str = "d4") -> Board:
        board = Board()
        board.place_piece(ChessPiece(piece_type, color), _position(square_name))
        return board

    return _create_board


def _board_from_placements(placements: dict[str, str]) -> Board:
    """ex. {'e4': 'P', 'd5': 'p'}"""
    board = Board()
    for square_name, fen_char in placements.items():
        board.place_piece(ChessPiece.from_fen(fen_char), _position(square_name))
    return board


# --- SLIDING PIECES ---
@pytest.mark.parametrize(
    "piece_type, square_name, expected_count",
    [
        (PieceType.ROOK, "d4", 14),
        (PieceType.ROOK, "a1", 14),
        (PieceType.BISHOP, "d4", 13),
        (PieceType.BISHOP, "a1", 7),
        (PieceType.QUEEN, "d4", 27),
        (PieceType.QUEEN, "h8", 21),
        (PieceType.KNIGHT, "d4", 8),
        (PieceType.KNIGHT, "a1", 2),
        (PieceType.KNIGHT, "b1", 3),
        (PieceType.KING, "d4", 8),
        (PieceType.KING, "a1", 3),
        (PieceType.KING, "e1", 5),
    ],
)
def test_move_count_on_empty_board(
    board_with_single_piece: Callable[[PieceType, Color, str], Board],
    piece_type: PieceType,
    square_name: str,
    expected_count: int,
) -> None:
    """Number of reachable squares of a lone piece only depends on where it stands (not on its color)"""
    for color in Color:
        board = board_with_single_piece(piece_type, color, square_name)
        moves = mv.MOVEMENT_RULES[piece_type](_position(square_name), board)
        assert len(moves) == expected_count


def test_rook_moves_on_empty_board(
    board_with_single_piece: Callable[[PieceType, Color, str], Board],
) -> None:
    board = board_with_single_piece(PieceType.ROOK, Color.WHITE, "d4")
    moves = mv.candidate_rook_moves(_position("d4"), board)
    expected = {f"d{rank}" for rank in range(1, 9) if rank != 4} | {
        f"{file}4" for file in "abcefgh"
    }
    assert _squares(moves) == expected


def test_knight_moves_on_empty_board(
    board_with_single_piece: Callable[[PieceType, Color, str], Board],
) -> None:
    board = board_with_single_piece(PieceType.KNIGHT, Color.BLACK, "g8")
    assert _squares(mv.candidate_knight_moves(_position("g8"), board)) == {"e7", "f6", "h6"}


def test_sliding_piece_stops_at_own_piece_and_captures_opponent() -> None:
    """Rook on d4: own pawn on d6 blocks (d6 excluded), opponent knight on f4 can be taken (f4 included, g4 not)"""
    board = _board_from_placements({"d4": "R", "d6": "P", "f4": "n"})
    moves = _squares(mv.candidate_rook_moves(_position("d4"), board))
    assert "d5" in moves
    assert "d6" not in moves
    assert "d7" not in moves
    assert "f4" in moves
    assert "g4" not in moves


def test_bishop_blocked_diagonal() -> None:
    board = _board_from_placements({"c1": "B", "d2": "P", "b2": "p"})
    moves = _squares(mv.candidate_bishop_moves(_position("c1"), board))
    assert moves == {"b2"}


def test_queen_combines_rook_and_bishop() -> None:
    board = _board_from_placements({"d4": "Q", "d6": "P", "f6": "p"})
    position = _position("d4")
    queen_moves = mv.candidate_queen_moves(position, board)
    assert queen_moves == mv.candidate_rook_moves(position, board) | mv.candidate_bishop_moves(
        position, board
    )


def test_king_cannot_take_own_piece() -> None:
    board = _board_from_placements({"e1": "K", "d1": "Q", "e2": "P", "f2": "p"})
    moves = _squares(mv.candidate_king_moves(_position("e1"), board))
    assert moves == {"d2", "f1", "f2"}


# --- PAWNS ---
@pytest.mark.parametrize(
    "color, square_name, expected",
    [
        (Color.WHITE, "e2", {"e3", "e4"}),
        (Color.BLACK, "e7", {"e6", "e5"}),
        (Color.WHITE, "a2", {"a3", "a4"}),
    ],
)
def test_pawn_first_move(
    board_with_single_piece: Callable[[PieceType, Color, str], Board],
    color: Color,
    square_name: str,
    expected: set[str],
) -> None:
    """A pawn that has not moved yet can move one or two squares forward"""
    board = board_with_single_piece(PieceType.PAWN, color, square_name)
    assert _squares(mv.candidate_pawn_moves(_position(square_name), board)) == expected


def test_pawn_after_first_move_steps_once() -> None:
    board = Board()
    pawn = ChessPiece(PieceType.PAWN, Color.WHITE, move_count=1)
    board.place_piece(pawn, _position("e3"))
    assert _squares(mv.candidate_pawn_moves(_position("e3"), board)) == {"e4"}


def test_pawn_blocked() -> None:
    """Pawns cannot take forward, and cannot jump over a piece on their first move"""
    board = _board_from_placements({"e2": "P", "e3": "n", "d7": "p", "d5": "P"})
    assert mv.candidate_pawn_moves(_position("e2"), board) == set()
    # only the double step is blocked
    assert _squares(mv.candidate_pawn_moves(_position("d7"), board)) == {"d6"}


def test_pawn_takes_diagonally_forward() -> None:
    board = _board_from_placements({"e4": "P", "d5": "p", "f5": "N", "d3": "p", "e5": "p"})
    board.piece(_position("e4")).increase_move_count()
    # f5 is an own piece, d3 is behind the pawn, e5 blocks the push
    assert _squares(mv.candidate_pawn_moves(_position("e4"), board)) == {"d5"}


def test_black_pawn_takes_down_the_board() -> None:
    board = _board_from_placements({"e5": "p", "d4": "P", "f4": "P", "f6": "P"})
    board.piece(_position("e5")).increase_move_count()
    assert _squares(mv.candidate_pawn_moves(_position("e5"), board)) == {"d4", "e4", "f4"}


def test_pawn_on_last_rank_has_no_moves() -> None:
    """No promotion: a pawn that reached the far edge is stuck"""
    board = _board_from_placements({"c8": "P"})
    assert mv.candidate_pawn_moves(_position("c8"), board) == set()


@pytest.mark.parametrize("piece_type", list(PieceType))
def test_every_piece_type_has_a_movement_rule(piece_type: PieceType) -> None:
    assert piece_type in mv.MOVEMENT_RULES
    assert PIECE_TO_FEN[piece_type]


def test_no_piece_to_move() -> None:
    with pytest.raises(ValueError):
        mv.candidate_rook_moves(_position("d4"), Board())
