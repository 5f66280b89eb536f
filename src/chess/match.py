"""
The ChessMatch class is the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating all the business logic required to play a turn:
validating the requested move, applying it, making sure you did not put yourself in check, and deciding whether the game continues.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Generator, Optional, Self

from src.chess.board import Board
from src.chess.pieces import ChessPiece
from src.chess.square import Position, Square
from src.core.exceptions import InvalidMoveError, MatchStateError, MissingKingError
from src.core.models import MatchModel, PieceRecord
from src.core.shared_types import Color, PieceType, Status

logger = logging.getLogger(__name__)

# Back rank, read from the a-file to the h-file
BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


@dataclass
class TrialMove:
    """Handle on a move that is applied to the board, but not (yet) committed."""

    captured_piece: Optional[ChessPiece]
    committed: bool = False

    def commit(self) -> None:
        self.committed = True


class ChessMatch:
    def __init__(self, board: Optional[Board] = None) -> None:
        """A new match in the standard starting position. Pass a board to start from a custom position instead."""
        self.board = board if board is not None else Board()
        self.turn = 1
        self.current_player = Color.WHITE
        self.check = False
        self.checkmate = False
        self.pieces_on_board: list[ChessPiece] = []
        self.captured_pieces: list[ChessPiece] = []

        if board is None:
            self._initial_setup()
        else:
            self.pieces_on_board = board.all_pieces()

    @classmethod
    def from_fen_layout(
        cls, layout: str, current_player: Color = Color.WHITE, turn: int = 1
    ) -> Self:
        """
        Start from the piece placement part of a FEN string. Convenient for puzzles and tests.

        NOTE: every piece starts with a move count of 0.
        A layout where the side to move is already mated is loaded as a finished match.
        """
        match = cls(Board.from_fen(layout))
        match.current_player = current_player
        match.turn = turn
        match._assert_kings_present()
        # the side that just "moved" cannot be in check: the side to move could simply take the king
        if match._test_check(current_player.opponent()):
            raise MatchStateError(
                f"Invalid layout: {current_player.opponent()} is in check while {current_player} is to move"
            )
        match.check = match._test_check(current_player)
        if match._test_checkmate(current_player):
            # same state as right after the mating move: the turn stays with the side that delivered mate
            match.checkmate = True
            match.current_player = current_player.opponent()
        return match

    @classmethod
    def from_model(cls, model: MatchModel) -> Self:
        """Define how to construct a ChessMatch from the information the Service layer actually has"""
        board = Board()
        pieces_on_board: list[ChessPiece] = []
        for record in model.pieces_on_board:
            if record.square is None:
                raise MatchStateError(f"Piece on the board without a square: {record}")
            piece = _piece_from_record(record)
            board.place_piece(piece, Square.from_algebraic(record.square).to_position())
            pieces_on_board.append(piece)

        match = cls(board)
        match.pieces_on_board = pieces_on_board
        match.captured_pieces = [_piece_from_record(record) for record in model.captured_pieces]
        match.turn = model.turn
        match.current_player = _parse_color(model.current_player)
        match.check = model.check
        match.checkmate = model.checkmate

        match._assert_kings_present()
        return match

    def to_model(self) -> MatchModel:
        """Encode back into a format the Service layer uses"""
        return MatchModel(
            turn=self.turn,
            current_player=self.current_player.value,
            check=self.check,
            checkmate=self.checkmate,
            status=self.status.value,
            pieces_on_board=[_piece_to_record(piece) for piece in self.pieces_on_board],
            captured_pieces=[_piece_to_record(piece) for piece in self.captured_pieces],
        )

    @property
    def status(self) -> Status:
        return Status.CHECKMATE if self.checkmate else Status.IN_PROGRESS

    @property
    def winner(self) -> Optional[Color]:
        """After checkmate the turn does not pass: the current player is the one who delivered mate."""
        return self.current_player if self.checkmate else None

    def pieces(self) -> list[list[Optional[ChessPiece]]]:
        """Grid of piece-or-None, for rendering"""
        return self.board.snapshot()

    def possible_moves(self, source: Square) -> set[Square]:
        """Move hints for the piece on `source`. Raises InvalidMoveError if it is not a piece you could move."""
        position = source.to_position()
        self._validate_source_position(position)
        piece = self.board.piece(position)
        # for the type checker: validation guarantees there is a piece
        assert piece is not None
        return {Square.from_position(target) for target in piece.possible_moves(self.board)}

    def perform_chess_move(self, source: Square, target: Square) -> Optional[ChessPiece]:
        """
        Attempt a move
        -----

        1. validate source and target
        2. apply the move
        3. moving into (or staying in) check? roll back and reject.
        4. update the check flag for the opponent
        5. checkmate? the match ends, turn does not pass.
        6. otherwise: next turn

        Returns the captured piece (if any)
        """
        source_position = source.to_position()
        target_position = target.to_position()
        self._validate_source_position(source_position)
        self._validate_target_position(source_position, target_position)

        with self._trial_move(source_position, target_position) as trial:
            if self._test_check(self.current_player):
                logger.debug("Rejected %s%s: exposes own king", source, target)
                raise InvalidMoveError("You can't put yourself in check")
            trial.commit()

        opponent = self.current_player.opponent()
        self.check = self._test_check(opponent)
        logger.info(
            "Turn %d: %s played %s%s%s",
            self.turn,
            self.current_player,
            source,
            target,
            " (check)" if self.check else "",
        )

        if self._test_checkmate(opponent):
            self.checkmate = True
            logger.info("Checkmate. %s wins on turn %d", self.current_player, self.turn)
        else:
            self._next_turn()

        return trial.captured_piece

    def place_new_piece(self, file: str, rank: int, piece: ChessPiece) -> None:
        self.board.place_piece(piece, Square(file, rank).to_position())
        self.pieces_on_board.append(piece)

    # -- MOVE EXECUTION ---
    def _make_move(self, source: Position, target: Position) -> Optional[ChessPiece]:
        piece = self.board.remove_piece(source)
        if piece is None:
            raise InvalidMoveError(f"There is no piece on source position {Square.from_position(source)}")
        piece.increase_move_count()
        captured_piece = self.board.remove_piece(target)
        self.board.place_piece(piece, target)

        if captured_piece is not None:
            self.pieces_on_board.remove(captured_piece)
            self.captured_pieces.append(captured_piece)

        return captured_piece

    def _undo_move(
        self, source: Position, target: Position, captured_piece: Optional[ChessPiece]
    ) -> None:
        piece = self.board.remove_piece(target)
        # for the type checker: only ever called right after _make_move(source, target)
        assert piece is not None
        piece.decrease_move_count()
        self.board.place_piece(piece, source)

        if captured_piece is not None:
            self.board.place_piece(captured_piece, target)
            self.captured_pieces.remove(captured_piece)
            self.pieces_on_board.append(captured_piece)

    @contextmanager
    def _trial_move(self, source: Position, target: Position) -> Generator[TrialMove, None, None]:
        """
        Apply the move for the duration of the with-block.
        The move is rolled back on leaving the block (also when an exception is raised), unless `commit()` was called.
        """
        trial = TrialMove(captured_piece=self._make_move(source, target))
        try:
            yield trial
        finally:
            if not trial.committed:
                self._undo_move(source, target, trial.captured_piece)

    # -- VALIDATION ---
    def _validate_source_position(self, position: Position) -> None:
        piece = self.board.piece(position)
        if piece is None:
            raise InvalidMoveError("There is no piece on source position")
        if piece.color != self.current_player:
            raise InvalidMoveError("The chosen piece is not yours")
        if not piece.is_there_any_possible_move(self.board):
            raise InvalidMoveError("There is no possible moves for the chosen piece")

    def _validate_target_position(self, source: Position, target: Position) -> None:
        piece = self.board.piece(source)
        if piece is None or not piece.can_move_to(self.board, target):
            raise InvalidMoveError("The chosen piece can't move to target position")

    # -- CHECK / CHECKMATE ---
    def _assert_kings_present(self) -> None:
        """Positions loaded from outside must have exactly one king per side, otherwise check detection is meaningless"""
        for color in Color:
            kings = [piece for piece in self._pieces_of(color) if piece.type == PieceType.KING]
            if len(kings) != 1:
                raise MatchStateError(
                    f"Expected a single {color} king on the board, found {len(kings)}"
                )

    def _king(self, color: Color) -> ChessPiece:
        for piece in self._pieces_of(color):
            if piece.type == PieceType.KING:
                return piece
        raise MissingKingError(f"There is no {color} king on the board")

    def _pieces_of(self, color: Color) -> list[ChessPiece]:
        return [piece for piece in self.pieces_on_board if piece.color == color]

    def _test_check(self, color: Color) -> bool:
        """Is the king of `color` attacked by any of the opponent's pieces?"""
        king_position = self._king(color).position
        return any(
            king_position in piece.possible_moves(self.board)
            for piece in self._pieces_of(color.opponent())
        )

    def _test_checkmate(self, color: Color) -> bool:
        """
        In check, and no move of any own piece gets you out of it.
        ----

        Every reachable square of every own piece is tried on the board and rolled back again.
        NOTE: candidates are not filtered for self-exposure first: the check test after the trial move covers it.
        """
        if not self._test_check(color):
            return False

        # snapshot: trial captures shuffle the list around
        for piece in list(self._pieces_of(color)):
            source = piece.position
            # for the type checker: pieces on the board always have a position
            assert source is not None
            for target in piece.possible_moves(self.board):
                with self._trial_move(source, target):
                    still_in_check = self._test_check(color)
                if not still_in_check:
                    return False
        return True

    # -- TURN BOOKKEEPING ---
    def _next_turn(self) -> None:
        self.turn += 1
        self.current_player = self.current_player.opponent()

    def _initial_setup(self) -> None:
        for color, back_rank, pawn_rank in ((Color.WHITE, 1, 2), (Color.BLACK, 8, 7)):
            for file, piece_type in zip("abcdefgh", BACK_RANK):
                self.place_new_piece(file, back_rank, ChessPiece(piece_type, color))
                self.place_new_piece(file, pawn_rank, ChessPiece(PieceType.PAWN, color))


# --- CONVERSION HELPERS ---
def _parse_color(value: str) -> Color:
    try:
        return Color(value)
    except ValueError:
        raise MatchStateError(
            f"Invalid color {value!r}. Pick one from {', '.join(Color)}"
        ) from None


def _parse_piece_type(value: str) -> PieceType:
    try:
        return PieceType(value)
    except ValueError:
        raise MatchStateError(
            f"Invalid piece type {value!r}. Pick one from {', '.join(PieceType)}"
        ) from None


def _piece_from_record(record: PieceRecord) -> ChessPiece:
    return ChessPiece(
        type=_parse_piece_type(record.piece_type),
        color=_parse_color(record.color),
        move_count=record.move_count,
    )


def _piece_to_record(piece: ChessPiece) -> PieceRecord:
    return PieceRecord(
        piece_type=piece.type.value,
        color=piece.color.value,
        move_count=piece.move_count,
        square=(
            Square.from_position(piece.position).to_algebraic()
            if piece.position is not None
            else None
        ),
    )
