"""
Custom exceptions.

Everything a user (or a frontend) can trigger derives from GameError, so the upper layers can catch a single type.
MissingKingError is deliberately NOT a GameError: it means the piece bookkeeping is corrupted.
"""


class GameError(Exception):
    """Top-level error for anything going wrong while playing a match."""


class InvalidMoveError(GameError):
    """The requested move is rejected (empty source, wrong side, unreachable target, exposes own king, ...)"""


class InvalidSquareError(GameError):
    """Cannot interpret the given value as a square on the board."""


class BoardError(GameError):
    """Misuse of the board primitive: position outside the grid, or placing onto an occupied square."""


class MatchStateError(GameError):
    """The match is not in a state that allows the request (finished match, corrupted stored state)."""


class InvalidRequestError(GameError, ValueError):
    """Request data failed validation. Also a ValueError, so pydantic validators can raise it."""


class RepositoryError(GameError):
    """Record not found / persistence layer failure."""


class MissingKingError(RuntimeError):
    """A side has no king on the board. Can only happen if setup or capture bookkeeping is broken."""
