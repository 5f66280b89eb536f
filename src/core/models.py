"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from typing import Optional

# Type aliases to make the models easier to read
PieceColor = str
SquareName = str


@dataclass
class PieceRecord:
    """Transport-safe representation of a single piece. `square` is None for captured pieces."""

    piece_type: str
    color: PieceColor
    move_count: int
    square: Optional[SquareName]


@dataclass
class MatchModel:
    """Transport-safe representation of a match used between Service, DB, and domain layers."""

    turn: int
    current_player: PieceColor
    check: bool
    checkmate: bool
    status: str
    pieces_on_board: list[PieceRecord] = field(default_factory=list)
    captured_pieces: list[PieceRecord] = field(default_factory=list)
