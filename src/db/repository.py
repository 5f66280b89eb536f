"""
Protocol repository (implemented with SQLAlchemy in sql_repository.py, and by an in-memory dictionary in the service tests)

A stored match is always a committed state: the service only writes after a move passed all checks, so rejected moves never reach this layer.
"""

from typing import Protocol
from uuid import UUID

from src.core.models import MatchModel


class MatchRepository(Protocol):
    """Persistence layer orchestration"""

    def get_match(self, match_id: UUID) -> MatchModel | None:
        """Match by ID, or None if there is no such record."""
        ...

    def create_match(self, match: MatchModel) -> tuple[MatchModel, UUID]:
        """Store a freshly set up match. The repository hands out the ID."""
        ...

    def update_match(self, match_id: UUID, match: MatchModel) -> MatchModel | None:
        """Overwrite the stored state with the state after a committed move. None if the ID is unknown."""
        ...

    def delete_match(self, match_id: UUID) -> MatchModel | None:
        """Remove the record and return what was stored. None if the ID is unknown (the service turns that into an error)."""
        ...
