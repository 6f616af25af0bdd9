"""Storage of game records, independent of where they end up (SQL database, in-memory dict for tests)."""

from typing import Protocol
from uuid import UUID

from src.core.models import GameModel


class GameRepository(Protocol):
    """
    Keeps one GameModel per game id: the board position and turn, status and winner,
    move history, captured pieces and (for games against the computer) its color and difficulty.
    """

    def get_game(self, game_id: UUID) -> GameModel | None:
        """The stored record, or None for an unknown id."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store a new record under a fresh id. Returns what got stored together with that id."""
        ...

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Replace the whole record after a move or reset. None if the id is unknown."""
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove the record. Returns the removed record, or None if there was nothing to remove."""
        ...
