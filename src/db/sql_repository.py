"""Implementation of (Game)Repository using SQLAlchemy"""

from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.models import GameModel
from src.db.schema import DBGame


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        game_db = self._fetch_game(game_id)
        if game_db:
            return self._to_model(game_db)
        return None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""

        new_id = uuid4()
        game_db = DBGame(id=new_id)
        self._copy_into(game_db, game)
        self.db.add(game_db)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db), new_id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Add new info to existing record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        self._copy_into(game_db, game)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = self._to_model(game_db)
        self.db.delete(game_db)
        self.db.commit()
        return game_model

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        return self.db.scalar(query)

    def _copy_into(self, game_db: DBGame, game: GameModel) -> None:
        """NOTE: JSON columns get fresh containers, otherwise SQLAlchemy does not notice in-place changes."""
        game_db.position_fen = game.position_fen
        game_db.turn = game.turn
        game_db.status = game.status
        game_db.winner = game.winner
        game_db.moves_uci = list(game.moves_uci)
        game_db.captured = {color: list(pieces) for color, pieces in game.captured.items()}
        game_db.ai_color = game.ai_color
        game_db.difficulty = game.difficulty

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            position_fen=game_db.position_fen,
            turn=game_db.turn,
            status=game_db.status,
            winner=game_db.winner,
            moves_uci=list(game_db.moves_uci),
            captured={color: list(pieces) for color, pieces in game_db.captured.items()},
            ai_color=game_db.ai_color,
            difficulty=game_db.difficulty,
        )
