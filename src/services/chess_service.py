"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
import random
import threading
import weakref
from contextlib import contextmanager
from typing import Iterator, Optional
from uuid import UUID

from src.api.models import (
    AIMoveRequest,
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    ResetGameRequest,
)
from src.chess.ai import choose_move
from src.chess.game import ChessGame
from src.chess.moves import Move
from src.chess.square import Square
from src.core.exceptions import GameStateError, IllegalMoveError, RepositoryError
from src.core.models import GameModel
from src.core.shared_types import Color, Difficulty
from src.db.repository import GameRepository

_log = logging.getLogger(__name__)


class GameLocks:
    """
    One lock per game.

    The engine is not meant to be used by several callers at once: every load -> change -> store
    cycle on a game must run on its own.
    Locks are only referenced weakly: once nobody holds or waits for the lock of a game, its entry disappears.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: weakref.WeakValueDictionary[UUID, threading.Lock] = weakref.WeakValueDictionary()

    @contextmanager
    def hold(self, game_id: UUID) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(game_id, threading.Lock())
        with lock:
            yield

    def forget(self, game_id: UUID) -> None:
        with self._guard:
            self._locks.pop(game_id, None)


# Services are created per request, the locks must outlive them.
GAME_LOCKS = GameLocks()


class ChessService:
    """Orchestration of layers for chess game."""

    def __init__(
        self,
        repository: GameRepository,
        rng: Optional[random.Random] = None,
        default_difficulty: Difficulty = Difficulty.NORMAL,
        locks: GameLocks = GAME_LOCKS,
    ) -> None:
        self.repo = repository
        self.rng = rng or random.Random()
        self.default_difficulty = default_difficulty
        self.locks = locks

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """A player requested a new game (against another person, or against the computer)."""

        game = (
            ChessGame.from_fen(request.starting_position, request.turn)
            if request.starting_position
            else ChessGame()
        )
        model = game.to_model()
        if request.ai_color is not None:
            model.ai_color = request.ai_color.value
            model.difficulty = (request.difficulty or self.default_difficulty).value

        stored_game, game_id = self.repo.create_game(model)
        _log.info("Created game %s (computer plays: %s)", game_id, model.ai_color)
        return self._create_game_response(game_id, stored_game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to check when it is the player's turn for instance.
        """
        game_model = self._fetch_game(request.game_id)
        return self._create_game_response(request.game_id, game_model)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Legal moves of the piece on the requested square (empty if it cannot move, or it is not its turn)."""
        stored_model = self._fetch_game(request.game_id)
        game = ChessGame.from_model(stored_model)

        moves = game.get_legal_moves_for(Square.from_algebraic(request.square))
        return LegalMovesResponse(
            game_id=request.game_id,
            square=request.square,
            legal_moves=[move.to_uci() for move in moves],
            destinations=[move.to_square.to_algebraic() for move in moves],
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """Make a move attempt (in a game against the computer: only on the human player's turn)."""
        move = Move(
            from_square=Square.from_algebraic(request.from_square),
            to_square=Square.from_algebraic(request.to_square),
            promote_to=request.promote_to,
        )

        with self.locks.hold(request.game_id):
            stored_model = self._fetch_game(request.game_id)
            game = ChessGame.from_model(stored_model)
            if stored_model.ai_color is not None and game.turn == stored_model.ai_color:
                raise GameStateError(
                    f"It is the computer's turn ({stored_model.ai_color}). Request an AI move instead."
                )

            if not game.make_move(move):
                _log.debug("Rejected move %s in game %s", move.to_uci(), request.game_id)
                raise IllegalMoveError(f"Move not allowed: {move.to_uci()}")

            after_move = self._store(request.game_id, game, stored_model)

        return self._create_game_response(request.game_id, after_move)

    def ai_move(self, request: AIMoveRequest) -> GameResponse:
        """
        Let the computer make the move for the player to move (its own color, when the game has one).
        ----
        The chosen move goes through the same legality check as any player's move.
        """
        with self.locks.hold(request.game_id):
            stored_model = self._fetch_game(request.game_id)
            game = ChessGame.from_model(stored_model)
            if game.is_game_over():
                raise GameStateError(f"Game is not in progress. status: {game.status}")
            if stored_model.ai_color is not None and game.turn != stored_model.ai_color:
                raise GameStateError(
                    f"The computer plays {stored_model.ai_color}, it is {game.turn}'s turn."
                )

            difficulty = request.difficulty or self._stored_difficulty(stored_model)
            move = choose_move(
                game.all_legal_moves(),
                game.get_board(),
                game.get_turn(),
                difficulty,
                self.rng,
            )
            if not game.make_move(move):
                raise IllegalMoveError(f"Computer move not allowed: {move.to_uci()}")

            after_move = self._store(request.game_id, game, stored_model)

        _log.debug("Computer played %s in game %s", move.to_uci(), request.game_id)
        return self._create_game_response(request.game_id, after_move)

    def reset_game(self, request: ResetGameRequest) -> GameResponse:
        """Start over from the standard starting position (keeps the opponent settings)."""
        with self.locks.hold(request.game_id):
            stored_model = self._fetch_game(request.game_id)
            game = ChessGame.from_model(stored_model)
            game.reset()
            after_reset = self._store(request.game_id, game, stored_model)

        _log.info("Reset game %s", request.game_id)
        return self._create_game_response(request.game_id, after_reset)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        with self.locks.hold(request.game_id):
            self.repo.delete_game(request.game_id)
        self.locks.forget(request.game_id)
        _log.info("Deleted game %s", request.game_id)

    # -- Internal helpers --
    def _store(self, game_id: UUID, game: ChessGame, previous: GameModel) -> GameModel:
        """Capture updated state in GameModel (the opponent settings are not part of the ChessGame) and store it."""
        model = game.to_model()
        model.ai_color = previous.ai_color
        model.difficulty = previous.difficulty
        self.repo.update_game(game_id, model)
        return model

    def _stored_difficulty(self, model: GameModel) -> Difficulty:
        return Difficulty(model.difficulty) if model.difficulty else self.default_difficulty

    def _create_game_response(self, game_id: UUID, model: GameModel) -> GameResponse:
        """Convert info in GameModel to a GameResponse (for game with given ID.)"""
        game = ChessGame.from_model(model)
        return GameResponse(
            game_id=game_id,
            position=model.position_fen,
            turn=Color(model.turn),
            status=game.status,
            winner=model.winner,
            in_check=game.is_check(game.get_turn()),
            message=game.status_message(),
            move_history=model.moves_uci,
            captured=model.captured,
            ai_color=Color(model.ai_color) if model.ai_color else None,
            difficulty=Difficulty(model.difficulty) if model.difficulty else None,
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model
