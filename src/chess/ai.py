"""
Computer opponent: picks one move out of a set of moves the rules already certified as legal.

Key idea: Use strategy pattern again: one selection function per difficulty.

The search holds no state of its own and never checks legality itself,
so whatever it returns should be submitted through ChessGame.make_move like any other move.
"""

import logging
import random
from typing import Callable, Optional

from src.chess.board import Board
from src.chess.moves import Move
from src.chess.rules import is_capture
from src.core.exceptions import NoMoveAvailableError
from src.core.shared_types import Color, Difficulty

_log = logging.getLogger(__name__)


def evaluate_material(board: Board, side: Color) -> int:
    """Static evaluation: the material of `side` minus the material of its opponent"""
    return board.material_balance(side)


def score_move(move: Move, board: Board, side: Color) -> int:
    """Play the move on a copy of the board (pawns promote to a queen by default) and evaluate the result."""
    scratch = board.copy()
    scratch.apply_move(move)
    return evaluate_material(scratch, side)


# --- SELECTION STRATEGIES ---
def select_random(legal_moves: list[Move], board: Board, side: Color, rng: random.Random) -> Move:
    """Easy: any legal move, all equally likely"""
    return rng.choice(legal_moves)


def select_capture_biased(
    legal_moves: list[Move], board: Board, side: Color, rng: random.Random
) -> Move:
    """Normal: take something if you can (any capture will do), otherwise play a random move"""
    captures = [move for move in legal_moves if is_capture(board, move, side)]
    return rng.choice(captures or legal_moves)


def select_best_material(
    legal_moves: list[Move], board: Board, side: Color, rng: random.Random
) -> Move:
    """
    Hard: greedy one-ply search
    ----

    Score the position right after each move (without looking at the opponent's reply)
    and pick the highest score. Ties go to the move encountered first, so the result only
    depends on the order of `legal_moves` (scan order when produced by the rules).
    """
    return max(legal_moves, key=lambda move: score_move(move, board, side))


SelectMoveFn = Callable[[list[Move], Board, Color, random.Random], Move]
SELECTION_STRATEGIES: dict[Difficulty, SelectMoveFn] = {
    Difficulty.EASY: select_random,
    Difficulty.NORMAL: select_capture_biased,
    Difficulty.HARD: select_best_material,
}


def choose_move(
    legal_moves: list[Move],
    board: Board,
    side: Color,
    difficulty: Difficulty,
    rng: Optional[random.Random] = None,
) -> Move:
    """
    Pick the computer's move.

    Callers should check the game is not over first: without legal moves there is nothing to choose from
    and NoMoveAvailableError is raised rather than guessing.
    """
    if not legal_moves:
        raise NoMoveAvailableError(f"No legal moves available for {side} to choose from.")

    strategy = SELECTION_STRATEGIES[difficulty]
    move = strategy(legal_moves, board, side, rng or random.Random())
    _log.debug(
        "%s (%s) picked %s out of %d moves", side, difficulty, move.to_uci(), len(legal_moves)
    )
    return move
