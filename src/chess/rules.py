"""
Legality of moves.

Pure functions: the board and the side we are asking about are always passed in explicitly.
Nothing here mutates the board that is handed in; hypothetical moves are played out on a copy.
"""

from src.chess.board import Board
from src.chess.moves import MOVEMENT_RULES, PROMOTION_OPTIONS, Move
from src.chess.square import Square, all_squares
from src.core.shared_types import Color


def is_legal_move(board: Board, move: Move, color: Color) -> bool:
    """
    Can `color` play this move on this board?
    ----

    1. Basic sanity: both squares on the board and different, your own piece on the starting square,
       not landing on another one of your pieces.
    2. The piece must move according to its movement pattern.
    3. The move must not put (or leave) your own king in check.
    """
    from_square, to_square = move.from_square, move.to_square
    if not (from_square.is_within_bounds() and to_square.is_within_bounds()):
        return False
    if from_square == to_square:
        return False
    if move.promote_to is not None and move.promote_to not in PROMOTION_OPTIONS:
        return False

    piece = board.piece_at(from_square)
    if piece is None or piece.color != color:
        return False

    target = board.piece_at(to_square)
    if target is not None and target.color == color:
        return False

    movement_rule = MOVEMENT_RULES[piece.type]
    if not movement_rule(board, from_square, to_square, color):
        return False

    return not is_putting_yourself_in_check(board, move, color)


def is_putting_yourself_in_check(board: Board, move: Move, color: Color) -> bool:
    """Return True if the move puts you in check

    plan:
    1. Copy the board
    2. make the candidate move
    3. determine if king is in check on the new board
    """
    scratch = board.copy()
    scratch.apply_move(move)
    return scratch.is_check(color)


def legal_moves_from(board: Board, square: Square, color: Color) -> list[Move]:
    """All legal moves of the piece on `square` (destinations in scan order). Empty if it is not your piece."""
    piece = board.piece_at(square)
    if piece is None or piece.color != color:
        return []
    candidate_moves = [
        Move(square, destination)
        for destination in all_squares()
        if destination != square
    ]
    return [move for move in candidate_moves if is_legal_move(board, move, color)]


def generate_legal_moves(board: Board, color: Color) -> list[Move]:
    """
    List of legal moves for the player with the 'color' pieces
    ----
    Ordered by starting square, then by destination square (both in scan order).
    """
    legal_moves: list[Move] = []
    for square in board.locate_color(color):
        legal_moves.extend(legal_moves_from(board, square, color))
    return legal_moves


def has_legal_move(board: Board, color: Color) -> bool:
    """Stops at the first legal move found"""
    return any(
        is_legal_move(board, Move(square, destination), color)
        for square in board.locate_color(color)
        for destination in all_squares()
        if destination != square
    )


def is_capture(board: Board, move: Move, color: Color) -> bool:
    """Does the move land on an opponent's piece?"""
    target = board.piece_at(move.to_square)
    return target is not None and target.color != color
