"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define the movement pattern of each piece type.
A pattern only answers "does this piece move like that?". Whether the move leaves your own king
in check is decided later in rules.py.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Self

from src.chess.pieces import FEN_TO_PIECE, PIECE_TO_FEN, Piece
from src.chess.square import BOARD_DIMENSIONS, Square
from src.core.shared_types import Color, PieceType


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def piece_at(self, square: Square) -> Optional[Piece]: ...


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made"""

    from_square: Square
    to_square: Square
    promote_to: Optional[PieceType] = None

    @classmethod
    def from_uci(cls, uci: str) -> Self:
        """
        Universal Chess Interface:
        ---
        One of the standard chess notations for moves

        examples:
        * "e2e4": move the piece that was on e2 to e4
        * "e7e8q" : (pawn) moves from e7 to e8 and promotes to a queen (the q)
        """
        from_sq = Square.from_algebraic(uci[:2])
        to_sq = Square.from_algebraic(uci[2:4])
        promote_to = FEN_TO_PIECE[uci[4].lower()] if len(uci) == 5 else None
        return cls(from_sq, to_sq, promote_to)

    def to_uci(self) -> str:
        """Convert into UCI notation"""
        piece_char = PIECE_TO_FEN[self.promote_to] if self.promote_to else ""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}{piece_char}"


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def pawn_direction(color: Color) -> int:
    """White moves UP the board (increasing rows), black moves DOWN"""
    return 1 if color == Color.WHITE else -1


def pawn_starting_row(color: Color) -> int:
    return 1 if color == Color.WHITE else BOARD_DIMENSIONS[0] - 2


def promotion_row(color: Color) -> int:
    return BOARD_DIMENSIONS[0] - 1 if color == Color.WHITE else 0


def is_path_clear(board: Board, from_square: Square, to_square: Square) -> bool:
    """
    Walk from one square to the other along a straight line or diagonal.
    Every square strictly in between must be empty (the end points are not inspected).
    """
    d_row = _sign(to_square.row - from_square.row)
    d_col = _sign(to_square.col - from_square.col)
    square = from_square.offset(d_row, d_col)
    while square != to_square:
        if board.piece_at(square) is not None:
            return False
        square = square.offset(d_row, d_col)
    return True


# --- MOVEMENT PATTERNS ---
def pawn_pattern(board: Board, from_square: Square, to_square: Square, color: Color) -> bool:
    """
    A pawn:
    - moves by a single square forward onto an empty square.
    - can move by two from its starting row, if both squares are empty
    - takes diagonally (one square forward), only onto an opponent's piece

    NOTE: no en passant.
    """
    direction = pawn_direction(color)
    d_row = to_square.row - from_square.row
    d_col = to_square.col - from_square.col
    target = board.piece_at(to_square)

    if d_col == 0:
        if target is not None:
            return False
        if d_row == direction:
            return True
        if d_row == 2 * direction and from_square.row == pawn_starting_row(color):
            return board.piece_at(from_square.offset(direction, 0)) is None
        return False

    if abs(d_col) == 1 and d_row == direction:
        return target is not None and target.color != color

    return False


def knight_pattern(board: Board, from_square: Square, to_square: Square, color: Color) -> bool:
    """Knights jump: |delta_row|, |delta_col| is (2, 1) or (1, 2). Nothing in between matters."""
    deltas = {abs(to_square.row - from_square.row), abs(to_square.col - from_square.col)}
    return deltas == {1, 2}


def bishop_pattern(board: Board, from_square: Square, to_square: Square, color: Color) -> bool:
    """Bishops move diagonally: |delta_row| = |delta_col|"""
    d_row = to_square.row - from_square.row
    d_col = to_square.col - from_square.col
    if d_row == 0 or abs(d_row) != abs(d_col):
        return False
    return is_path_clear(board, from_square, to_square)


def rook_pattern(board: Board, from_square: Square, to_square: Square, color: Color) -> bool:
    """Rooks move either horizontally or vertically"""
    same_row = from_square.row == to_square.row
    same_col = from_square.col == to_square.col
    if same_row == same_col:
        return False
    return is_path_clear(board, from_square, to_square)


def queen_pattern(board: Board, from_square: Square, to_square: Square, color: Color) -> bool:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return rook_pattern(board, from_square, to_square, color) or bishop_pattern(
        board, from_square, to_square, color
    )


def king_pattern(board: Board, from_square: Square, to_square: Square, color: Color) -> bool:
    """
    The king can move by a single square at the time. No castling.
    """
    d_row = abs(to_square.row - from_square.row)
    d_col = abs(to_square.col - from_square.col)
    return d_row <= 1 and d_col <= 1 and (d_row, d_col) != (0, 0)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
PatternFn = Callable[[Board, Square, Square, Color], bool]
MOVEMENT_RULES: dict[PieceType, PatternFn] = {
    PieceType.PAWN: pawn_pattern,
    PieceType.KNIGHT: knight_pattern,
    PieceType.BISHOP: bishop_pattern,
    PieceType.ROOK: rook_pattern,
    PieceType.QUEEN: queen_pattern,
    PieceType.KING: king_pattern,
}


# --- CAPTURING RULES / ATTACKING RULES ---
def pawn_attack(board: Board, from_square: Square, to_square: Square, color: Color) -> bool:
    """
    Pawns only attack diagonally forward, whether or not something stands there.
    (The forward pushes are moves, but never attacks.)
    """
    d_row = to_square.row - from_square.row
    d_col = to_square.col - from_square.col
    return d_row == pawn_direction(color) and abs(d_col) == 1


# Apart from the pawn, every piece attacks exactly the squares it could move to.
# NOTE: these never look at whose turn it is, nor at the safety of the attacker's own king.
ATTACK_RULES: dict[PieceType, PatternFn] = {
    **MOVEMENT_RULES,
    PieceType.PAWN: pawn_attack,
}


# -- PAWN PROMOTION MOVES --
PROMOTION_OPTIONS: list[PieceType] = [
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.ROOK,
    PieceType.QUEEN,
]
DEFAULT_PROMOTION = PieceType.QUEEN


def is_pawn_push_to_promotion_square(move: Move, board: Board) -> bool:
    """check if the move is a pawn move that reaches the far rank of its color"""
    moving_piece = board.piece_at(move.from_square)
    if moving_piece is None or moving_piece.type != PieceType.PAWN:
        return False
    return move.to_square.row == promotion_row(moving_piece.color)
