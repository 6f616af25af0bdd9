"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    IN_PROGRESS = "in progress"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"


class Difficulty(StrEnum):
    """How hard the computer opponent plays"""

    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"


def opponent(color: Color) -> Color:
    return Color.BLACK if color == Color.WHITE else Color.WHITE
