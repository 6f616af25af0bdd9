"""Defines the types of chess pieces"""

from dataclasses import dataclass, replace
from typing import Self

from src.core.shared_types import Color, PieceType

FEN_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}


# Relative material values. The king gets a large finite value so that positions without it score terribly.
PIECE_VALUES: dict[PieceType, int] = {
    PieceType.PAWN: 1,
    PieceType.KNIGHT: 3,
    PieceType.BISHOP: 3,
    PieceType.ROOK: 5,
    PieceType.QUEEN: 9,
    PieceType.KING: 100,
}

PIECE_SYMBOLS: dict[Color, dict[PieceType, str]] = {
    Color.WHITE: {
        PieceType.PAWN: "♙",
        PieceType.KNIGHT: "♘",
        PieceType.BISHOP: "♗",
        PieceType.ROOK: "♖",
        PieceType.QUEEN: "♕",
        PieceType.KING: "♔",
    },
    Color.BLACK: {
        PieceType.PAWN: "♟",
        PieceType.KNIGHT: "♞",
        PieceType.BISHOP: "♝",
        PieceType.ROOK: "♜",
        PieceType.QUEEN: "♛",
        PieceType.KING: "♚",
    },
}


@dataclass(frozen=True)
class Piece:
    type: PieceType
    color: Color
    # NOTE: tracked but not read by any rule (there is no castling / en passant)
    has_moved: bool = False

    @property
    def value(self) -> int:
        return PIECE_VALUES[self.type]

    @classmethod
    def from_fen(cls, character: str) -> Self:
        # lower case: Black pieces, upper case: White pieces
        color = Color.WHITE if character.isupper() else Color.BLACK
        piece_type = FEN_TO_PIECE[character.lower()]
        return cls(piece_type, color)

    def to_fen(self) -> str:
        return (
            PIECE_TO_FEN[self.type].upper()
            if self.color == Color.WHITE
            else PIECE_TO_FEN[self.type].lower()
        )

    def symbol(self) -> str:
        return PIECE_SYMBOLS[self.color][self.type]

    def moved(self) -> Self:
        return replace(self, has_moved=True)

    def promoted_to(self, new_type: PieceType) -> Self:
        return replace(self, type=new_type, has_moved=True)
