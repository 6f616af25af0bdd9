"""The Game board implements all rules that effect the `position` (in chess: the configuration of pieces on the board)"""

from dataclasses import dataclass, field
from typing import Optional, Self

from src.chess.moves import (
    ATTACK_RULES,
    DEFAULT_PROMOTION,
    Move,
    is_pawn_push_to_promotion_square,
)
from src.chess.pieces import FEN_TO_PIECE, Piece
from src.chess.square import BOARD_DIMENSIONS, Square, all_squares
from src.core.exceptions import InvalidFENError
from src.core.shared_types import Color, PieceType, opponent

STARTING_POSITION_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
EMPTY_POSITION_FEN = "/".join(["8"] * BOARD_DIMENSIONS[0])

Grid = list[list[Optional[Piece]]]


def empty_grid() -> Grid:
    num_rows, num_cols = BOARD_DIMENSIONS
    return [[None] * num_cols for _ in range(num_rows)]


def is_valid_position(position: str) -> bool:
    """Only check the part of the FEN encoding for the board position."""
    num_rows, num_cols = BOARD_DIMENSIONS
    row_fens = position.split("/")
    if len(row_fens) != num_rows:
        return False

    for row_fen in row_fens:
        col_count = 0
        for character in row_fen:
            # make sure every character is valid
            if character.isdigit():
                col_count += int(character)
            elif character.lower() in FEN_TO_PIECE:
                col_count += 1
            else:
                # immediately invalidate if the character is anything else
                return False
        if col_count != num_cols:
            return False
    return True


@dataclass
class Board:
    grid: Grid = field(default_factory=empty_grid)

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_POSITION_FEN)

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using a given FEN string.

        That is, we supply the first part of the FEN string that denotes the board position
        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank (row 7), starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank (row 0) are the white pieces.
        """
        if not is_valid_position(fen_str):
            raise InvalidFENError(f"Cannot interpret supplied string as a position: {fen_str!r}")

        grid = empty_grid()
        for rank_idx, fen_one_row in enumerate(fen_str.split("/")):
            # FEN string is read from top row (black's back rank) to bottom row (white's back rank)
            row = BOARD_DIMENSIONS[0] - 1 - rank_idx
            # ... but the first character is the a-file, so reads in normal direction
            col = 0
            for character in fen_one_row:
                if character.isalpha():
                    grid[row][col] = Piece.from_fen(character)
                    col += 1
                else:
                    # A number denotes the amount of empty squares after each other
                    col += int(character)
        return cls(grid)

    def to_fen(self) -> str:
        """Rows are separated by slashes in FEN string, starting from black's side."""
        return "/".join(
            self._row_to_fen(row) for row in range(BOARD_DIMENSIONS[0] - 1, -1, -1)
        )

    def _row_to_fen(self, row: int) -> str:
        """FEN string of a single row"""
        fen_characters: list[str] = []
        empty_count = 0
        for piece in self.grid[row]:
            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire row is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def copy(self) -> Self:
        """
        Independent copy: nothing is shared with the original grid.
        NOTE: Pieces are frozen values, so copying the rows is enough.
        """
        return type(self)([list(row) for row in self.grid])

    def piece_at(self, square: Square) -> Optional[Piece]:
        """Off-board squares simply hold nothing"""
        if not square.is_within_bounds():
            return None
        return self.grid[square.row][square.col]

    def place_piece(self, piece: Piece, square: Square) -> None:
        self.grid[square.row][square.col] = piece

    def remove_piece(self, square: Square) -> None:
        self.grid[square.row][square.col] = None

    def locate_color(self, color: Color) -> list[Square]:
        """Squares holding a piece of the given color, in scan order"""
        return [
            square
            for square in all_squares()
            if (piece := self.piece_at(square)) is not None and piece.color == color
        ]

    def locate_king(self, color: Color) -> Optional[Square]:
        for square in self.locate_color(color):
            piece = self.piece_at(square)
            if piece is not None and piece.type == PieceType.KING:
                return square
        return None

    def apply_move(self, move: Move) -> Optional[Piece]:
        """
        Update the position on the board. No legality checks here (see rules.py).

        A pawn reaching the far rank turns into the requested piece type (a queen if not specified).
        Returns the piece that got captured (if any).
        """
        piece_that_moved = self.piece_at(move.from_square)
        if piece_that_moved is None:
            return None

        captured = self.piece_at(move.to_square)
        if is_pawn_push_to_promotion_square(move, self):
            new_piece = piece_that_moved.promoted_to(move.promote_to or DEFAULT_PROMOTION)
        else:
            new_piece = piece_that_moved.moved()

        self.remove_piece(move.from_square)
        self.place_piece(new_piece, move.to_square)
        return captured

    def is_square_attacked(self, square: Square, by_color: Color) -> bool:
        """Could any piece of `by_color` reach this square according to its attack pattern?"""
        for attacker_square in self.locate_color(by_color):
            attacker = self.piece_at(attacker_square)
            if attacker is None:
                continue
            attack_rule = ATTACK_RULES[attacker.type]
            if attack_rule(self, attacker_square, square, by_color):
                return True
        return False

    def is_check(self, color: Color) -> bool:
        """
        Is the king of this color under attack?

        NOTE: Without a king there is no sensible answer. Treat the king as attacked,
        so a broken position ends the game instead of carrying on.
        """
        king_square = self.locate_king(color)
        if king_square is None:
            return True
        return self.is_square_attacked(king_square, opponent(color))

    def count_material(self) -> dict[Color, int]:
        """Tally the points of material each player has on the board"""
        return {color: self._count_material_player(color) for color in Color}

    def material_balance(self, color: Color) -> int:
        """Your material minus your opponent's material"""
        material = self.count_material()
        return material[color] - material[opponent(color)]

    def _count_material_player(self, color: Color) -> int:
        """Tally the points of material for a specific player"""
        return sum(
            piece.value
            for square in self.locate_color(color)
            if (piece := self.piece_at(square)) is not None
        )
