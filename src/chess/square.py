"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

# Chess board is always 8x8. Just in case we want to try some funky stuff, make it adjustable
BOARD_DIMENSIONS = (8, 8)


@dataclass(frozen=True)
class Square:
    """Zero based coordinates. Row 0 is white's back rank, column 0 is the a-file."""

    row: int
    col: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a1' - 'h8' get converted to (0,0) - (7,7)"""
        col = ord(sq[0].lower()) - ord("a")
        row = int(sq[1:]) - 1
        return cls(row, col)

    def to_algebraic(self) -> str:
        return f"{chr(self.col + ord('a'))}{self.row + 1}"

    def is_within_bounds(self) -> bool:
        return (0 <= self.row < BOARD_DIMENSIONS[0]) and (
            0 <= self.col < BOARD_DIMENSIONS[1]
        )

    def offset(self, d_row: int, d_col: int) -> Square:
        return Square(self.row + d_row, self.col + d_col)


def all_squares() -> list[Square]:
    """Every square on the board in scan order: row by row, and left to right within a row."""
    return [
        Square(row, col)
        for row in range(BOARD_DIMENSIONS[0])
        for col in range(BOARD_DIMENSIONS[1])
    ]
