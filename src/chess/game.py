"""
The ChessGame class is the entrypoint into the domain layer.
It owns the board and the turn, checks every move attempt and keeps track of how the game ended.

NOTE: Nothing in the public methods raises for bad input. An illegal move or an off-board square is answered with
False / None / an empty list and the state stays untouched. The layers above decide how to report that.
"""

from dataclasses import dataclass, field
from typing import Literal, Optional, Self

from src.chess.board import Board
from src.chess.moves import Move
from src.chess.pieces import Piece
from src.chess.rules import (
    generate_legal_moves,
    has_legal_move,
    is_legal_move,
    legal_moves_from,
)
from src.chess.square import Square
from src.core.exceptions import GameStateError
from src.core.models import GameModel
from src.core.shared_types import Color, PieceType, Status, opponent

DRAW: Literal["draw"] = "draw"
Winner = Color | Literal["draw"]

COLOR_NAMES: dict[Color, str] = {Color.WHITE: "White", Color.BLACK: "Black"}


def _no_captures() -> dict[Color, list[PieceType]]:
    return {Color.WHITE: [], Color.BLACK: []}


@dataclass
class ChessGame:
    board: Board = field(default_factory=Board.starting_position)
    turn: Color = Color.WHITE
    status: Status = Status.IN_PROGRESS
    winner: Optional[Winner] = None
    moves: list[Move] = field(default_factory=list)
    # pieces taken, keyed by the color that took them
    captured: dict[Color, list[PieceType]] = field(default_factory=_no_captures)

    @classmethod
    def from_fen(cls, position: str, turn: Color = Color.WHITE) -> Self:
        """Start from an arbitrary position. The game might already be over in that position."""
        game = cls(board=Board.from_fen(position), turn=turn)
        game._update_game_state()
        return game

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a ChessGame from the information the Service layer actually has"""
        status_values = [status.value for status in Status]
        if model.status not in status_values:
            raise GameStateError(
                f"Invalid status code: {model.status!r}. \nPick one from {','.join(status_values)}"
            )
        winner: Optional[Winner] = (
            DRAW if model.winner == DRAW else Color(model.winner) if model.winner else None
        )
        captured = _no_captures()
        for color_name, piece_names in model.captured.items():
            captured[Color(color_name)] = [PieceType(name) for name in piece_names]

        return cls(
            board=Board.from_fen(model.position_fen),
            turn=Color(model.turn),
            status=Status(model.status),
            winner=winner,
            moves=[Move.from_uci(uci) for uci in model.moves_uci],
            captured=captured,
        )

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            position_fen=self.board.to_fen(),
            turn=self.turn.value,
            status=self.status.value,
            winner=str(self.winner) if self.winner else None,
            moves_uci=[move.to_uci() for move in self.moves],
            captured={
                color.value: [piece_type.value for piece_type in pieces]
                for color, pieces in self.captured.items()
            },
        )

    # --- ENGINE CONTRACT ---
    def reset(self) -> None:
        """Back to the standard starting position, white to move."""
        self.board = Board.starting_position()
        self.turn = Color.WHITE
        self.status = Status.IN_PROGRESS
        self.winner = None
        self.moves = []
        self.captured = _no_captures()

    def get_board(self) -> Board:
        """A snapshot. Changing it does not change the game."""
        return self.board.copy()

    def get_turn(self) -> Color:
        return self.turn

    def is_game_over(self) -> bool:
        return self.status != Status.IN_PROGRESS

    def get_winner(self) -> Optional[Winner]:
        """A color after checkmate, 'draw' after stalemate. None while the game is still going."""
        return self.winner

    def get_piece(self, row: int, col: int) -> Optional[Piece]:
        return self.board.piece_at(Square(row, col))

    def is_check(self, color: Color) -> bool:
        return self.board.is_check(color)

    def get_legal_moves_for(self, square: Square) -> list[Move]:
        if self.is_game_over():
            return []
        return legal_moves_from(self.board, square, self.turn)

    def is_legal_move(self, move: Move) -> bool:
        if self.is_game_over():
            return False
        return is_legal_move(self.board, move, self.turn)

    def make_move(self, move: Move) -> bool:
        """
        Attempt to make a move
        -----

        1. check the move is legal (if not: nothing changes, return False)
        2. update the board (and record a capture)
        3. update the history of moves
        4. pass the turn to the opponent
        5. update game status (checkmate / stalemate for the player now to move)
        """
        if not self.is_legal_move(move):
            return False

        captured = self.board.apply_move(move)
        if captured is not None:
            self.captured[self.turn].append(captured.type)
        self.moves.append(move)
        self.turn = opponent(self.turn)
        self._update_game_state()
        return True

    # --- CONVENIENCE FOR HOSTS ---
    def all_legal_moves(self) -> list[Move]:
        """Every legal move of the player to move (what the computer opponent picks from)."""
        if self.is_game_over():
            return []
        return generate_legal_moves(self.board, self.turn)

    def capture_count(self) -> int:
        return sum(len(pieces) for pieces in self.captured.values())

    def status_message(self) -> str:
        """One line describing the state of the game, to show to the players."""
        if self.status == Status.CHECKMATE:
            return f"Checkmate - {COLOR_NAMES.get(self.winner, self.winner)} wins"
        if self.status == Status.STALEMATE:
            return "Stalemate (draw)"
        if self.is_check(self.turn):
            return f"{COLOR_NAMES[self.turn]} is in check"
        return f"{COLOR_NAMES[self.turn]} to move"

    # -- PRIVATE HELPERS ---
    def _update_game_state(self) -> None:
        """
        Performs checks to see if game has ended and changes status accordingly.

        NOTE the turn has already been passed on. The player to move now is the opponent of the one who made the move.
        """
        if has_legal_move(self.board, self.turn):
            self.status = Status.IN_PROGRESS
            self.winner = None
        elif self.board.is_check(self.turn):
            self.status = Status.CHECKMATE
            self.winner = opponent(self.turn)
        else:
            self.status = Status.STALEMATE
            self.winner = DRAW
