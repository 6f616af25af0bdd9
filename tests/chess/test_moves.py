"""Unit tests for /src/chess/moves.py"""

import pytest

from src.chess.board import EMPTY_POSITION_FEN, Board
from src.chess.moves import (
    ATTACK_RULES,
    MOVEMENT_RULES,
    Move,
    is_pawn_push_to_promotion_square,
    is_path_clear,
    pawn_attack,
)
from src.chess.pieces import Piece
from src.chess.square import Square, all_squares
from src.core.shared_types import Color, PieceType


def sq(name: str) -> Square:
    return Square.from_algebraic(name)


def board_with(pieces: dict[str, str]) -> Board:
    """Empty board with the given pieces placed. ex: {"d4": "N", "e5": "p"}"""
    board = Board.from_fen(EMPTY_POSITION_FEN)
    for square_name, fen_char in pieces.items():
        board.place_piece(Piece.from_fen(fen_char), sq(square_name))
    return board


def reachable(board: Board, square_name: str) -> set[str]:
    """All squares the piece on the given square could move to according to its movement pattern"""
    square = sq(square_name)
    piece = board.piece_at(square)
    assert piece is not None
    rule = MOVEMENT_RULES[piece.type]
    return {
        target.to_algebraic()
        for target in all_squares()
        if target != square and rule(board, square, target, piece.color)
    }


# --- UCI ---
@pytest.mark.parametrize(
    "uci_move, from_uci, to_uci",
    [
        ("e2e4", "e2", "e4"),
        ("g8f6", "g8", "f6"),
        ("a1h8", "a1", "h8"),
    ],
)
def test_creating_move_from_uci(uci_move: str, from_uci: str, to_uci: str) -> None:
    move = Move.from_uci(uci_move)
    assert move.from_square == sq(from_uci)
    assert move.to_square == sq(to_uci)
    assert move.promote_to is None


@pytest.mark.parametrize("uci_move", ["e2e4", "g8f6", "a1h8"])
def test_converting_into_uci(uci_move: str) -> None:
    assert Move.from_uci(uci_move).to_uci() == uci_move


def test_creating_move_incl_promotion() -> None:
    move = Move.from_uci("e7e8n")
    assert move.promote_to == PieceType.KNIGHT
    assert move.to_uci() == "e7e8n"


def test_moves_compare_by_value() -> None:
    assert Move(sq("e2"), sq("e4")) == Move.from_uci("e2e4")
    assert Move(sq("e7"), sq("e8"), PieceType.QUEEN) != Move(sq("e7"), sq("e8"))


# --- PATH ---
def test_path_clear_on_empty_board() -> None:
    board = board_with({})
    assert is_path_clear(board, sq("a1"), sq("a8"))
    assert is_path_clear(board, sq("a1"), sq("h8"))


def test_path_ignores_the_end_points() -> None:
    """Only the squares in between count"""
    board = board_with({"a1": "R", "a8": "r"})
    assert is_path_clear(board, sq("a1"), sq("a8"))


def test_path_blocked() -> None:
    board = board_with({"d4": "p"})
    assert not is_path_clear(board, sq("a1"), sq("h8"))
    assert not is_path_clear(board, sq("d1"), sq("d8"))


# --- PAWNS ---
def test_white_pawn_from_starting_row() -> None:
    """Single or double push forward (rows going up)"""
    board = board_with({"e2": "P"})
    assert reachable(board, "e2") == {"e3", "e4"}


def test_black_pawn_from_starting_row() -> None:
    """Black pawns move down the board"""
    board = board_with({"d7": "p"})
    assert reachable(board, "d7") == {"d6", "d5"}


def test_pawn_double_push_only_from_starting_row() -> None:
    board = board_with({"e3": "P"})
    assert reachable(board, "e3") == {"e4"}


def test_pawn_double_push_blocked_on_intermediate_square() -> None:
    board = board_with({"e2": "P", "e3": "n"})
    assert reachable(board, "e2") == set()


def test_pawn_double_push_blocked_on_destination() -> None:
    board = board_with({"e2": "P", "e4": "n"})
    assert reachable(board, "e2") == {"e3"}


def test_pawn_cannot_take_straight_ahead() -> None:
    board = board_with({"e4": "P", "e5": "p"})
    assert reachable(board, "e4") == set()


def test_pawn_takes_diagonally() -> None:
    board = board_with({"e4": "P", "d5": "p", "f5": "n"})
    assert reachable(board, "e4") == {"e5", "d5", "f5"}


def test_pawn_does_not_move_diagonally_onto_empty_square() -> None:
    board = board_with({"e4": "P"})
    assert "d5" not in reachable(board, "e4")
    assert "f5" not in reachable(board, "e4")


def test_pawn_does_not_move_backwards() -> None:
    board = board_with({"e4": "p", "d5": "P"})
    # black pawn on e4 moves down: the white pawn on d5 is behind it
    assert reachable(board, "e4") == {"e3"}


# --- PIECES ---
def test_knight_moves_from_center() -> None:
    board = board_with({"d4": "N"})
    assert reachable(board, "d4") == {"b3", "b5", "c2", "c6", "e2", "e6", "f3", "f5"}


def test_knight_jumps_over_pieces() -> None:
    """No path check for knights"""
    board = board_with({"b1": "N", "a2": "P", "b2": "P", "c2": "P"})
    assert reachable(board, "b1") == {"a3", "c3", "d2"}


def test_knight_in_corner() -> None:
    board = board_with({"a1": "n"})
    assert reachable(board, "a1") == {"b3", "c2"}


def test_bishop_moves() -> None:
    board = board_with({"c1": "B", "e3": "p"})
    # blocked beyond e3. NOTE: patterns do not look at colors of the target square
    assert reachable(board, "c1") == {"b2", "a3", "d2", "e3"}


def test_rook_moves() -> None:
    board = board_with({"a1": "R", "a4": "p", "d1": "K"})
    assert reachable(board, "a1") == {"a2", "a3", "a4", "b1", "c1", "d1"}


def test_queen_moves_combine_rook_and_bishop() -> None:
    board = board_with({"d4": "Q"})
    queen_squares = reachable(board, "d4")
    assert len(queen_squares) == 27
    assert {"d8", "a4", "h8", "a1", "g1"} <= queen_squares
    # no knight jumps
    assert "e6" not in queen_squares


def test_king_moves() -> None:
    board = board_with({"e1": "K"})
    assert reachable(board, "e1") == {"d1", "d2", "e2", "f2", "f1"}


def test_king_does_not_jump_two_squares() -> None:
    """No castling"""
    board = board_with({"e1": "K", "h1": "R"})
    assert "g1" not in reachable(board, "e1")


# --- ATTACKS ---
@pytest.mark.parametrize(
    "pawn_square, color, attacked",
    [
        ("e4", Color.WHITE, {"d5", "f5"}),
        ("e4", Color.BLACK, {"d3", "f3"}),
        ("a2", Color.WHITE, {"b3"}),
    ],
)
def test_pawn_attacks_diagonally_forward(pawn_square: str, color: Color, attacked: set[str]) -> None:
    """Pawns attack the forward diagonals, even if empty, but never the square in front"""
    board = board_with({})
    found = {
        target.to_algebraic()
        for target in all_squares()
        if pawn_attack(board, sq(pawn_square), target, color)
    }
    assert found == attacked


def test_attack_rules_reuse_movement_rules() -> None:
    """Only the pawn attacks differently than it moves"""
    for piece_type in PieceType:
        if piece_type == PieceType.PAWN:
            assert ATTACK_RULES[piece_type] is pawn_attack
        else:
            assert ATTACK_RULES[piece_type] is MOVEMENT_RULES[piece_type]


# --- PROMOTION ---
def test_white_pawn_reaching_last_row_promotes() -> None:
    board = board_with({"a7": "P"})
    assert is_pawn_push_to_promotion_square(Move(sq("a7"), sq("a8")), board)


def test_black_pawn_reaching_first_row_promotes() -> None:
    board = board_with({"h2": "p"})
    assert is_pawn_push_to_promotion_square(Move(sq("h2"), sq("h1")), board)


def test_other_pieces_do_not_promote() -> None:
    board = board_with({"a7": "R"})
    assert not is_pawn_push_to_promotion_square(Move(sq("a7"), sq("a8")), board)
