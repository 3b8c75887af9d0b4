"""Unit tests for ClassicXO board rules."""

import pytest

from classicxo.errors import InvalidMove
from classicxo.game import (
    WINNING_LINES,
    MoveOutcome,
    OutcomeStatus,
    SessionState,
    apply_move,
    empty_cells,
    evaluate,
    new_board,
    other_player,
)


def test_winning_lines_cover_rows_columns_and_diagonals():
    assert len(WINNING_LINES) == 8
    assert len(set(WINNING_LINES)) == 8
    assert (0, 4, 8) in WINNING_LINES
    assert (2, 4, 6) in WINNING_LINES


def test_completing_top_row_wins():
    board = ["X", "X", "", "", "O", "", "", "O", ""]
    apply_move(board, 2, "X")
    assert evaluate(board) == MoveOutcome.win("X")


def test_full_board_without_line_is_draw():
    board = ["X", "O", "X", "X", "O", "O", "O", "X", "O"]
    outcome = evaluate(board)
    assert outcome.status is OutcomeStatus.DRAW
    assert outcome.winner is None


@pytest.mark.parametrize("line", WINNING_LINES)
@pytest.mark.parametrize("symbol", ["X", "O"])
def test_every_line_wins_for_its_owner(line, symbol):
    board = new_board()
    for index in line:
        board[index] = symbol
    assert evaluate(board) == MoveOutcome.win(symbol)


def test_two_in_a_row_is_still_ongoing():
    board = ["O", "O", "", "X", "X", "", "", "", ""]
    assert evaluate(board) == MoveOutcome.ongoing()


def test_win_on_last_cell_beats_draw():
    board = ["X", "O", "X", "O", "X", "O", "O", "X", "X"]
    assert evaluate(board) == MoveOutcome.win("X")


def test_occupied_cell_is_never_overwritten():
    board = new_board()
    apply_move(board, 4, "X")
    with pytest.raises(InvalidMove):
        apply_move(board, 4, "O")
    assert board[4] == "X"


@pytest.mark.parametrize("index", [-1, 9, 42])
def test_out_of_range_index_rejected(index):
    board = new_board()
    with pytest.raises(InvalidMove):
        apply_move(board, index, "X")
    assert board == new_board()


def test_move_on_inactive_game_rejected():
    board = new_board()
    with pytest.raises(InvalidMove):
        apply_move(board, 0, "X", active=False)
    assert board[0] == ""


def test_helpers():
    assert other_player("X") == "O"
    assert other_player("O") == "X"
    assert empty_cells(["X", "", "O", ""] + [""] * 5) == [1, 3, 4, 5, 6, 7, 8]
    assert SessionState.from_outcome(MoveOutcome.win("O")) is SessionState.WON
    assert SessionState.from_outcome(MoveOutcome.draw()) is SessionState.DRAW
    assert SessionState.from_outcome(MoveOutcome.ongoing()) is SessionState.AWAITING_MOVE
