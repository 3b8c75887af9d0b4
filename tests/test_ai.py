"""Tests for the ClassicXO minimax opponent."""

import random

import pytest

from classicxo.ai import MinimaxAI, best_move, minimax_score, select_move
from classicxo.errors import ConfigError, NoLegalMove
from classicxo.game import OutcomeStatus, empty_cells, evaluate, new_board


class StubRandom:
    """Random source with a fixed roll that always picks the last choice."""

    def __init__(self, roll):
        self.roll = roll
        self.choices = []

    def random(self):
        return self.roll

    def choice(self, seq):
        self.choices.append(list(seq))
        return seq[-1]


FULL_BOARD = ["X", "O", "X", "X", "O", "O", "O", "X", "O"]


def test_ai_takes_immediate_win():
    board = ["O", "O", "", "X", "X", "", "", "", ""]
    assert best_move(board, "O", "X") == 2


def test_ai_blocks_immediate_loss():
    board = ["X", "X", "", "", "O", "", "", "", ""]
    assert best_move(board, "O", "X") == 2


def test_only_center_survives_a_corner_opening():
    board = ["X", "", "", "", "", "", "", "", ""]
    assert best_move(board, "O", "X") == 4


def test_best_move_is_deterministic():
    board = ["X", "", "", "", "O", "", "", "", "X"]
    assert best_move(board, "O", "X") == best_move(board, "O", "X")


def test_search_leaves_board_untouched():
    board = ["X", "", "", "", "O", "", "", "", ""]
    snapshot = list(board)
    minimax_score(board, True, "X", "O")
    best_move(board, "X", "O")
    assert board == snapshot


def test_terminal_scores():
    assert minimax_score(["X", "X", "X", "O", "O", "", "", "", ""], False, "X", "O") == 1
    assert minimax_score(["X", "X", "X", "O", "O", "", "", "", ""], True, "O", "X") == -1
    assert minimax_score(FULL_BOARD, True, "X", "O") == 0


def test_empty_board_is_a_draw_with_best_play():
    assert minimax_score(new_board(), True, "X", "O") == 0


def _never_loses(board, computer, player):
    """Computer on turn; opponent tries every reply."""
    board = list(board)
    board[best_move(board, computer, player)] = computer
    outcome = evaluate(board)
    if outcome.status is not OutcomeStatus.ONGOING:
        return outcome.winner != player
    for reply in empty_cells(board):
        child = list(board)
        child[reply] = player
        outcome = evaluate(child)
        if outcome.status is OutcomeStatus.WIN:
            return False
        if outcome.status is OutcomeStatus.DRAW:
            continue
        if not _never_loses(child, computer, player):
            return False
    return True


def test_engine_never_loses_from_empty_board():
    assert _never_loses(new_board(), "X", "O")


def test_engine_never_loses_as_second_player():
    for opening in range(9):
        board = new_board()
        board[opening] = "X"
        assert _never_loses(board, "O", "X")


def test_high_roll_plays_random_cell():
    board = ["O", "O", "", "X", "X", "", "", "", ""]
    rng = StubRandom(0.95)
    move = select_move(board, "O", "X", 5, rng=rng)
    assert move == 8
    assert move != best_move(board, "O", "X")
    assert rng.choices == [[2, 5, 6, 7, 8]]


def test_low_roll_plays_best_move():
    board = ["O", "O", "", "X", "X", "", "", "", ""]
    rng = StubRandom(0.05)
    assert select_move(board, "O", "X", 1, rng=rng) == 2
    assert rng.choices == []


def test_roll_at_probability_falls_back_to_random():
    board = ["O", "O", "", "X", "X", "", "", "", ""]
    assert select_move(board, "O", "X", 3, rng=StubRandom(0.5)) == 8


def test_seeded_random_moves_are_legal():
    rng = random.Random(1234)
    board = ["X", "", "", "", "O", "", "", "", ""]
    for level in range(1, 6):
        assert select_move(board, "O", "X", level, rng=rng) in empty_cells(board)


def test_full_board_has_no_move():
    with pytest.raises(NoLegalMove):
        select_move(FULL_BOARD, "O", "X", 3, rng=StubRandom(0.0))
    with pytest.raises(NoLegalMove):
        best_move(FULL_BOARD, "O", "X")


@pytest.mark.parametrize("level", [0, 6, -1, True])
def test_unsupported_difficulty_rejected(level):
    with pytest.raises(ConfigError):
        select_move(new_board(), "O", "X", level)
    with pytest.raises(ConfigError):
        MinimaxAI(player="O", difficulty=level)


def test_minimax_ai_choose():
    ai = MinimaxAI(player="O", difficulty=5, rng=StubRandom(0.0))
    assert ai.opponent == "X"
    assert ai.choose(["X", "X", "", "", "O", "", "", "", ""]) == 2
