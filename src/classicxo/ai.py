"""Exhaustive minimax opponent with a difficulty-scaled random fallback."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Optional, Sequence

from .config import DEFAULT_DIFFICULTY, difficulty_probability, validate_difficulty
from .errors import NoLegalMove
from .game import Board, OutcomeStatus, Player, empty_cells, evaluate, other_player

logger = logging.getLogger(__name__)

WIN_SCORE = 1
LOSS_SCORE = -1
DRAW_SCORE = 0


# ---- search ----


def minimax_score(
    board: Sequence[str],
    maximizing: bool,
    computer_symbol: Player,
    player_symbol: Player,
) -> int:
    """Score a position by searching every line of play to the end.

    There is no depth limit, no pruning and no preference for quicker wins:
    a win is worth +1 to the computer whenever it happens.
    """
    outcome = evaluate(board)
    if outcome.status is OutcomeStatus.WIN:
        return WIN_SCORE if outcome.winner == computer_symbol else LOSS_SCORE
    if outcome.status is OutcomeStatus.DRAW:
        return DRAW_SCORE

    symbol = computer_symbol if maximizing else player_symbol
    best = -math.inf if maximizing else math.inf
    for index in empty_cells(board):
        child = list(board)
        child[index] = symbol
        score = minimax_score(child, not maximizing, computer_symbol, player_symbol)
        best = max(best, score) if maximizing else min(best, score)
    return int(best)


def best_move(
    board: Sequence[str], computer_symbol: Player, player_symbol: Player
) -> int:
    """Return the empty cell with the highest minimax score.

    Cells are tried in ascending order and only a strictly better score
    replaces the current pick, so ties go to the lowest index.
    """
    candidates = empty_cells(board)
    if not candidates:
        raise NoLegalMove("No empty cell left on the board")

    best_score = -math.inf
    move = candidates[0]
    for index in candidates:
        child = list(board)
        child[index] = computer_symbol
        score = minimax_score(child, False, computer_symbol, player_symbol)
        if score > best_score:
            best_score, move = score, index
    return move


def random_move(board: Sequence[str], rng: Optional[random.Random] = None) -> int:
    candidates = empty_cells(board)
    if not candidates:
        raise NoLegalMove("No empty cell left on the board")
    return (rng or random).choice(candidates)


def select_move(
    board: Sequence[str],
    computer_symbol: Player,
    player_symbol: Player,
    difficulty_level: int,
    rng: Optional[random.Random] = None,
) -> int:
    """Pick the computer's move for ``difficulty_level`` (1-5).

    With the level's probability the minimax move is played, otherwise a
    uniformly random empty cell.
    """
    probability = difficulty_probability(difficulty_level)
    if not empty_cells(board):
        raise NoLegalMove("No empty cell left on the board")

    source = rng or random
    roll = source.random()
    if roll < probability:
        move = best_move(board, computer_symbol, player_symbol)
        logger.debug(
            "Level %d roll %.3f < %.1f: optimal move %d",
            difficulty_level,
            roll,
            probability,
            move,
        )
    else:
        move = random_move(board, source)
        logger.debug(
            "Level %d roll %.3f >= %.1f: random move %d",
            difficulty_level,
            roll,
            probability,
            move,
        )
    return move


# ---- object facade ----


@dataclass
class MinimaxAI:
    """Computer player bound to a symbol and a difficulty level.

      - MinimaxAI(player="O", opponent="X", difficulty=3)
      - choose(board) -> cell index
    """

    player: Player
    opponent: Optional[Player] = None
    difficulty: int = DEFAULT_DIFFICULTY
    rng: random.Random = field(default_factory=random.Random, repr=False)

    def __post_init__(self) -> None:
        validate_difficulty(self.difficulty)
        if self.opponent is None:
            self.opponent = other_player(self.player)

    def choose(self, board: Board) -> int:
        return select_move(
            board, self.player, self.opponent, self.difficulty, rng=self.rng
        )
