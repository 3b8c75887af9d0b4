"""Core rules for ClassicXO: board, winning lines and outcome evaluation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .errors import ConfigError, InvalidMove

Player = str  # "X" or "O"
Board = List[str]  # nine cells, "" for empty

EMPTY = ""
SYMBOLS: Tuple[Player, Player] = ("X", "O")
BOARD_SIZE = 9

WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


# ---------- Outcomes ----------


class OutcomeStatus(str, Enum):
    ONGOING = "ongoing"
    WIN = "win"
    DRAW = "draw"


@dataclass(frozen=True)
class MoveOutcome:
    """Result of evaluating the board after a move."""

    status: OutcomeStatus
    winner: Optional[Player] = None

    @classmethod
    def ongoing(cls) -> "MoveOutcome":
        return cls(OutcomeStatus.ONGOING)

    @classmethod
    def win(cls, symbol: Player) -> "MoveOutcome":
        return cls(OutcomeStatus.WIN, symbol)

    @classmethod
    def draw(cls) -> "MoveOutcome":
        return cls(OutcomeStatus.DRAW)

    @property
    def is_terminal(self) -> bool:
        return self.status is not OutcomeStatus.ONGOING


class SessionState(str, Enum):
    """AwaitingMove is initial; Won and Draw are terminal until a reset."""

    AWAITING_MOVE = "awaiting_move"
    WON = "won"
    DRAW = "draw"

    @classmethod
    def from_outcome(cls, outcome: MoveOutcome) -> "SessionState":
        if outcome.status is OutcomeStatus.WIN:
            return cls.WON
        if outcome.status is OutcomeStatus.DRAW:
            return cls.DRAW
        return cls.AWAITING_MOVE


# ---------- Board helpers ----------


def new_board() -> Board:
    return [EMPTY] * BOARD_SIZE


def other_player(symbol: Player) -> Player:
    if symbol == "X":
        return "O"
    if symbol == "O":
        return "X"
    raise ConfigError(f"Unknown player symbol {symbol!r}")


def empty_cells(board: Sequence[str]) -> List[int]:
    return [index for index, cell in enumerate(board) if cell == EMPTY]


def apply_move(
    board: Board, index: int, symbol: Player, active: bool = True
) -> Board:
    """Place ``symbol`` at ``index`` in place and return the board.

    Raises InvalidMove, leaving the board untouched, when the game is not
    active, the index is outside 0..8 or the cell is already taken.
    """
    if not active:
        raise InvalidMove("Game already finished")
    if symbol not in SYMBOLS:
        raise InvalidMove(f"Unknown player symbol {symbol!r}")
    if isinstance(index, bool) or not isinstance(index, int):
        raise InvalidMove(f"Cell index must be an integer, got {index!r}")
    if not 0 <= index < BOARD_SIZE:
        raise InvalidMove(f"Cell index {index} is off the board")
    if board[index] != EMPTY:
        raise InvalidMove("Cell already occupied")
    board[index] = symbol
    return board


def evaluate(
    board: Sequence[str],
    lines: Sequence[Tuple[int, int, int]] = WINNING_LINES,
) -> MoveOutcome:
    """Win for the first completed line, draw on a full board, else ongoing."""
    for a, b, c in lines:
        v = board[a]
        if v != EMPTY and v == board[b] == board[c]:
            return MoveOutcome.win(v)
    if EMPTY not in board:
        return MoveOutcome.draw()
    return MoveOutcome.ongoing()
