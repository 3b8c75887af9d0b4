"""ClassicXO package exposing game rules, the minimax opponent, and the web application."""

from .ai import MinimaxAI, best_move, minimax_score, select_move
from .errors import ConfigError, InvalidMove, NoLegalMove
from .game import WINNING_LINES, MoveOutcome, SessionState, apply_move, evaluate
from .session import (
    GameController,
    GameSession,
    Mode,
    computer_turn,
    new_session,
    player_move,
    reset_session,
)
from .ui import app

__all__ = [
    "WINNING_LINES",
    "ConfigError",
    "GameController",
    "GameSession",
    "InvalidMove",
    "MinimaxAI",
    "Mode",
    "MoveOutcome",
    "NoLegalMove",
    "SessionState",
    "app",
    "apply_move",
    "best_move",
    "computer_turn",
    "evaluate",
    "minimax_score",
    "new_session",
    "player_move",
    "reset_session",
    "select_move",
]
