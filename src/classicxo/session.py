"""Game sessions: turn sequencing for both modes and the intent controller."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from .ai import MinimaxAI
from .config import DEFAULT_DIFFICULTY, validate_difficulty
from .errors import ConfigError, InvalidMove
from .game import (
    SYMBOLS,
    Board,
    MoveOutcome,
    Player,
    SessionState,
    apply_move,
    evaluate,
    new_board,
    other_player,
)

logger = logging.getLogger(__name__)


class Mode(str, Enum):
    HUMAN_VS_HUMAN = "human_vs_human"
    HUMAN_VS_COMPUTER = "human_vs_computer"


@dataclass
class GameSession:
    """Everything one game needs; passed to and returned from each operation."""

    mode: Mode
    player_symbol: Player = "X"
    computer_symbol: Optional[Player] = None
    difficulty: int = DEFAULT_DIFFICULTY
    board: Board = field(default_factory=new_board)
    current_player: Player = "X"
    first_player: Player = "X"
    active: bool = True
    outcome: MoveOutcome = field(default_factory=MoveOutcome.ongoing)
    move_log: List[Dict[str, int | str]] = field(default_factory=list)
    ai: Optional[MinimaxAI] = None

    @property
    def state(self) -> SessionState:
        return SessionState.from_outcome(self.outcome)

    @property
    def against_computer(self) -> bool:
        return self.mode is Mode.HUMAN_VS_COMPUTER

    @property
    def computer_to_move(self) -> bool:
        return (
            self.against_computer
            and self.active
            and self.current_player == self.computer_symbol
        )


def _coerce_mode(mode: Mode | str) -> Mode:
    try:
        return Mode(mode)
    except ValueError as exc:
        raise ConfigError(f"Unknown game mode {mode!r}") from exc


def new_session(
    mode: Mode | str,
    player_symbol: Optional[Player] = None,
    difficulty: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> GameSession:
    """Start a game. The human (or X, between two humans) moves first."""

    mode = _coerce_mode(mode)
    level = validate_difficulty(
        DEFAULT_DIFFICULTY if difficulty is None else difficulty
    )
    ai: Optional[MinimaxAI] = None
    if mode is Mode.HUMAN_VS_COMPUTER:
        if player_symbol is None:
            raise ConfigError("Choose X or O before playing the computer")
        if player_symbol not in SYMBOLS:
            raise ConfigError(f"Unknown player symbol {player_symbol!r}")
        computer_symbol: Optional[Player] = other_player(player_symbol)
        ai = MinimaxAI(
            player=computer_symbol,
            opponent=player_symbol,
            difficulty=level,
            rng=rng or random.Random(),
        )
    else:
        player_symbol = "X"
        computer_symbol = None

    session = GameSession(
        mode=mode,
        player_symbol=player_symbol,
        computer_symbol=computer_symbol,
        difficulty=level,
        current_player=player_symbol,
        first_player=player_symbol,
        ai=ai,
    )
    logger.info(
        "New %s session: player %s, difficulty %d",
        mode.value,
        player_symbol,
        level,
    )
    return session


def advance_turn(session: GameSession) -> GameSession:
    if session.outcome.is_terminal:
        raise InvalidMove("Game already finished")
    session.current_player = other_player(session.current_player)
    return session


def _play(session: GameSession, index: int) -> MoveOutcome:
    symbol = session.current_player
    apply_move(session.board, index, symbol, active=session.active)
    session.move_log.append({"player": symbol, "cellIndex": index})

    outcome = evaluate(session.board)
    session.outcome = outcome
    if outcome.is_terminal:
        session.active = False
        logger.info(
            "Game over: %s%s",
            outcome.status.value,
            f" by {outcome.winner}" if outcome.winner else "",
        )
    else:
        advance_turn(session)
    return outcome


def player_move(session: GameSession, cell_index: int) -> MoveOutcome:
    """Apply a human move for the player on turn and evaluate the result."""

    if session.computer_to_move:
        raise InvalidMove("It is the computer's turn")
    return _play(session, cell_index)


def computer_turn(session: GameSession) -> Tuple[int, MoveOutcome]:
    """Let the engine choose and play the computer's move."""

    if session.ai is None:
        raise InvalidMove("There is no computer player in this game")
    if not session.active:
        raise InvalidMove("Game already finished")
    if session.current_player != session.computer_symbol:
        raise InvalidMove("It is not the computer's turn")

    index = session.ai.choose(session.board)
    return index, _play(session, index)


def reset_session(session: GameSession) -> GameSession:
    session.board = new_board()
    session.current_player = session.first_player
    session.active = True
    session.outcome = MoveOutcome.ongoing()
    session.move_log.clear()
    logger.info("Session reset, %s to move", session.current_player)
    return session


# ---------- Intent dispatch ----------


class GameController:
    """Translates presentation intents into session transitions.

    The UI never touches the board directly; it issues ``cell_clicked``,
    ``reset`` and ``new_game`` (directly or through ``dispatch``) and reads
    ``session`` back to render.
    """

    def __init__(self, session: GameSession) -> None:
        self.session = session
        self._intents: Dict[str, Callable[..., Any]] = {
            "cell_clicked": self.cell_clicked,
            "reset": self.reset,
            "new_game": self.new_game,
        }

    @classmethod
    def start(
        cls,
        mode: Mode | str,
        player_symbol: Optional[Player] = None,
        difficulty: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> "GameController":
        return cls(new_session(mode, player_symbol, difficulty, rng))

    def dispatch(self, intent: str, *args: Any, **kwargs: Any) -> Any:
        try:
            handler = self._intents[intent]
        except KeyError as exc:
            raise ConfigError(f"Unknown intent {intent!r}") from exc
        return handler(*args, **kwargs)

    def cell_clicked(self, index: int) -> MoveOutcome:
        outcome = player_move(self.session, index)
        if self.session.computer_to_move:
            _, outcome = computer_turn(self.session)
        return outcome

    def reset(self) -> GameSession:
        return reset_session(self.session)

    def new_game(
        self,
        mode: Mode | str,
        player_symbol: Optional[Player] = None,
        difficulty: Optional[int] = None,
    ) -> GameSession:
        rng = self.session.ai.rng if self.session.ai else None
        self.session = new_session(mode, player_symbol, difficulty, rng)
        return self.session
