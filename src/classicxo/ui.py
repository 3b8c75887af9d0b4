"""FastAPI-powered web UI for playing ClassicXO in the browser."""

from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, Literal, Optional, Tuple

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .config import Settings, validate_difficulty
from .errors import ClassicXOError, ConfigError
from .session import GameController, GameSession, Mode

logger = logging.getLogger(__name__)


@dataclass
class ActiveGame:
    """Registered game: its controller plus a lock for the request thread pool."""

    controller: GameController
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    last_seen: float = field(default_factory=lambda: time.time())

    def touch(self) -> None:
        self.last_seen = time.time()

    @property
    def session(self) -> GameSession:
        return self.controller.session


GAMES: Dict[str, ActiveGame] = {}
GAMES_LOCK = threading.Lock()
GAME_TTL_SECONDS = 60 * 30  # 30 minutes
app = FastAPI(title="ClassicXO", description="Tic-tac-toe played in the browser")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Read the server settings once, on first use."""

    return Settings.from_env()


def _cleanup_games() -> None:
    """Drop games nobody has touched for GAME_TTL_SECONDS."""

    now = time.time()
    expired = [
        game_id
        for game_id, game in list(GAMES.items())
        if now - game.last_seen >= GAME_TTL_SECONDS
    ]
    for game_id in expired:
        GAMES.pop(game_id, None)
    if expired:
        logger.info("Expired %d idle games", len(expired))


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    model_config = ConfigDict(populate_by_name=True)

    mode: Mode = Mode.HUMAN_VS_HUMAN
    player_symbol: Optional[Literal["X", "O"]] = Field(
        default=None, alias="playerSymbol"
    )
    difficulty: Optional[int] = Field(
        default=None,
        description="1 (mostly random) to 5 (mostly minimax)",
    )

    @field_validator("difficulty")
    @classmethod
    def ensure_supported_difficulty(cls, value: Optional[int]) -> Optional[int]:
        if value is None:
            return value
        return validate_difficulty(value)


class MoveRequest(BaseModel):
    """Request payload for clicking a cell on an existing game."""

    model_config = ConfigDict(populate_by_name=True)

    cell_index: int = Field(alias="cellIndex", ge=0, le=8)


def _create_game(request: NewGameRequest) -> Tuple[str, ActiveGame]:
    try:
        controller = GameController.start(
            request.mode,
            request.player_symbol,
            get_settings().default_difficulty
            if request.difficulty is None
            else request.difficulty,
        )
    except ConfigError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    game_id = uuid.uuid4().hex
    game = ActiveGame(controller=controller)
    with GAMES_LOCK:
        _cleanup_games()
        GAMES[game_id] = game
    return game_id, game


def _get_game(game_id: str) -> ActiveGame:
    try:
        return GAMES[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _serialize_game(game_id: str, game: ActiveGame) -> Dict[str, object]:
    with game.lock:
        session = game.session
        state: Dict[str, object] = {
            "id": game_id,
            "mode": session.mode.value,
            "board": list(session.board),
            "currentPlayer": session.current_player,
            "active": session.active,
            "state": session.state.value,
            "winner": session.outcome.winner,
            "playerSymbol": session.player_symbol,
            "computerSymbol": session.computer_symbol,
            "difficulty": session.difficulty,
            "moveLog": list(session.move_log),
        }
        if session.move_log:
            state["lastMove"] = session.move_log[-1]
        return state


@app.post("/api/game")
def create_game(request: NewGameRequest) -> Dict[str, object]:
    game_id, game = _create_game(request)
    return _serialize_game(game_id, game)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    return _serialize_game(game_id, _get_game(game_id))


@app.post("/api/game/{game_id}/move")
def make_move(game_id: str, request: MoveRequest) -> Dict[str, object]:
    game = _get_game(game_id)
    with game.lock:
        game.touch()
        try:
            game.controller.dispatch("cell_clicked", request.cell_index)
        except ClassicXOError as exc:
            logger.debug("Rejected move on %s: %s", game_id, exc)
            raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _serialize_game(game_id, game)


@app.post("/api/game/{game_id}/reset")
def reset_game(game_id: str) -> Dict[str, object]:
    game = _get_game(game_id)
    with game.lock:
        game.touch()
        game.controller.dispatch("reset")
    return _serialize_game(game_id, game)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>ClassicXO</title>
    <style>
      :root {
        color-scheme: light;
        font-family: system-ui, -apple-system, BlinkMacSystemFont, \"Segoe UI\", sans-serif;
      }
      * {
        box-sizing: border-box;
      }
      body {
        margin: 0;
        background: radial-gradient(circle at top, #f2f5ff, #dbe0ff 40%, #cfd8ff 70%);
        min-height: 100vh;
        display: flex;
        justify-content: center;
        padding: 2rem 1rem 3rem;
        color: #13203a;
      }
      main {
        background: rgba(255, 255, 255, 0.92);
        border-radius: 18px;
        box-shadow: 0 20px 40px rgba(34, 47, 79, 0.16);
        padding: clamp(1.5rem, 4vw, 2.5rem);
        width: min(520px, 100%);
        position: relative;
      }
      h1 {
        margin: 0 0 1.5rem;
        text-align: center;
        letter-spacing: 0.06em;
      }
      button,
      select {
        font-size: 1rem;
        padding: 0.55rem 0.95rem;
        border-radius: 999px;
        border: 1px solid rgba(60, 70, 120, 0.25);
        background: white;
        cursor: pointer;
        font-family: inherit;
      }
      button.selected {
        background: #3a66ff;
        color: white;
      }
      .controls {
        display: flex;
        flex-wrap: wrap;
        gap: 0.75rem;
        justify-content: center;
        align-items: center;
        margin-bottom: 1rem;
      }
      .hidden {
        display: none !important;
      }
      #status {
        text-align: center;
        font-size: 1.1rem;
        font-weight: 600;
        margin-bottom: 1rem;
      }
      #message {
        text-align: center;
        min-height: 1.25rem;
        color: #b00020;
        font-weight: 600;
        margin-bottom: 1rem;
      }
      .board {
        display: grid;
        grid-template-columns: repeat(3, 1fr);
        gap: 0.5rem;
        max-width: 360px;
        margin: 0 auto 1.5rem;
      }
      .cell {
        aspect-ratio: 1 / 1;
        font-size: 2.4rem;
        font-weight: 700;
        border-radius: 12px;
        border: 2px solid rgba(80, 100, 160, 0.25);
      }
      .overlay {
        position: absolute;
        inset: 0;
        border-radius: 18px;
        background: rgba(19, 32, 58, 0.6);
        display: flex;
        flex-direction: column;
        align-items: center;
        justify-content: center;
        gap: 1rem;
        color: white;
        font-size: 1.5rem;
        font-weight: 700;
      }
    </style>
  </head>
  <body>
    <main>
      <h1>ClassicXO</h1>
      <section id=\"menu\">
        <div class=\"controls\">
          <button id=\"twoPlayersButton\">Two players</button>
          <button id=\"playComputerButton\">Play the computer</button>
        </div>
        <div id=\"computerOptions\" class=\"controls hidden\">
          <button id=\"playerXButton\" class=\"selected\">X</button>
          <button id=\"playerOButton\">O</button>
          <label for=\"difficultySelect\">Difficulty</label>
          <select id=\"difficultySelect\">
            <option value=\"1\">1</option>
            <option value=\"2\">2</option>
            <option value=\"3\" selected>3</option>
            <option value=\"4\">4</option>
            <option value=\"5\">5</option>
          </select>
          <button id=\"startGameButton\">Start</button>
        </div>
      </section>
      <section id=\"gameContainer\" class=\"hidden\">
        <div id=\"status\"></div>
        <div id=\"message\"></div>
        <div class=\"board\" id=\"board\"></div>
        <div class=\"controls\">
          <button id=\"resetButton\">Reset</button>
          <button id=\"menuButton\">Menu</button>
        </div>
      </section>
      <div id=\"overlay\" class=\"overlay hidden\">
        <div id=\"endMessage\"></div>
        <button id=\"newGameButton\">New game</button>
      </div>
    </main>
    <script>
      const menu = document.getElementById('menu');
      const computerOptions = document.getElementById('computerOptions');
      const gameContainer = document.getElementById('gameContainer');
      const statusEl = document.getElementById('status');
      const messageEl = document.getElementById('message');
      const boardEl = document.getElementById('board');
      const overlay = document.getElementById('overlay');
      const endMessage = document.getElementById('endMessage');
      const difficultySelect = document.getElementById('difficultySelect');
      const playerXButton = document.getElementById('playerXButton');
      const playerOButton = document.getElementById('playerOButton');

      let gameState = null;
      let playerSymbol = 'X';
      let isRequestPending = false;

      const cells = Array.from({ length: 9 }, (_, index) => {
        const cell = document.createElement('button');
        cell.className = 'cell';
        cell.addEventListener('click', () => sendMove(index));
        boardEl.appendChild(cell);
        return cell;
      });

      async function request(url, body) {
        const response = await fetch(url, {
          method: 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: body ? JSON.stringify(body) : undefined,
        });
        const payload = await response.json().catch(() => ({}));
        if (!response.ok) {
          const detail = typeof payload.detail === 'string' ? payload.detail : 'Request failed';
          throw new Error(detail);
        }
        return payload;
      }

      function render() {
        if (!gameState) return;
        gameState.board.forEach((value, index) => {
          cells[index].textContent = value;
          cells[index].disabled = !gameState.active || value !== '';
        });
        if (gameState.state === 'won') {
          statusEl.textContent = `Player ${gameState.winner} has won!`;
        } else if (gameState.state === 'draw') {
          statusEl.textContent = 'Game ended in a draw!';
        } else {
          statusEl.textContent = `It's ${gameState.currentPlayer}'s turn`;
        }
        endMessage.textContent = statusEl.textContent;
        overlay.classList.toggle('hidden', gameState.active);
      }

      async function startGame(againstComputer) {
        if (isRequestPending) return;
        isRequestPending = true;
        messageEl.textContent = '';
        const body = againstComputer
          ? {
              mode: 'human_vs_computer',
              playerSymbol,
              difficulty: Number.parseInt(difficultySelect.value, 10),
            }
          : { mode: 'human_vs_human' };
        try {
          gameState = await request('/api/game', body);
          menu.classList.add('hidden');
          gameContainer.classList.remove('hidden');
          render();
        } catch (error) {
          messageEl.textContent = error.message;
        } finally {
          isRequestPending = false;
        }
      }

      async function sendMove(cellIndex) {
        if (!gameState || !gameState.active || isRequestPending) return;
        isRequestPending = true;
        messageEl.textContent = '';
        try {
          gameState = await request(`/api/game/${gameState.id}/move`, { cellIndex });
          render();
        } catch (error) {
          messageEl.textContent = error.message;
        } finally {
          isRequestPending = false;
        }
      }

      async function resetGame() {
        if (!gameState || isRequestPending) return;
        isRequestPending = true;
        try {
          gameState = await request(`/api/game/${gameState.id}/reset`);
          messageEl.textContent = '';
          render();
        } catch (error) {
          messageEl.textContent = error.message;
        } finally {
          isRequestPending = false;
        }
      }

      function returnToMenu() {
        gameState = null;
        overlay.classList.add('hidden');
        gameContainer.classList.add('hidden');
        computerOptions.classList.add('hidden');
        menu.classList.remove('hidden');
      }

      function pickSymbol(symbol) {
        playerSymbol = symbol;
        playerXButton.classList.toggle('selected', symbol === 'X');
        playerOButton.classList.toggle('selected', symbol === 'O');
      }

      document.getElementById('twoPlayersButton').addEventListener('click', () => startGame(false));
      document.getElementById('playComputerButton').addEventListener('click', () => {
        computerOptions.classList.remove('hidden');
      });
      playerXButton.addEventListener('click', () => pickSymbol('X'));
      playerOButton.addEventListener('click', () => pickSymbol('O'));
      document.getElementById('startGameButton').addEventListener('click', () => startGame(true));
      document.getElementById('resetButton').addEventListener('click', resetGame);
      document.getElementById('menuButton').addEventListener('click', returnToMenu);
      document.getElementById('newGameButton').addEventListener('click', returnToMenu);
    </script>
  </body>
</html>
"""
