"""FastAPI-powered web UI for playing tic-tac-toe in the browser."""

from __future__ import annotations

import logging
import random
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, Tuple

import threading

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field

from .ai import MinimaxAI
from .game import EMPTY, TicTacToeGame

logger = logging.getLogger(__name__)

Mode = Literal["pvp", "pva"]


@dataclass
class GameSession:
    """Container for an active game, its mode and optional computer opponent."""

    game: TicTacToeGame
    mode: Mode
    ai: Optional[MinimaxAI]
    move_log: List[Dict[str, int | str]] = field(default_factory=list)
    scores: Dict[str, int] = field(default_factory=lambda: {"X": 0, "O": 0})
    ai_pending: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def record_result(self) -> None:
        # Called once per finished game, right after the deciding move
        if self.game.winner is not None:
            self.scores[self.game.winner] += 1


SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(title="Tic-Tac-Toe", description="Tic-tac-toe with a minimax opponent")


AI_THINK_DELAY: Tuple[float, float] = (0.3, 0.6)


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    model_config = ConfigDict(populate_by_name=True)

    mode: Mode = Field(
        default="pva",
        description="'pvp' for two humans, 'pva' to play X against the computer",
    )
    previous_id: Optional[str] = Field(
        default=None,
        alias="previousId",
        description="Game this one replaces; its session is discarded",
    )


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    model_config = ConfigDict(populate_by_name=True)

    cell_index: int = Field(alias="cellIndex", ge=0, le=8)


def _create_session(mode: Mode) -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    ai = MinimaxAI() if mode == "pva" else None
    session = GameSession(game=TicTacToeGame(), mode=mode, ai=ai)
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info("Created %s game %s", mode, session_id)
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _run_ai_turn(game_id: str) -> None:
    session = SESSIONS.get(game_id)
    if not session:
        return

    time.sleep(max(0.0, random.uniform(*AI_THINK_DELAY)))

    with session.lock:
        try:
            if not session.ai:
                return
            game = session.game
            if game.is_over():
                return
            if game.current_player != session.ai.player:
                return
            cell_index = session.ai.choose(game)
            game.play_move(cell_index)
            session.move_log.append(
                {"player": session.ai.player, "cellIndex": cell_index}
            )
            logger.debug("Computer played %d in game %s", cell_index, game_id)
            if game.is_over():
                session.record_result()
        finally:
            session.ai_pending = False


def _status_message(game: TicTacToeGame) -> str:
    if game.winner is not None:
        return f"{game.winner} Wins! Congrats!!!"
    if game.drawn:
        return "Game ends in a Draw"
    return f"Turn: Player {game.current_player}"


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        game = session.game
        line = game.winning_line()
        state: Dict[str, object] = {
            "id": game_id,
            "mode": session.mode,
            "board": ["" if c == EMPTY else c for c in game.board],
            "currentPlayer": game.current_player,
            "winner": game.winner,
            "drawn": game.drawn,
            "winningLine": list(line) if line else None,
            "availableMoves": game.available_moves(),
            "moveLog": list(session.move_log),
            "scores": dict(session.scores),
            "aiPending": session.ai_pending,
            "status": _status_message(game),
        }
        if session.move_log:
            state["lastMove"] = session.move_log[-1]
        return state


def _apply_player_move(
    game_id: str,
    session: GameSession,
    cell_index: int,
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    should_schedule_ai = False
    with session.lock:
        game = session.game
        if game.is_over():
            raise HTTPException(status_code=400, detail="Game already finished")

        if session.ai_pending:
            raise HTTPException(status_code=400, detail="AI is completing its move")

        if session.ai and game.current_player == session.ai.player:
            raise HTTPException(status_code=400, detail="It is the computer's turn")

        player = game.current_player
        try:
            game.play_move(cell_index)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        session.move_log.append({"player": player, "cellIndex": cell_index})
        if game.is_over():
            session.record_result()

        should_schedule_ai = (
            session.ai is not None
            and not game.is_over()
            and game.current_player == session.ai.player
        )
        if should_schedule_ai:
            session.ai_pending = True

    if should_schedule_ai and background_tasks is not None:
        background_tasks.add_task(_run_ai_turn, game_id)


@app.post("/api/game")
def create_game(request: NewGameRequest) -> Dict[str, object]:
    if request.previous_id and SESSIONS.pop(request.previous_id, None) is not None:
        logger.info("Discarded game %s", request.previous_id)
    game_id, session = _create_session(request.mode)
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(
    game_id: str, request: MoveRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session = _get_session(game_id)
    _apply_player_move(game_id, session, request.cell_index, background_tasks)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/reset")
def reset_game(game_id: str) -> Dict[str, object]:
    """Play again: clear the board but keep the running score."""

    session = _get_session(game_id)
    with session.lock:
        if session.ai_pending:
            raise HTTPException(status_code=400, detail="AI is completing its move")
        session.game.reset()
        session.move_log.clear()
    logger.info("Reset game %s", game_id)
    return _serialize_session(game_id, session)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Tic-Tac-Toe</title>
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
        min-height: 100vh;
        display: flex;
        justify-content: center;
        align-items: flex-start;
        padding: 2rem 1rem;
        background: #eef1fb;
        color: #13203a;
      }
      main {
        width: min(420px, 100%);
        background: #fff;
        border-radius: 16px;
        padding: 1.5rem;
        box-shadow: 0 12px 32px rgba(19, 32, 58, 0.12);
        text-align: center;
      }
      #board {
        display: grid;
        grid-template-columns: repeat(3, 1fr);
        gap: 8px;
        margin: 1rem 0;
      }
      .cell {
        aspect-ratio: 1;
        border: none;
        border-radius: 10px;
        background: #e3e8fa;
        font-size: clamp(2rem, 12vw, 3.5rem);
        font-weight: 700;
        cursor: pointer;
      }
      .cell.x {
        color: #3150c9;
      }
      .cell.o {
        color: #d2445a;
      }
      .cell.winner {
        background: #ffe28a;
      }
      .scores {
        display: flex;
        justify-content: space-around;
        font-weight: 600;
      }
      #modal {
        position: fixed;
        inset: 0;
        display: none;
        align-items: center;
        justify-content: center;
        background: rgba(19, 32, 58, 0.45);
      }
      #modal .card {
        background: #fff;
        border-radius: 12px;
        padding: 1.5rem 2rem;
      }
    </style>
  </head>
  <body>
    <main>
      <h1>Tic-Tac-Toe</h1>
      <label>
        Mode
        <select id=\"mode\">
          <option value=\"pva\">Player vs Computer</option>
          <option value=\"pvp\">Player vs Player</option>
        </select>
      </label>
      <p id=\"turn\"></p>
      <div id=\"board\"></div>
      <p id=\"status\"></p>
      <div class=\"scores\">
        <span id=\"playerXScore\">Player X: 0</span>
        <span id=\"playerOScore\">Player O: 0</span>
      </div>
    </main>
    <div id=\"modal\">
      <div class=\"card\">
        <p id=\"modal-message\"></p>
        <button id=\"play-again\">Play again</button>
      </div>
    </div>
    <script>
      const boardEl = document.getElementById('board');
      const modeEl = document.getElementById('mode');
      const turnEl = document.getElementById('turn');
      const statusEl = document.getElementById('status');
      const xScoreEl = document.getElementById('playerXScore');
      const oScoreEl = document.getElementById('playerOScore');
      const modalEl = document.getElementById('modal');
      const modalMessageEl = document.getElementById('modal-message');
      const playAgainButton = document.getElementById('play-again');

      let gameState = null;
      let pollTimer = null;

      async function api(path, body) {
        const response = await fetch(path, {
          method: body === undefined ? 'GET' : 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: body === undefined ? undefined : JSON.stringify(body),
        });
        if (!response.ok) {
          return null;
        }
        return response.json();
      }

      function render() {
        boardEl.innerHTML = '';
        if (!gameState) {
          return;
        }
        const winning = gameState.winningLine || [];
        gameState.board.forEach((value, index) => {
          const cell = document.createElement('button');
          cell.className = 'cell';
          cell.textContent = value;
          if (value) {
            cell.classList.add(value.toLowerCase());
          }
          if (winning.includes(index)) {
            cell.classList.add('winner');
          }
          cell.addEventListener('click', () => play(index));
          boardEl.appendChild(cell);
        });
        const finished = gameState.winner || gameState.drawn;
        turnEl.textContent = finished ? '' : `Turn: Player ${gameState.currentPlayer}`;
        statusEl.textContent = gameState.status;
        xScoreEl.textContent = `Player X: ${gameState.scores.X}`;
        oScoreEl.textContent = `Player O: ${gameState.scores.O}`;
        if (finished) {
          modalMessageEl.textContent = gameState.status;
          modalEl.style.display = 'flex';
        } else {
          modalEl.style.display = 'none';
        }
      }

      function schedulePoll() {
        clearTimeout(pollTimer);
        if (gameState && gameState.aiPending) {
          pollTimer = setTimeout(async () => {
            gameState = await api(`/api/game/${gameState.id}`);
            render();
            schedulePoll();
          }, 250);
        }
      }

      async function play(index) {
        if (!gameState || gameState.aiPending || gameState.board[index]) {
          return;
        }
        const next = await api(`/api/game/${gameState.id}/move`, { cellIndex: index });
        if (next) {
          gameState = next;
          render();
          schedulePoll();
        }
      }

      async function startGame() {
        const previousId = gameState ? gameState.id : null;
        gameState = await api('/api/game', { mode: modeEl.value, previousId });
        render();
      }

      playAgainButton.addEventListener('click', async () => {
        gameState = await api(`/api/game/${gameState.id}/reset`, {});
        render();
      });
      modeEl.addEventListener('change', startGame);
      startGame();
    </script>
  </body>
</html>
"""
