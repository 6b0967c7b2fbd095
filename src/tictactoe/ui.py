"""FastAPI-powered web UI for playing tic-tac-toe in the browser."""

from __future__ import annotations

import logging
import random
import threading
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field

from .ai import Difficulty, MinimaxAI
from .game import O, X, TicTacToeGame

logger = logging.getLogger(__name__)


class GameMode(str, Enum):
    PVP = "pvp"
    PVC = "pvc"


AI_PLAYER = O
AI_THINK_DELAY: Tuple[float, float] = (0.5, 0.5)


def _new_scores() -> Dict[str, int]:
    return {X: 0, O: 0, "ties": 0}


@dataclass
class GameSession:
    """Container for an active game, its settings and the running scoreboard."""

    game: TicTacToeGame
    mode: GameMode = GameMode.PVP
    difficulty: Difficulty = Difficulty.MEDIUM
    ai: Optional[MinimaxAI] = None
    scores: Dict[str, int] = field(default_factory=_new_scores)
    move_log: List[Dict[str, int | str]] = field(default_factory=list)
    ai_pending: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def configure(self, mode: GameMode, difficulty: Difficulty) -> None:
        self.mode = mode
        self.difficulty = difficulty
        self.ai = (
            MinimaxAI(player=AI_PLAYER, difficulty=difficulty)
            if mode == GameMode.PVC
            else None
        )

    def new_round(self) -> None:
        self.game.reset()
        self.move_log.clear()
        self.ai_pending = False

    def record_move(self, player: str, cell_index: int) -> None:
        self.move_log.append({"player": player, "cellIndex": cell_index})
        game = self.game
        if game.winner:
            self.scores[game.winner] += 1
        elif game.drawn:
            self.scores["ties"] += 1
        else:
            return
        logger.info("Game finished: %s", result_message(self))


SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(title="Tic-Tac-Toe", description="Tic-tac-toe played in the browser")


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    mode: GameMode = Field(default=GameMode.PVP, description="pvp or pvc")
    difficulty: Difficulty = Field(
        default=Difficulty.MEDIUM,
        description="How often the computer ignores its best move",
    )


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    model_config = ConfigDict(populate_by_name=True)

    cell_index: int = Field(alias="cellIndex", ge=0, le=8)


class SettingsRequest(BaseModel):
    """Partial update of a session's mode and/or difficulty."""

    mode: Optional[GameMode] = None
    difficulty: Optional[Difficulty] = None


def result_message(session: GameSession) -> Optional[str]:
    game = session.game
    if game.drawn:
        return "It's a tie!"
    if not game.winner:
        return None
    if session.mode == GameMode.PVC and game.winner == AI_PLAYER:
        return "Computer wins!"
    return f"Player {game.winner} wins!"


def _create_session(mode: GameMode, difficulty: Difficulty) -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    session = GameSession(game=TicTacToeGame())
    session.configure(mode, difficulty)
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info(
        "Created session %s (mode=%s, difficulty=%s)",
        session_id,
        mode.value,
        difficulty.value,
    )
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
            if not session.ai or not session.ai_pending:
                return
            game = session.game
            if game.finished or game.current_player != session.ai.player:
                return
            cell_index = session.ai.choose(game)
            game.play_move(cell_index)
            logger.info("AI played cell %d in session %s", cell_index, game_id)
            session.record_move(session.ai.player, cell_index)
        finally:
            session.ai_pending = False


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        game = session.game
        state: Dict[str, object] = {
            "id": game_id,
            "mode": session.mode.value,
            "difficulty": session.difficulty.value,
            "board": [c if c in (X, O) else "" for c in game.board],
            "currentPlayer": game.current_player,
            "winner": game.winner,
            "winningLine": list(game.winning_line) if game.winning_line else None,
            "drawn": game.drawn,
            "scores": dict(session.scores),
            "moveLog": list(session.move_log),
            "availableMoves": game.available_moves(),
            "aiPending": session.ai_pending,
            "message": result_message(session),
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
        if game.finished:
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

        session.record_move(player, cell_index)

        should_schedule_ai = bool(
            session.ai
            and not game.finished
            and game.current_player == session.ai.player
        )
        if should_schedule_ai:
            session.ai_pending = True

    if should_schedule_ai and background_tasks is not None:
        background_tasks.add_task(_run_ai_turn, game_id)


@app.post("/api/game")
def create_game(request: NewGameRequest) -> Dict[str, object]:
    game_id, session = _create_session(request.mode, request.difficulty)
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
    session = _get_session(game_id)
    with session.lock:
        session.new_round()
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/scores/reset")
def reset_scores(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        session.scores = _new_scores()
    return _serialize_session(game_id, session)


@app.patch("/api/game/{game_id}/settings")
def update_settings(game_id: str, request: SettingsRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        mode = request.mode or session.mode
        difficulty = request.difficulty or session.difficulty
        mode_changed = mode != session.mode
        session.configure(mode, difficulty)
        # Switching modes starts a fresh board; scores carry over
        if mode_changed:
            session.new_round()
    return _serialize_session(game_id, session)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Tic Tac Toe</title>
    <style>
      :root {
        color-scheme: dark;
        --bg: #0f172a;
        --panel: #1e293b;
        --accent: #38bdf8;
        --x: #f472b6;
        --o: #34d399;
      }
      body {
        margin: 0;
        min-height: 100vh;
        display: flex;
        align-items: center;
        justify-content: center;
        font-family: system-ui, sans-serif;
        background: var(--bg);
        color: #e2e8f0;
      }
      main { width: min(420px, 92vw); }
      h1 { text-align: center; margin-bottom: 0.25rem; }
      .panel {
        background: var(--panel);
        border-radius: 12px;
        padding: 1rem;
        margin: 1rem 0;
      }
      .row { display: flex; gap: 0.5rem; flex-wrap: wrap; }
      button {
        flex: 1;
        padding: 0.5rem;
        border: 1px solid #334155;
        border-radius: 8px;
        background: #0b1220;
        color: inherit;
        cursor: pointer;
      }
      button.active { border-color: var(--accent); color: var(--accent); }
      #board {
        display: grid;
        grid-template-columns: repeat(3, 1fr);
        gap: 0.5rem;
      }
      .cell {
        aspect-ratio: 1;
        font-size: 2.5rem;
        font-weight: 700;
      }
      .cell.X { color: var(--x); }
      .cell.O { color: var(--o); }
      .cell.win { background: #1d4ed8; }
      #status { text-align: center; min-height: 1.5rem; }
      #scores { display: flex; justify-content: space-around; }
    </style>
  </head>
  <body>
    <main>
      <h1>Tic Tac Toe</h1>
      <div class=\"panel\">
        <div class=\"row\" id=\"modes\">
          <button data-mode=\"pvp\">Player vs Player</button>
          <button data-mode=\"pvc\">Player vs Computer</button>
        </div>
        <div class=\"row\" id=\"difficulties\" style=\"margin-top: 0.5rem\">
          <button data-difficulty=\"easy\">Easy</button>
          <button data-difficulty=\"medium\">Medium</button>
          <button data-difficulty=\"hard\">Hard</button>
        </div>
      </div>
      <div class=\"panel\">
        <div id=\"status\"></div>
        <div id=\"board\"></div>
      </div>
      <div class=\"panel\">
        <div id=\"scores\"></div>
        <div class=\"row\" style=\"margin-top: 0.5rem\">
          <button id=\"reset\">New Game</button>
          <button id=\"reset-scores\">Reset Scores</button>
        </div>
      </div>
    </main>
    <script>
      let state = null;
      let poll = null;

      async function api(path, method = "GET", body = undefined) {
        const response = await fetch(path, {
          method,
          headers: { "Content-Type": "application/json" },
          body: body === undefined ? undefined : JSON.stringify(body),
        });
        const payload = await response.json();
        if (!response.ok) {
          throw new Error(payload.detail || "Request failed");
        }
        return payload;
      }

      function render() {
        const board = document.getElementById("board");
        board.innerHTML = "";
        const line = state.winningLine || [];
        state.board.forEach((mark, index) => {
          const cell = document.createElement("button");
          cell.className = `cell ${mark}` + (line.includes(index) ? " win" : "");
          cell.textContent = mark;
          cell.onclick = () => play(index);
          board.appendChild(cell);
        });
        document.querySelectorAll("#modes button").forEach((b) => {
          b.classList.toggle("active", b.dataset.mode === state.mode);
        });
        document.querySelectorAll("#difficulties button").forEach((b) => {
          b.classList.toggle("active", b.dataset.difficulty === state.difficulty);
          b.disabled = state.mode !== "pvc";
        });
        let status = state.message;
        if (!status) {
          status = state.aiPending
            ? "Computer is thinking..."
            : `Player ${state.currentPlayer}'s turn`;
        }
        document.getElementById("status").textContent = status;
        const s = state.scores;
        document.getElementById("scores").textContent =
          `X: ${s.X}   O: ${s.O}   Ties: ${s.ties}`;
      }

      function update(next) {
        state = next;
        render();
        if (state.aiPending && !poll) {
          poll = setInterval(async () => {
            const latest = await api(`/api/game/${state.id}`);
            if (!latest.aiPending) {
              clearInterval(poll);
              poll = null;
            }
            update(latest);
          }, 250);
        }
      }

      async function play(index) {
        try {
          update(await api(`/api/game/${state.id}/move`, "POST", { cellIndex: index }));
        } catch (error) {
          document.getElementById("status").textContent = error.message;
        }
      }

      document.querySelectorAll("#modes button").forEach((b) => {
        b.onclick = async () =>
          update(await api(`/api/game/${state.id}/settings`, "PATCH", { mode: b.dataset.mode }));
      });
      document.querySelectorAll("#difficulties button").forEach((b) => {
        b.onclick = async () =>
          update(
            await api(`/api/game/${state.id}/settings`, "PATCH", {
              difficulty: b.dataset.difficulty,
            })
          );
      });
      document.getElementById("reset").onclick = async () =>
        update(await api(`/api/game/${state.id}/reset`, "POST"));
      document.getElementById("reset-scores").onclick = async () =>
        update(await api(`/api/game/${state.id}/scores/reset`, "POST"));

      api("/api/game", "POST", {}).then(update);
    </script>
  </body>
</html>
"""
