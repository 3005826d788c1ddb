from __future__ import annotations

import logging
import os
import random
import sqlite3
from typing import Any, Dict, List, Optional, Tuple

from flask import Flask, jsonify, request, send_from_directory

from othello_core.ai import AIConfig, Tier
from othello_core.board import SIZE, Board, Cell, Coord, parse_player
from othello_core.db import (
    db_record_game,
    load_settings,
    load_stats,
    reset_stats,
    save_settings,
)
from othello_core.evaluate import hints as board_hints
from othello_core.events import Event, GameEvent
from othello_core.rules import legal_moves
from othello_core.scheduler import ManualScheduler
from othello_core.session import GameResult, GameSession
from othello_core.state import GameState

logger = logging.getLogger(__name__)

DEFAULT_DB = os.getenv("OTHELLO_DB", os.path.join("data", "othello.db"))

# Optional front end lives in ./static (index.html, main.js, styles.css)
STATIC_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "static"))
app = Flask(__name__, static_url_path="/static", static_folder=STATIC_DIR)


# ---------- JSON <-> model ----------

def board_to_json(b: Board) -> List[List[int]]:
    """8 rows of 8 ints: 0 empty, -1 black, 1 white."""
    return [[int(cell) for cell in row] for row in b.rows()]


def board_from_json(rows: Any) -> Board:
    if not isinstance(rows, list) or len(rows) != SIZE:
        raise ValueError(f"board must be a list of {SIZE} rows")
    grid: List[Cell] = []
    for row in rows:
        if not isinstance(row, list) or len(row) != SIZE:
            raise ValueError(f"each board row must hold {SIZE} cells")
        grid.extend(Cell(int(v)) for v in row)
    return Board(grid=grid)


def ai_to_json(ai: Optional[AIConfig]) -> Optional[Dict[str, str]]:
    if ai is None:
        return None
    return {"level": ai.tier.value, "side": ai.side.label}


def ai_from_json(obj: Any) -> Optional[AIConfig]:
    if not obj:
        return None
    return AIConfig(tier=Tier.parse(obj["level"]), side=parse_player(obj["side"]))


def state_to_json(s: GameState, ai: Optional[AIConfig] = None) -> Dict[str, Any]:
    return {
        "board": board_to_json(s.board),
        "currentPlayer": s.current_player.label,
        "active": bool(s.active),
        "ai": ai_to_json(ai),
    }


def json_to_state(obj: Dict[str, Any]) -> Tuple[GameState, Optional[AIConfig]]:
    board = board_from_json(obj["board"])
    state = GameState(
        board=board,
        current_player=parse_player(obj.get("currentPlayer", "black")),
        active=bool(obj.get("active", True)),
    )
    return state, ai_from_json(obj.get("ai"))


def _parse_coord(obj: Any) -> Coord:
    if not isinstance(obj, (list, tuple)) or len(obj) != 2:
        raise ValueError("move must be [row, col]")
    r, c = int(obj[0]), int(obj[1])
    if not (0 <= r < SIZE and 0 <= c < SIZE):
        raise ValueError(f"move off the board: [{r}, {c}]")
    return (r, c)


def _parse_seed(value: Any) -> Any:
    """Seeds for the easy AI: an int, a string or nothing."""
    if value is None or isinstance(value, (int, str)):
        return value
    raise ValueError("seed must be an integer or a string")


def _ai_from_request(body: Dict[str, Any]) -> Optional[AIConfig]:
    """AI setup for a new game: request fields win, stored settings fill the gaps."""
    stored = load_settings(DEFAULT_DB)
    overrides = {
        "game_mode": body.get("mode"),
        "ai_level": body.get("level"),
        "ai_player": body.get("aiPlayer"),
    }
    settings = stored.update({k: v for k, v in overrides.items() if v is not None})
    return settings.ai_config()


# ---------- session plumbing ----------

class _Turn:
    """One request's worth of session: the session, its queued AI task and the events emitted."""

    def __init__(self, state: Optional[GameState], ai: Optional[AIConfig], seed: Any = None, elapsed: float = 0.0) -> None:
        self.events: List[GameEvent] = []
        self.scheduler = ManualScheduler()
        self.elapsed = float(elapsed or 0.0)
        self.session = GameSession(
            ai=ai,
            scheduler=self.scheduler,
            rng=random.Random(seed),
            listeners=[self.events.append],
            on_game_over=self._record,
            thinking_time=0.0,
            state=state,
        )

    def _record(self, result: GameResult, session: GameSession) -> None:
        try:
            db_record_game(DEFAULT_DB, result, session.ai.tier if session.ai else None, self.elapsed)
        except (OSError, sqlite3.Error) as e:
            # Statistics are best effort; the move itself already happened.
            logger.warning("could not record game result: %s", e)

    def response(self, **extra: Any) -> Dict[str, Any]:
        s = self.session
        result = s.last_result
        payload = {
            "ok": True,
            "state": state_to_json(s.state, s.ai),
            "legalMoves": legal_moves(s.board, s.current_player) if s.active else [],
            "score": s.board.count_stones()._asdict(),
            "events": [e.to_json() for e in self.events],
            "aiPending": self.scheduler.pending > 0,
            "result": result.to_json() if result is not None else None,
        }
        payload.update(extra)
        return payload


def _turn_from_body(body: Dict[str, Any]) -> _Turn:
    s_in = body.get("state")
    if not isinstance(s_in, dict):
        raise ValueError("state required")
    state, ai = json_to_state(s_in)
    return _Turn(state, ai, seed=_parse_seed(body.get("seed")), elapsed=body.get("elapsed", 0.0))


# ---------- Static routes ----------

@app.get("/")
def index() -> Any:
    if os.path.isfile(os.path.join(STATIC_DIR, "index.html")):
        return send_from_directory(app.static_folder, "index.html")
    return jsonify({
        "ok": True,
        "name": "othello",
        "endpoints": ["/api/new", "/api/legal", "/api/move", "/api/ai", "/api/hint", "/api/settings", "/api/stats"],
    })


# ---------- Core Game API ----------

@app.post("/api/new")
def api_new() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        ai = _ai_from_request(body)
        seed = _parse_seed(body.get("seed"))
    except (KeyError, TypeError, ValueError) as e:
        return jsonify({"ok": False, "error": f"bad settings: {e}"}), 400
    turn = _Turn(None, ai, seed=seed)
    return jsonify(turn.response())


@app.post("/api/legal")
def api_legal() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        turn = _turn_from_body(body)
    except (KeyError, TypeError, ValueError) as e:
        return jsonify({"ok": False, "error": f"bad state: {e}"}), 400
    s = turn.session
    return jsonify({"ok": True, "legalMoves": legal_moves(s.board, s.current_player) if s.active else []})


@app.post("/api/move")
def api_move() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        turn = _turn_from_body(body)
        move = _parse_coord(body.get("move"))
    except (KeyError, TypeError, ValueError) as e:
        return jsonify({"ok": False, "error": f"bad request: {e}"}), 400
    s = turn.session
    result = s.attempt_move(*move)
    if not result.ok:
        return jsonify({
            "ok": False,
            "error": "Illegal move",
            "reason": result.reason.value if result.reason else None,
            "legalMoves": legal_moves(s.board, s.current_player) if s.active else [],
            "events": [e.to_json() for e in turn.events],
        }), 400
    return jsonify(turn.response(flipped=[list(c) for c in result.flipped]))


@app.post("/api/ai")
def api_ai() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        turn = _turn_from_body(body)
    except (KeyError, TypeError, ValueError) as e:
        return jsonify({"ok": False, "error": f"bad state: {e}"}), 400
    s = turn.session
    if not s.request_ai_move():
        return jsonify({"ok": False, "error": "Not the AI's turn"}), 400
    turn.scheduler.run_pending(1)
    placed = [e for e in turn.events if e.kind is Event.STONE_PLACED and e.data.get("ai")]
    move = [placed[-1].data["row"], placed[-1].data["col"]] if placed else None
    return jsonify(turn.response(move=move))


@app.post("/api/hint")
def api_hint() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        turn = _turn_from_body(body)
    except (KeyError, TypeError, ValueError) as e:
        return jsonify({"ok": False, "error": f"bad state: {e}"}), 400
    s = turn.session
    if not s.active:
        return jsonify({"ok": True, "moves": [], "best": None})
    h = board_hints(s.board, s.current_player)
    return jsonify({"ok": True, "moves": h["moves"], "best": h["best"]})


# ---------- Settings & statistics ----------

@app.get("/api/settings")
def api_settings_get() -> Any:
    return jsonify({"ok": True, "settings": load_settings(DEFAULT_DB).to_dict()})


@app.post("/api/settings")
def api_settings_post() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        settings = load_settings(DEFAULT_DB).update(body)
    except (TypeError, ValueError) as e:
        return jsonify({"ok": False, "error": f"bad settings: {e}"}), 400
    save_settings(DEFAULT_DB, settings)
    return jsonify({"ok": True, "settings": settings.to_dict()})


@app.get("/api/stats")
def api_stats() -> Any:
    return jsonify({"ok": True, "stats": load_stats(DEFAULT_DB).to_dict()})


@app.post("/api/stats/reset")
def api_stats_reset() -> Any:
    return jsonify({"ok": True, "stats": reset_stats(DEFAULT_DB).to_dict()})


# Entrypoint for "python app.py"
if __name__ == "__main__":
    logging.basicConfig(level=os.getenv("OTHELLO_LOG_LEVEL", "INFO").upper())
    debug = os.getenv("FLASK_DEBUG", os.getenv("DEBUG", "0")).lower() in ("1", "true", "yes", "on")
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=debug)
