from __future__ import annotations

import json
import logging
import os
import sqlite3
from datetime import datetime, timezone
from typing import Optional

from .ai import Tier
from .session import GameResult
from .settings import Settings
from .stats import Statistics, record_game

logger = logging.getLogger(__name__)

_STAT_COLUMNS = (
    "total_games",
    "wins",
    "losses",
    "draws",
    "current_streak",
    "max_streak",
    "total_play_time",
    "average_game_time",
    "highest_score",
    "perfect_wins",
)


def _ensure_db_dir(db_path: str) -> None:
    """Ensures the directory for the SQLite DB exists before connecting."""
    directory = os.path.dirname(db_path)
    if directory and not os.path.exists(directory):
        os.makedirs(directory, exist_ok=True)


def _resolve_db_path(db_path: str) -> str:
    """Resolves a potentially unwritable DB path to a writable one, creating the directory if needed."""
    try:
        _ensure_db_dir(db_path)
        return db_path
    except PermissionError:
        pass
    candidates = [
        os.getenv('OTHELLO_DB_DIR'),
        os.path.join(os.getcwd(), 'data'),
        '/tmp',
    ]
    base = os.path.basename(db_path) or 'othello.db'
    for d in candidates:
        if not d:
            continue
        try:
            os.makedirs(d, exist_ok=True)
            logger.warning("DB path %s not writable, using %s", db_path, d)
            return os.path.join(d, base)
        except OSError:
            continue
    # Last resort: current working directory
    return base


def _ensure_db(conn: sqlite3.Connection) -> None:
    """Ensures the settings and statistics tables exist."""
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS settings (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        )
        """
    )
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS statistics (
            id INTEGER PRIMARY KEY CHECK (id = 1),
            total_games INTEGER NOT NULL,
            wins INTEGER NOT NULL,
            losses INTEGER NOT NULL,
            draws INTEGER NOT NULL,
            current_streak INTEGER NOT NULL,
            max_streak INTEGER NOT NULL,
            total_play_time REAL NOT NULL,
            average_game_time REAL NOT NULL,
            highest_score INTEGER NOT NULL,
            perfect_wins INTEGER NOT NULL,
            ai_stats TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
        """
    )
    conn.commit()


def _connect(db_path: str) -> sqlite3.Connection:
    resolved = _resolve_db_path(db_path)
    _ensure_db_dir(resolved)
    conn = sqlite3.connect(resolved)
    _ensure_db(conn)
    return conn


def load_settings(db_path: str) -> Settings:
    """Reads stored settings; anything never saved keeps its default."""
    conn = _connect(db_path)
    try:
        rows = conn.execute("SELECT key, value FROM settings").fetchall()
    finally:
        conn.close()
    data = {key: json.loads(value) for key, value in rows}
    return Settings.from_dict(data)


def save_settings(db_path: str, settings: Settings) -> None:
    conn = _connect(db_path)
    try:
        conn.executemany(
            "INSERT OR REPLACE INTO settings (key, value) VALUES (?, ?)",
            [(k, json.dumps(v)) for k, v in settings.to_dict().items()],
        )
        conn.commit()
    finally:
        conn.close()


def load_stats(db_path: str) -> Statistics:
    conn = _connect(db_path)
    try:
        cur = conn.execute(
            f"SELECT {', '.join(_STAT_COLUMNS)}, ai_stats FROM statistics WHERE id = 1"
        )
        row = cur.fetchone()
    finally:
        conn.close()
    if not row:
        return Statistics()
    data = dict(zip(_STAT_COLUMNS, row[:-1]))
    data["ai_stats"] = json.loads(row[-1])
    return Statistics.from_dict(data)


def save_stats(db_path: str, stats: Statistics) -> None:
    conn = _connect(db_path)
    try:
        values = [getattr(stats, name) for name in _STAT_COLUMNS]
        conn.execute(
            f"""
            INSERT OR REPLACE INTO statistics
            (id, {', '.join(_STAT_COLUMNS)}, ai_stats, updated_at)
            VALUES (1, {', '.join('?' for _ in _STAT_COLUMNS)}, ?, ?)
            """,
            (
                *values,
                json.dumps(stats.ai_stats),
                datetime.now(timezone.utc).isoformat(timespec='seconds'),
            ),
        )
        conn.commit()
    finally:
        conn.close()


def reset_stats(db_path: str) -> Statistics:
    stats = Statistics()
    save_stats(db_path, stats)
    return stats


def resolve_db_path(db_path: Optional[str]) -> str:
    return _resolve_db_path(db_path or os.getenv('OTHELLO_DB', os.path.join('data', 'othello.db')))


def db_record_game(db_path: str, result: GameResult, tier: Optional[Tier] = None, seconds: float = 0.0) -> Statistics:
    """Loads the stored statistics, folds in one finished game and saves them back."""
    stats = record_game(load_stats(db_path), result, tier, seconds)
    save_stats(db_path, stats)
    return stats
