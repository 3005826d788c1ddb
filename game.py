from __future__ import annotations

# Facade module that re-exports Othello core functionality.
# Kept for the Flask app, the CLI entry point and tests.
# Single-responsibility modules live under othello_core/*.

import random

from othello_core.board import SIZE, Board, Cell, Coord, StoneCount, opponent, parse_player
from othello_core.state import GameState
from othello_core.rules import (
    DIRECTIONS,
    TurnOutcome,
    in_bounds,
    flips_for,
    is_legal,
    legal_moves,
    has_legal_move,
    apply_move,
    advance_turn,
    score,
    winner,
)
from othello_core.evaluate import (
    is_corner,
    is_edge,
    position_weight,
    material,
    stability,
    evaluate,
    best_move,
    hints,
)
from othello_core.ai import (
    THINKING_TIME,
    AIConfig,
    Tier,
    STRATEGIES,
    random_move,
    greedy_move,
    advanced_move,
    choose_move,
)
from othello_core.events import Event, GameEvent
from othello_core.scheduler import ImmediateScheduler, ManualScheduler, TimerScheduler
from othello_core.session import GameResult, GameSession, MoveResult, RejectReason, classify_result
from othello_core.settings import Settings
from othello_core.stats import Statistics, record_game
from othello_core.db import (
    load_settings,
    save_settings,
    load_stats,
    save_stats,
    reset_stats,
    db_record_game,
    resolve_db_path,
)


def new_session(ai: AIConfig | None = None, seed: int | None = None, **kwargs) -> GameSession:
    """Shortcut for a session whose AI decisions run synchronously."""
    return GameSession(ai=ai, scheduler=kwargs.pop('scheduler', ImmediateScheduler()), rng=random.Random(seed), **kwargs)


def main() -> None:
    # CLI driver delegated to othello_core.cli
    from othello_core.cli import main as _main
    _main()


if __name__ == '__main__':
    main()
