from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional

from .board import Board, Cell, Coord
from .evaluate import is_corner, is_edge
from .rules import flips_for, legal_moves

logger = logging.getLogger(__name__)


class Tier(Enum):
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"

    @classmethod
    def parse(cls, value: str) -> 'Tier':
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"unknown AI level: {value!r}") from None


# Seconds the AI pretends to think before moving.
THINKING_TIME: Dict[Tier, float] = {
    Tier.EASY: 0.5,
    Tier.NORMAL: 1.0,
    Tier.HARD: 1.5,
}


@dataclass(frozen=True)
class AIConfig:
    """Which tier governs the automated player and which color it controls."""
    tier: Tier = Tier.NORMAL
    side: Cell = Cell.WHITE


Strategy = Callable[[Board, Cell, List[Coord], random.Random], Coord]


def random_move(board: Board, player: Cell, moves: List[Coord], rng: random.Random) -> Coord:
    return rng.choice(moves)


def greedy_move(board: Board, player: Cell, moves: List[Coord], rng: random.Random) -> Coord:
    """Picks the move flipping the most stones; the first one wins ties."""
    best = moves[0]
    most = 0
    for move in moves:
        flips = len(flips_for(board, move, player))
        if flips > most:
            most = flips
            best = move
    return best


def advanced_move(board: Board, player: Cell, moves: List[Coord], rng: random.Random) -> Coord:
    """Corner first, then any other edge, then the greedy choice."""
    for move in moves:
        if is_corner(move):
            return move
    for move in moves:
        if is_edge(move):
            return move
    return greedy_move(board, player, moves, rng)


STRATEGIES: Dict[Tier, Strategy] = {
    Tier.EASY: random_move,
    Tier.NORMAL: greedy_move,
    Tier.HARD: advanced_move,
}


def choose_move(board: Board, player: Cell, tier: Tier, rng: Optional[random.Random] = None) -> Coord:
    """Selects a move for ``player``. The caller must pass instead when no legal move exists."""
    moves = legal_moves(board, player)
    if not moves:
        raise ValueError(f"{player.label} has no legal move to choose from")
    move = STRATEGIES[tier](board, player, moves, rng or random.Random())
    logger.debug("%s AI (%s) picked %s from %d moves", tier.value, player.label, move, len(moves))
    return move
