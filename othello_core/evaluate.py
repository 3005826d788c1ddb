from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .board import SIZE, Board, Cell, Coord, opponent
from .rules import apply_move, legal_moves

logger = logging.getLogger(__name__)

LAST = SIZE - 1
CORNERS = ((0, 0), (0, LAST), (LAST, 0), (LAST, LAST))

CORNER_WEIGHT = 100
EDGE_WEIGHT = 10
INNER_RING_WEIGHT = -5

CORNER_STABILITY = 10
EDGE_STABILITY = 2
MOBILITY_PENALTY = 2
ENDGAME_THRESHOLD = 40
ENDGAME_FACTOR = 3


def is_corner(move: Coord) -> bool:
    r, c = move
    return r in (0, LAST) and c in (0, LAST)


def is_edge(move: Coord) -> bool:
    """True for border cells that are not corners."""
    r, c = move
    return (r in (0, LAST) or c in (0, LAST)) and not is_corner(move)


def position_weight(move: Coord) -> int:
    r, c = move
    if is_corner(move):
        return CORNER_WEIGHT
    if r in (0, LAST) or c in (0, LAST):
        return EDGE_WEIGHT
    if r in (1, LAST - 1) or c in (1, LAST - 1):
        return INNER_RING_WEIGHT
    return 0


def material(board: Board, player: Cell) -> int:
    counts = board.count_stones()
    if player is Cell.BLACK:
        return counts.black - counts.white
    return counts.white - counts.black


def stability(board: Board, player: Cell) -> int:
    """Corners are worth 10 each, the 28 other border cells 2 each."""
    total = 0
    for coord in board.coords():
        if board.get(*coord) is not player:
            continue
        if is_corner(coord):
            total += CORNER_STABILITY
        elif is_edge(coord):
            total += EDGE_STABILITY
    return total


def evaluate(board: Board, move: Coord, player: Cell) -> int:
    """
    Static score of ``move`` for ``player``; higher is better.
    The move is simulated on a clone, the live board is never touched.
    """
    sim = board.clone()
    apply_move(sim, move, player)

    diff = material(sim, player)
    value = position_weight(move)
    value += diff
    value += stability(sim, player)
    value -= MOBILITY_PENALTY * len(legal_moves(sim, opponent(player)))
    if sim.count_stones().total >= ENDGAME_THRESHOLD:
        value += ENDGAME_FACTOR * diff
    return value


def best_move(board: Board, player: Cell) -> Optional[Coord]:
    """The legal move with the highest evaluation, first in scan order on ties."""
    best: Optional[Coord] = None
    best_score = 0
    for move in legal_moves(board, player):
        value = evaluate(board, move, player)
        if best is None or value > best_score:
            best, best_score = move, value
    if best is not None:
        logger.debug("best move for %s: %s (score %d)", player.label, best, best_score)
    return best


def hints(board: Board, player: Cell) -> Dict[str, object]:
    moves: List[Coord] = legal_moves(board, player)
    return {"moves": moves, "best": best_move(board, player) if moves else None}
