from __future__ import annotations

import logging
from enum import Enum
from typing import List, Optional

from .board import SIZE, Board, Cell, Coord, StoneCount, opponent
from .state import GameState

logger = logging.getLogger(__name__)

DIRECTIONS = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1),           (0, 1),
    (1, -1),  (1, 0),  (1, 1),
)


class TurnOutcome(Enum):
    NEXT = "next"
    PASS = "pass"
    GAME_OVER = "game_over"


def in_bounds(r: int, c: int) -> bool:
    return 0 <= r < SIZE and 0 <= c < SIZE


def flips_for(board: Board, move: Coord, player: Cell) -> List[Coord]:
    """
    Collects the opponent stones bracketed by a stone placed at ``move``.
    Each of the 8 directions contributes its run of opponent stones only if the
    run is non-empty and ends on an in-bounds stone owned by ``player``.
    """
    row, col = move
    board.index(row, col)  # raises IndexError off the board
    other = opponent(player)
    flipped: List[Coord] = []
    for dr, dc in DIRECTIONS:
        run: List[Coord] = []
        r, c = row + dr, col + dc
        while in_bounds(r, c) and board.get(r, c) is other:
            run.append((r, c))
            r += dr
            c += dc
        if run and in_bounds(r, c) and board.get(r, c) is player:
            flipped.extend(run)
    return flipped


def is_legal(board: Board, move: Coord, player: Cell) -> bool:
    """A move is legal iff the target is empty and it flips at least one stone."""
    if board.get(*move) is not Cell.EMPTY:
        return False
    return len(flips_for(board, move, player)) > 0


def legal_moves(board: Board, player: Cell) -> List[Coord]:
    """Calculates all legal moves for ``player`` in row-major scan order."""
    return [
        coord for coord in board.coords()
        if board.get(*coord) is Cell.EMPTY and flips_for(board, coord, player)
    ]


def has_legal_move(board: Board, player: Cell) -> bool:
    for coord in board.coords():
        if board.get(*coord) is Cell.EMPTY and flips_for(board, coord, player):
            return True
    return False


def apply_move(board: Board, move: Coord, player: Cell) -> List[Coord]:
    """Places a stone for ``player`` and flips the bracketed stones in place.

    Returns the flipped coordinates. Turn order is not touched here.
    """
    if board.get(*move) is not Cell.EMPTY:
        raise ValueError(f"cell {move} is occupied")
    flipped = flips_for(board, move, player)
    if not flipped:
        raise ValueError(f"move {move} flips nothing for {player.label}")
    board.set(move[0], move[1], player)
    for r, c in flipped:
        board.set(r, c, player)
    return flipped


def advance_turn(state: GameState) -> TurnOutcome:
    """
    Hands the turn to the opponent, passing them automatically when they have
    no legal move, and ends the game when neither side can move.
    """
    if not state.active:
        return TurnOutcome.GAME_OVER
    mover = state.current_player
    state.current_player = opponent(mover)
    if has_legal_move(state.board, state.current_player):
        return TurnOutcome.NEXT
    if has_legal_move(state.board, mover):
        logger.info("%s has no legal move and passes", state.current_player.label)
        state.current_player = mover
        return TurnOutcome.PASS
    state.active = False
    logger.info("no legal moves for either side; game over")
    return TurnOutcome.GAME_OVER


def score(board: Board) -> StoneCount:
    return board.count_stones()


def winner(board: Board) -> Optional[Cell]:
    """The color with strictly more stones, or None for a draw."""
    counts = score(board)
    if counts.black > counts.white:
        return Cell.BLACK
    if counts.white > counts.black:
        return Cell.WHITE
    return None
