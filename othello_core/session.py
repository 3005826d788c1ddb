from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from .ai import THINKING_TIME, AIConfig, choose_move
from .board import Cell, Coord, opponent
from .evaluate import hints as board_hints
from .events import Event, GameEvent, Listener
from .rules import TurnOutcome, advance_turn, apply_move, flips_for, has_legal_move, score, winner
from .scheduler import ImmediateScheduler, Scheduler
from .state import GameState

logger = logging.getLogger(__name__)


class RejectReason(Enum):
    GAME_OVER = "game_over"
    AI_THINKING = "ai_thinking"
    AI_TURN = "ai_turn"
    OCCUPIED = "occupied"
    NO_FLIPS = "no_flips"


@dataclass(frozen=True)
class MoveResult:
    ok: bool
    reason: Optional[RejectReason] = None
    move: Optional[Coord] = None
    flipped: Tuple[Coord, ...] = ()
    outcome: Optional[TurnOutcome] = None


@dataclass(frozen=True)
class GameResult:
    """Final score plus the outcome: win/loss/draw for the human against the AI,
    black/white/draw between two humans."""
    black: int
    white: int
    winner: Optional[Cell]
    outcome: str
    vs_ai: bool = False

    def to_json(self) -> Dict[str, Any]:
        return {
            "black": self.black,
            "white": self.white,
            "winner": self.winner.label if self.winner is not None else None,
            "outcome": self.outcome,
            "vsAi": self.vs_ai,
        }


def classify_result(state: GameState, ai: Optional[AIConfig]) -> GameResult:
    counts = score(state.board)
    win = winner(state.board)
    if ai is None:
        outcome = win.label if win is not None else "draw"
    elif win is None:
        outcome = "draw"
    else:
        outcome = "loss" if win is ai.side else "win"
    return GameResult(counts.black, counts.white, win, outcome, vs_ai=ai is not None)


GameOverHook = Callable[[GameResult, 'GameSession'], None]


class GameSession:
    """
    Owns one board and drives the turn loop for a single game.

    Human input goes through attempt_move(); when the AI is to move the session
    raises ``is_thinking`` and hands one decision task to the scheduler. Until
    that task has run, every human move is rejected.
    """

    def __init__(
        self,
        ai: Optional[AIConfig] = None,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[random.Random] = None,
        listeners: Iterable[Listener] = (),
        on_game_over: Optional[GameOverHook] = None,
        thinking_time: Optional[float] = None,
        state: Optional[GameState] = None,
    ) -> None:
        self.ai = ai
        self.scheduler = scheduler or ImmediateScheduler()
        self.rng = rng or random.Random()
        self.listeners: List[Listener] = list(listeners)
        self.on_game_over = on_game_over
        self.thinking_time = thinking_time
        self.is_thinking = False
        self.last_result: Optional[GameResult] = None
        self.started_at = time.time()
        self._generation = 0
        if state is None:
            self.state = GameState()
            self.reset()
        else:
            self.state = state
            if not state.active:
                self.last_result = classify_result(state, ai)

    # ---------- read hooks ----------

    @property
    def board(self):
        return self.state.board

    @property
    def current_player(self) -> Cell:
        return self.state.current_player

    @property
    def active(self) -> bool:
        return self.state.active

    def is_ai_turn(self) -> bool:
        return self.ai is not None and self.state.active and self.state.current_player is self.ai.side

    def has_progress(self) -> bool:
        """True once any stone beyond the 4 starting ones is on the board."""
        return self.state.board.count_stones().total > 4

    def elapsed(self) -> float:
        return time.time() - self.started_at

    def hints(self) -> Dict[str, object]:
        if self.is_thinking or not self.state.active:
            return {"moves": [], "best": None}
        return board_hints(self.state.board, self.state.current_player)

    # ---------- lifecycle ----------

    def reset(self) -> None:
        self.state = GameState()
        self.is_thinking = False
        self.last_result = None
        self.started_at = time.time()
        self._generation += 1
        logger.info("new game (ai=%s)", self.ai)
        self._emit(Event.RESET)
        if self.is_ai_turn():
            self._schedule_ai()

    def set_ai(self, ai: Optional[AIConfig]) -> None:
        """Changing who plays the AI side always starts a fresh game."""
        self.ai = ai
        self.reset()

    # ---------- moves ----------

    def attempt_move(self, row: int, col: int) -> MoveResult:
        move = (row, col)
        player = self.state.current_player
        reason = self._rejection(move, player)
        if reason is not None:
            logger.debug("rejected %s for %s: %s", move, player.label, reason.value)
            self._emit(Event.INVALID_MOVE, row=row, col=col, reason=reason.value)
            return MoveResult(ok=False, reason=reason, move=move)
        flipped = self._play(move, player, by_ai=False)
        outcome = self._advance()
        return MoveResult(ok=True, move=move, flipped=tuple(flipped), outcome=outcome)

    def request_ai_move(self) -> bool:
        """Schedules an AI decision if it is the AI's turn and none is pending."""
        if self.is_thinking or not self.is_ai_turn():
            return False
        self._schedule_ai()
        return True

    def _rejection(self, move: Coord, player: Cell) -> Optional[RejectReason]:
        if not self.state.active:
            return RejectReason.GAME_OVER
        if self.is_thinking:
            return RejectReason.AI_THINKING
        if self.is_ai_turn():
            return RejectReason.AI_TURN
        if self.state.board.get(*move) is not Cell.EMPTY:
            return RejectReason.OCCUPIED
        if not flips_for(self.state.board, move, player):
            return RejectReason.NO_FLIPS
        return None

    def _play(self, move: Coord, player: Cell, by_ai: bool) -> List[Coord]:
        flipped = apply_move(self.state.board, move, player)
        self._emit(Event.STONE_PLACED, player=player.label, row=move[0], col=move[1], ai=by_ai)
        if flipped:
            self._emit(Event.STONES_FLIPPED, player=player.label, count=len(flipped))
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s played %s\n%s", player.label, move, self.state.board.pretty())
        return flipped

    def _advance(self) -> TurnOutcome:
        mover = self.state.current_player
        outcome = advance_turn(self.state)
        if outcome is TurnOutcome.PASS:
            self._emit(Event.PASS, player=opponent(mover).label)
        if outcome is TurnOutcome.GAME_OVER:
            self._finish()
        elif self.is_ai_turn():
            self._schedule_ai()
        return outcome

    # ---------- AI ----------

    def _schedule_ai(self) -> None:
        assert self.ai is not None
        self.is_thinking = True
        self._emit(Event.AI_THINKING, player=self.ai.side.label, tier=self.ai.tier.value)
        delay = self.thinking_time if self.thinking_time is not None else THINKING_TIME[self.ai.tier]
        generation = self._generation
        self.scheduler.schedule(lambda: self._run_ai_turn(generation), delay)

    def _run_ai_turn(self, generation: int) -> None:
        if generation != self._generation:
            # The game was reset after this decision was scheduled.
            return
        if not self.is_ai_turn():
            self.is_thinking = False
            return
        assert self.ai is not None
        player = self.state.current_player
        if has_legal_move(self.state.board, player):
            move = choose_move(self.state.board, player, self.ai.tier, self.rng)
            self._play(move, player, by_ai=True)
            self._advance()
        else:
            # Only reachable from a restored state; the AI passes instead of moving.
            logger.warning("%s AI has no legal move", player.label)
            if self._advance() is TurnOutcome.NEXT:
                self._emit(Event.PASS, player=player.label)
        # A rescheduled decision keeps the flag raised until it has run.
        if not self.is_ai_turn():
            self.is_thinking = False

    # ---------- terminal ----------

    def _finish(self) -> None:
        result = classify_result(self.state, self.ai)
        self.last_result = result
        self.is_thinking = False
        logger.info("game over: black %d - white %d (%s)", result.black, result.white, result.outcome)
        kind = Event.GAME_DRAWN if result.winner is None else Event.GAME_WON
        self._emit(kind, **result.to_json())
        if self.on_game_over is not None:
            self.on_game_over(result, self)

    def _emit(self, kind: Event, **data: Any) -> None:
        event = GameEvent(kind, data)
        for listener in list(self.listeners):
            listener(event)
