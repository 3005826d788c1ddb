from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, Optional

from .ai import Tier
from .board import SIZE
from .session import GameResult

PERFECT_SCORE = SIZE * SIZE


def _empty_ai_stats() -> Dict[str, Dict[str, int]]:
    return {tier.value: {"wins": 0, "losses": 0} for tier in Tier}


@dataclass
class Statistics:
    total_games: int = 0
    wins: int = 0
    losses: int = 0
    draws: int = 0
    current_streak: int = 0
    max_streak: int = 0
    total_play_time: float = 0.0
    average_game_time: float = 0.0
    highest_score: int = 0
    perfect_wins: int = 0
    ai_stats: Dict[str, Dict[str, int]] = field(default_factory=_empty_ai_stats)

    @property
    def win_rate(self) -> float:
        return (self.wins / self.total_games) if self.total_games else 0.0

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["win_rate"] = self.win_rate
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Statistics':
        known = {f.name for f in fields(cls)}
        s = cls(**{k: v for k, v in data.items() if k in known})
        merged = _empty_ai_stats()
        for tier, rec in (s.ai_stats or {}).items():
            if tier in merged:
                merged[tier].update({k: int(v) for k, v in rec.items() if k in ("wins", "losses")})
        s.ai_stats = merged
        return s


def record_game(stats: Statistics, result: GameResult, tier: Optional[Tier] = None, seconds: float = 0.0) -> Statistics:
    """Folds one finished game into ``stats`` (in place) and returns it.

    Wins extend the streak; losses and draws reset it. Games between two humans
    have no win/loss side, so they only count toward totals, draws and records.
    """
    stats.total_games += 1
    stats.total_play_time += max(0.0, seconds)
    stats.average_game_time = stats.total_play_time / stats.total_games

    top = max(result.black, result.white)
    if top > stats.highest_score:
        stats.highest_score = top
    if top == PERFECT_SCORE:
        stats.perfect_wins += 1

    if result.outcome == "win":
        stats.wins += 1
        stats.current_streak += 1
        stats.max_streak = max(stats.max_streak, stats.current_streak)
    elif result.outcome == "loss":
        stats.losses += 1
        stats.current_streak = 0
    elif result.outcome == "draw":
        stats.draws += 1
        stats.current_streak = 0

    if result.vs_ai and tier is not None:
        per_tier = stats.ai_stats.setdefault(tier.value, {"wins": 0, "losses": 0})
        if result.outcome == "win":
            per_tier["wins"] += 1
        elif result.outcome == "loss":
            per_tier["losses"] += 1
    return stats
