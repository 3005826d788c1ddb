from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict


class Event(Enum):
    """Discrete signals for the presentation and audio layers."""
    RESET = "reset"
    STONE_PLACED = "stone_placed"
    STONES_FLIPPED = "stones_flipped"
    INVALID_MOVE = "invalid_move"
    PASS = "pass"
    AI_THINKING = "ai_thinking"
    GAME_WON = "game_won"
    GAME_DRAWN = "game_drawn"


@dataclass(frozen=True)
class GameEvent:
    kind: Event
    data: Dict[str, Any] = field(default_factory=dict)

    def to_json(self) -> Dict[str, Any]:
        return {"type": self.kind.value, **self.data}


Listener = Callable[[GameEvent], None]
