from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional

from .ai import AIConfig, Tier
from .board import Cell, parse_player

GAME_MODES = ("human", "ai")


@dataclass
class Settings:
    """User preferences that outlive a single game."""
    game_mode: str = "human"
    ai_level: str = Tier.NORMAL.value
    ai_player: str = Cell.WHITE.label
    sound_enabled: bool = True
    hint_mode: bool = False
    volume: float = 0.7
    show_best_move: bool = True

    def ai_config(self) -> Optional[AIConfig]:
        if self.game_mode != "ai":
            return None
        return AIConfig(tier=Tier.parse(self.ai_level), side=parse_player(self.ai_player))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Settings':
        """Builds validated settings; unknown keys are ignored, missing ones keep defaults."""
        known = {f.name for f in fields(cls)}
        s = cls(**{k: v for k, v in data.items() if k in known})
        s.validate()
        return s

    def update(self, data: Dict[str, Any]) -> 'Settings':
        merged = self.to_dict()
        merged.update(data)
        return Settings.from_dict(merged)

    def validate(self) -> None:
        if self.game_mode not in GAME_MODES:
            raise ValueError(f"game_mode must be one of {GAME_MODES}")
        self.ai_level = Tier.parse(self.ai_level).value
        self.ai_player = parse_player(self.ai_player).label
        self.sound_enabled = bool(self.sound_enabled)
        self.hint_mode = bool(self.hint_mode)
        self.show_best_move = bool(self.show_best_move)
        volume = float(self.volume)
        if not 0.0 <= volume <= 1.0:
            raise ValueError("volume must be between 0 and 1")
        self.volume = volume
