from __future__ import annotations

from dataclasses import dataclass, field

from .board import Board, Cell, opponent


@dataclass
class GameState:
    """Represents the dynamic state of the game: the board, the side to move and whether play continues."""
    board: Board = field(default_factory=Board)
    current_player: Cell = Cell.BLACK
    active: bool = True

    def other_player(self) -> Cell:
        return opponent(self.current_player)

    def copy(self) -> 'GameState':
        return GameState(self.board.clone(), self.current_player, self.active)
