from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable, Iterator, List, NamedTuple, Optional, Sequence, Set, Tuple

Coord = Tuple[int, int]

SIZE = 8


class Cell(IntEnum):
    """Occupancy of a single square. BLACK and WHITE double as the two players."""
    EMPTY = 0
    BLACK = -1
    WHITE = 1

    @property
    def label(self) -> str:
        return self.name.lower()


def opponent(player: Cell) -> Cell:
    return Cell(-int(player))


def parse_player(value: str) -> Cell:
    """Maps 'black' / 'white' (any case) to the matching Cell."""
    try:
        player = Cell[str(value).upper()]
    except KeyError:
        raise ValueError(f"unknown player: {value!r}") from None
    if player is Cell.EMPTY:
        raise ValueError("EMPTY is not a player")
    return player


class StoneCount(NamedTuple):
    black: int
    white: int
    total: int


SYMBOLS = {Cell.EMPTY: ".", Cell.BLACK: "X", Cell.WHITE: "O"}


def _initial_grid() -> List[Cell]:
    grid = [Cell.EMPTY] * (SIZE * SIZE)
    grid[3 * SIZE + 3] = Cell.WHITE
    grid[3 * SIZE + 4] = Cell.BLACK
    grid[4 * SIZE + 3] = Cell.BLACK
    grid[4 * SIZE + 4] = Cell.WHITE
    return grid


@dataclass
class Board:
    """The 8x8 playing surface, stored row-major."""
    grid: List[Cell] = field(default_factory=_initial_grid)

    @classmethod
    def empty(cls) -> 'Board':
        return cls(grid=[Cell.EMPTY] * (SIZE * SIZE))

    @classmethod
    def from_rows(cls, rows: Sequence[str]) -> 'Board':
        """Builds a board from 8 strings of 'X' (black), 'O' (white) and '.' (empty)."""
        if len(rows) != SIZE:
            raise ValueError(f"expected {SIZE} rows, got {len(rows)}")
        lookup = {sym: cell for cell, sym in SYMBOLS.items()}
        grid: List[Cell] = []
        for row in rows:
            if len(row) != SIZE:
                raise ValueError(f"row {row!r} must have {SIZE} cells")
            for ch in row:
                if ch not in lookup:
                    raise ValueError(f"bad cell symbol {ch!r}")
                grid.append(lookup[ch])
        return cls(grid=grid)

    def index(self, r: int, c: int) -> int:
        """Calculates the 1D index for a given row and column."""
        if not (0 <= r < SIZE and 0 <= c < SIZE):
            raise IndexError(f"coordinate out of range: ({r}, {c})")
        return r * SIZE + c

    def get(self, r: int, c: int) -> Cell:
        return self.grid[self.index(r, c)]

    def set(self, r: int, c: int, value: Cell) -> None:
        self.grid[self.index(r, c)] = Cell(value)

    def clone(self) -> 'Board':
        return Board(grid=list(self.grid))

    def coords(self) -> Iterable[Coord]:
        """Iterates over all coordinates on the board in row-major order."""
        for r in range(SIZE):
            for c in range(SIZE):
                yield (r, c)

    def count_stones(self) -> StoneCount:
        black = sum(1 for cell in self.grid if cell is Cell.BLACK)
        white = sum(1 for cell in self.grid if cell is Cell.WHITE)
        return StoneCount(black=black, white=white, total=black + white)

    def rows(self) -> Iterator[List[Cell]]:
        for r in range(SIZE):
            yield self.grid[r * SIZE:(r + 1) * SIZE]

    def pretty(self, marks: Optional[Set[Coord]] = None) -> str:
        """Generates a human-readable string representation of the board.

        Cells listed in ``marks`` are drawn as '*' (used for move hints).
        """
        mset = marks or set()
        lines: List[str] = ["  " + " ".join(str(c) for c in range(SIZE))]
        for r, row in enumerate(self.rows()):
            out: List[str] = []
            for c, cell in enumerate(row):
                if (r, c) in mset and cell is Cell.EMPTY:
                    out.append("*")
                else:
                    out.append(SYMBOLS[cell])
            lines.append(f"{r} " + " ".join(out))
        return "\n".join(lines)
