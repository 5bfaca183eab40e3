# arcade/domain/games/g2048.py
from __future__ import annotations
import logging
import random
from enum import Enum
from typing import Any, Dict, List, Tuple

from arcade.domain.engine import MiniGameEngine
from arcade.domain.types import ActionType, Direction, GameAction, GameId

logger = logging.getLogger(__name__)

SIZE = 4
FOUR_PROBABILITY = 0.1

Grid = List[List[int]]

# clockwise quarter turns that bring each direction onto LEFT
ROTATIONS = {
    Direction.LEFT: 0,
    Direction.DOWN: 1,
    Direction.RIGHT: 2,
    Direction.UP: 3,
}


class Phase(Enum):
    PLAYING = "playing"
    OVER = "over"


# ── grid algorithms ───────────────────────────────────────────
def empty_grid() -> Grid:
    return [[0] * SIZE for _ in range(SIZE)]


def rotate(grid: Grid, times: int = 1) -> Grid:
    """Rotate clockwise ``times`` quarter turns; returns a new grid."""
    out = [row[:] for row in grid]
    for _ in range(times % 4):
        n = len(out)
        out = [[out[n - 1 - c][r] for c in range(n)] for r in range(n)]
    return out


def slide_row_left(row: List[int]) -> Tuple[List[int], int]:
    """Compact, merge each pair once from the left, re-compact."""
    tiles = [v for v in row if v]
    merged: List[int] = []
    gained = 0
    i = 0
    while i < len(tiles):
        if i + 1 < len(tiles) and tiles[i] == tiles[i + 1]:
            merged.append(tiles[i] * 2)
            gained += tiles[i] * 2
            i += 2
        else:
            merged.append(tiles[i])
            i += 1
    return merged + [0] * (len(row) - len(merged)), gained


def slide(grid: Grid, direction: Direction) -> Tuple[Grid, int]:
    turns = ROTATIONS[direction]
    rotated = rotate(grid, turns)
    gained = 0
    moved: Grid = []
    for row in rotated:
        new_row, points = slide_row_left(row)
        moved.append(new_row)
        gained += points
    return rotate(moved, (4 - turns) % 4), gained


def can_move(grid: Grid) -> bool:
    return any(slide(grid, d)[0] != grid for d in Direction)


def population(grid: Grid) -> int:
    return sum(1 for row in grid for v in row if v)


def spawn_tile(grid: Grid, rng: random.Random) -> bool:
    empties = [(r, c) for r in range(SIZE) for c in range(SIZE) if grid[r][c] == 0]
    if not empties:
        return False
    r, c = rng.choice(empties)
    grid[r][c] = 4 if rng.random() < FOUR_PROBABILITY else 2
    return True


# ── engine ────────────────────────────────────────────────────
class G2048Engine(MiniGameEngine):
    """2048 never reports a completed play to the stats collaborator."""

    game_id = GameId.G2048

    def __init__(self, scheduler, event_bus, rng=None):
        super().__init__(scheduler, event_bus, rng)
        self.new_game()

    def new_game(self) -> None:
        self.grid = empty_grid()
        self.score = 0
        self.phase = Phase.PLAYING
        spawn_tile(self.grid, self._rng)
        spawn_tile(self.grid, self._rng)

    def move(self, direction: Direction) -> bool:
        if self.phase != Phase.PLAYING:
            return False
        moved, gained = slide(self.grid, direction)
        if moved == self.grid:
            return False
        self.grid = moved
        self.score += gained
        spawn_tile(self.grid, self._rng)
        if not can_move(self.grid):
            self.phase = Phase.OVER
            logger.info("2048 over, score %s", self.score)
        return True

    def _handlers(self):
        return {
            ActionType.NEW_GAME: self._on_new_game,
            ActionType.MOVE: lambda a: self.move(Direction.from_name(a.get("direction"))),
        }

    def _on_new_game(self, action: GameAction) -> bool:
        self.new_game()
        return True

    def _snapshot(self) -> Dict[str, Any]:
        return {
            "phase": self.phase.value,
            "score": self.score,
            "grid": [row[:] for row in self.grid],
        }
