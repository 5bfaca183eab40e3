# arcade/domain/games/match3.py
from __future__ import annotations
import logging
import random
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Set

from arcade.domain.engine import MiniGameEngine
from arcade.domain.models.presets import Match3Config
from arcade.domain.types import ActionType, GameAction, GameId

logger = logging.getLogger(__name__)

EMPTY: Optional[str] = None
MIN_RUN = 3
POINTS_PER_CELL = 10
CASCADE_DELAY_MS = 300
MAX_CASCADE_DEPTH = 20
GRAVITY = "gravity"

Board = List[Optional[str]]


class Phase(Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    OVER = "over"


# ── board algorithms ──────────────────────────────────────────
def random_board(size: int, palette: Sequence[str], rng: random.Random) -> Board:
    return [rng.choice(palette) for _ in range(size * size)]


def find_matches(board: Board, size: int) -> Set[int]:
    """Indices in any horizontal or vertical run of MIN_RUN equal colors."""
    rows = [[r * size + c for c in range(size)] for r in range(size)]
    cols = [[r * size + c for r in range(size)] for c in range(size)]

    marked: Set[int] = set()
    for line in rows + cols:
        run = [line[0]]
        for idx in line[1:] + [None]:
            color = board[run[0]]
            if idx is not None and color is not EMPTY and board[idx] == color:
                run.append(idx)
                continue
            if color is not EMPTY and len(run) >= MIN_RUN:
                marked.update(run)
            if idx is not None:
                run = [idx]
    return marked


def apply_gravity(board: Board, size: int, palette: Sequence[str], rng: random.Random) -> Board:
    """Drop survivors to the bottom of each column and refill from the top."""
    out = board[:]
    for c in range(size):
        survivors = [board[r * size + c] for r in range(size) if board[r * size + c] is not EMPTY]
        fresh = [rng.choice(palette) for _ in range(size - len(survivors))]
        for r, color in enumerate(fresh + survivors):
            out[r * size + c] = color
    return out


def fill_without_runs(size: int, palette: Sequence[str], rng: random.Random) -> Board:
    """Random board with no run at all.

    Each cell only has to dodge the two cells to its left and the two above,
    so with three or more colors a choice always exists.
    """
    board: Board = [EMPTY] * (size * size)
    for idx in range(size * size):
        r, c = divmod(idx, size)
        banned = set()
        if c >= 2 and board[idx - 1] == board[idx - 2]:
            banned.add(board[idx - 1])
        if r >= 2 and board[idx - size] == board[idx - 2 * size]:
            banned.add(board[idx - size])
        board[idx] = rng.choice([p for p in palette if p not in banned])
    return board


def are_adjacent(i: int, j: int, size: int) -> bool:
    ri, ci = divmod(i, size)
    rj, cj = divmod(j, size)
    return abs(ri - rj) + abs(ci - cj) == 1


def swapped(board: Board, i: int, j: int) -> Board:
    out = board[:]
    out[i], out[j] = out[j], out[i]
    return out


def has_possible_moves(board: Board, size: int) -> bool:
    for i in range(size * size):
        r, c = divmod(i, size)
        for j in ((i + 1) if c + 1 < size else None, (i + size) if r + 1 < size else None):
            if j is not None and find_matches(swapped(board, i, j), size):
                return True
    return False


# ── engine ────────────────────────────────────────────────────
class Match3Engine(MiniGameEngine):
    """Swap-to-match board with an asynchronous cascade.

    Clearing a match is immediate; the refill arrives CASCADE_DELAY_MS
    later through the scheduler, and clicks are ignored until the board
    settles.
    """

    game_id = GameId.MATCH3

    def __init__(self, scheduler, event_bus, config: Match3Config, rng=None):
        super().__init__(scheduler, event_bus, rng)
        self.size = config.size
        self.palette = list(config.palette)
        self.new_game()

    def new_game(self) -> None:
        self._cancel(GRAVITY)
        self.board = random_board(self.size, self.palette, self._rng)
        self.score = 0
        self.selected: Optional[int] = None
        self.cascade_depth = 0
        self.phase = Phase.IDLE
        # starting runs cascade away like any other match
        self.resolve_matches()

    def swap(self, i: int, j: int) -> bool:
        """Swap two neighbors; a swap that makes no match is rolled back."""
        if self.phase != Phase.IDLE:
            return False
        n = self.size * self.size
        if not (0 <= i < n and 0 <= j < n) or not are_adjacent(i, j, self.size):
            return False
        candidate = swapped(self.board, i, j)
        if not find_matches(candidate, self.size):
            return False
        self.board = candidate
        self.selected = None
        self.cascade_depth = 0
        self.resolve_matches()
        return True

    def select(self, index: int) -> bool:
        if self.phase != Phase.IDLE or not 0 <= index < self.size * self.size:
            return False
        if self.selected is None:
            self.selected = index
        elif self.selected == index:
            self.selected = None
        elif are_adjacent(self.selected, index, self.size):
            first, self.selected = self.selected, None
            self.swap(first, index)
        else:
            self.selected = index
        return True

    def resolve_matches(self) -> bool:
        marked = find_matches(self.board, self.size)
        if not marked:
            self._settle()
            return False

        for idx in marked:
            self.board[idx] = EMPTY
        self.score += len(marked) * POINTS_PER_CELL
        self.cascade_depth += 1
        self.phase = Phase.RESOLVING
        self._record_play()
        self._schedule(GRAVITY, self._on_gravity, CASCADE_DELAY_MS)
        return True

    def _on_gravity(self) -> None:
        self.board = apply_gravity(self.board, self.size, self.palette, self._rng)
        if self.cascade_depth >= MAX_CASCADE_DEPTH and find_matches(self.board, self.size):
            logger.info("match-3 cascade capped after %s passes", self.cascade_depth)
            self.board = fill_without_runs(self.size, self.palette, self._rng)
        self.resolve_matches()

    def _settle(self) -> None:
        self.cascade_depth = 0
        if has_possible_moves(self.board, self.size):
            self.phase = Phase.IDLE
        else:
            self.phase = Phase.OVER
            logger.info("match-3 board has no moves left, score %s", self.score)

    # dispatch ------------------------------------------------
    def _handlers(self):
        return {
            ActionType.NEW_GAME: self._on_new_game,
            ActionType.SELECT: lambda a: self.select(a.get_int("index")),
            ActionType.SWAP: lambda a: self.swap(a.get_int("i"), a.get_int("j")),
        }

    def _on_new_game(self, action: GameAction) -> bool:
        self.new_game()
        return True

    def _snapshot(self) -> Dict[str, Any]:
        return {
            "size": self.size,
            "phase": self.phase.value,
            "score": self.score,
            "selected": self.selected,
            "board": self.board[:],
        }
