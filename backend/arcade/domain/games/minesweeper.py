# arcade/domain/games/minesweeper.py
from __future__ import annotations
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Tuple

from arcade.domain.engine import MiniGameEngine
from arcade.domain.models.presets import MinesweeperDifficulty
from arcade.domain.types import ActionType, GameAction, GameId

logger = logging.getLogger(__name__)

DEFAULT_DIFFICULTY = "easy"


class Phase(Enum):
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


class Mode(Enum):
    DIG = "dig"
    FLAG = "flag"


@dataclass(slots=True)
class Cell:
    row: int
    col: int
    is_mine: bool = False
    is_revealed: bool = False
    is_flagged: bool = False
    neighbor_count: int = 0

    def to_public_dict(self, show_mine: bool) -> Dict[str, Any]:
        return {
            "revealed": self.is_revealed,
            "flagged": self.is_flagged,
            "mine": self.is_mine if (show_mine or self.is_revealed) else None,
            "count": self.neighbor_count if self.is_revealed else None,
        }


@dataclass
class Board:
    rows: int
    cols: int
    mines: int
    cells: List[List[Cell]]

    def cell(self, row: int, col: int) -> Cell:
        return self.cells[row][col]

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def all_cells(self) -> Iterator[Cell]:
        for line in self.cells:
            yield from line

    def revealed_count(self) -> int:
        return sum(1 for c in self.all_cells() if c.is_revealed)

    def safe_cells(self) -> int:
        return self.rows * self.cols - self.mines


# ── board algorithms ──────────────────────────────────────────
def neighbors8(row: int, col: int, rows: int, cols: int) -> Iterator[Tuple[int, int]]:
    for dr in (-1, 0, 1):
        for dc in (-1, 0, 1):
            if dr == 0 and dc == 0:
                continue
            nr, nc = row + dr, col + dc
            if 0 <= nr < rows and 0 <= nc < cols:
                yield nr, nc


def build_board(difficulty: MinesweeperDifficulty, rng: random.Random) -> Board:
    """Fresh board with mines sampled without replacement."""
    rows, cols = difficulty.rows, difficulty.cols
    cells = [[Cell(r, c) for c in range(cols)] for r in range(rows)]

    for idx in rng.sample(range(rows * cols), k=difficulty.mines):
        cells[idx // cols][idx % cols].is_mine = True

    for line in cells:
        for cell in line:
            cell.neighbor_count = sum(
                1 for nr, nc in neighbors8(cell.row, cell.col, rows, cols) if cells[nr][nc].is_mine
            )
    return Board(rows=rows, cols=cols, mines=difficulty.mines, cells=cells)


def flood_reveal(board: Board, row: int, col: int) -> int:
    """Reveal from a safe cell, spreading across zero-count cells.

    Iterative on purpose: large boards would otherwise nest one call per
    cell of the zero region. Returns how many cells were newly revealed.
    """
    opened = 0
    stack = [(row, col)]
    while stack:
        r, c = stack.pop()
        cell = board.cell(r, c)
        if cell.is_revealed or cell.is_flagged or cell.is_mine:
            continue
        cell.is_revealed = True
        opened += 1
        if cell.neighbor_count == 0:
            for nr, nc in neighbors8(r, c, board.rows, board.cols):
                n = board.cell(nr, nc)
                if not n.is_revealed and not n.is_flagged and not n.is_mine:
                    stack.append((nr, nc))
    return opened


# ── engine ────────────────────────────────────────────────────
class MinesweeperEngine(MiniGameEngine):
    game_id = GameId.MINESWEEPER

    def __init__(self, scheduler, event_bus, difficulties: Mapping[str, MinesweeperDifficulty], rng=None):
        super().__init__(scheduler, event_bus, rng)
        if not difficulties:
            raise ValueError("No minesweeper difficulties configured")
        self._difficulties = dict(difficulties)
        self.difficulty = DEFAULT_DIFFICULTY if DEFAULT_DIFFICULTY in self._difficulties else next(iter(self._difficulties))
        self.mode = Mode.DIG
        self.new_game(self.difficulty)

    # operations ----------------------------------------------
    def new_game(self, difficulty: str) -> None:
        preset = self._difficulties.get(difficulty) if isinstance(difficulty, str) else None
        if preset is None:
            raise ValueError(f"Unknown difficulty '{difficulty}'")
        self.difficulty = difficulty
        self.board = build_board(preset, self._rng)
        self.phase = Phase.PLAYING
        self.mines_left = preset.mines

    def reveal(self, row: int, col: int) -> bool:
        if self.phase != Phase.PLAYING or not self.board.in_bounds(row, col):
            return False
        cell = self.board.cell(row, col)
        if cell.is_flagged or cell.is_revealed:
            return False

        if cell.is_mine:
            for c in self.board.all_cells():
                if c.is_mine:
                    c.is_revealed = True
            self.phase = Phase.LOST
            logger.info("minesweeper lost at (%s, %s)", row, col)
            return True

        flood_reveal(self.board, row, col)
        if self.board.revealed_count() == self.board.safe_cells():
            self.phase = Phase.WON
            logger.info("minesweeper won (%s)", self.difficulty)
            self._record_play()
        return True

    def toggle_flag(self, row: int, col: int) -> bool:
        if self.phase != Phase.PLAYING or not self.board.in_bounds(row, col):
            return False
        cell = self.board.cell(row, col)
        if cell.is_revealed:
            return False
        cell.is_flagged = not cell.is_flagged
        self.mines_left += -1 if cell.is_flagged else 1
        return True

    def set_mode(self, mode: Mode) -> bool:
        changed = mode != self.mode
        self.mode = mode
        return changed

    def click(self, row: int, col: int) -> bool:
        if self.mode == Mode.FLAG:
            return self.toggle_flag(row, col)
        return self.reveal(row, col)

    # dispatch ------------------------------------------------
    def _handlers(self):
        return {
            ActionType.NEW_GAME: self._on_new_game,
            ActionType.REVEAL: lambda a: self.reveal(a.get_int("row"), a.get_int("col")),
            ActionType.TOGGLE_FLAG: lambda a: self.toggle_flag(a.get_int("row"), a.get_int("col")),
            ActionType.SET_MODE: self._on_set_mode,
            ActionType.CLICK_CELL: lambda a: self.click(a.get_int("row"), a.get_int("col")),
        }

    def _on_new_game(self, action: GameAction) -> bool:
        self.new_game(action.opt("difficulty", self.difficulty))
        return True

    def _on_set_mode(self, action: GameAction) -> bool:
        try:
            mode = Mode(action.get("mode"))
        except (ValueError, TypeError):
            raise ValueError(f"Unknown mode '{action.opt('mode')}'")
        return self.set_mode(mode)

    def _snapshot(self) -> Dict[str, Any]:
        over = self.phase != Phase.PLAYING
        return {
            "difficulty": self.difficulty,
            "phase": self.phase.value,
            "mode": self.mode.value,
            "rows": self.board.rows,
            "cols": self.board.cols,
            "mines": self.board.mines,
            "mines_left": self.mines_left,
            "revealed": self.board.revealed_count(),
            "cells": [[c.to_public_dict(show_mine=over) for c in line] for line in self.board.cells],
        }
