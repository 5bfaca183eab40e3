from __future__ import annotations
from dataclasses import dataclass
from typing import Any, List

__all__ = ("MinesweeperDifficulty", "GomokuDifficulty", "Match3Config")

GOMOKU_STRATEGIES = ("random", "greedy")


@dataclass(slots=True)
class MinesweeperDifficulty:
    id: str
    rows: int
    cols: int
    mines: int

    @classmethod
    def from_raw(cls, raw: Any) -> "MinesweeperDifficulty":
        if not isinstance(raw, dict) or "id" not in raw:
            raise TypeError("Minesweeper difficulty must be a mapping with an 'id' key")
        rows, cols, mines = int(raw["rows"]), int(raw["cols"]), int(raw["mines"])
        if rows <= 0 or cols <= 0 or not 0 < mines < rows * cols:
            raise ValueError(f"Bad minesweeper board for '{raw['id']}'")
        return cls(id=raw["id"], rows=rows, cols=cols, mines=mines)


@dataclass(slots=True)
class GomokuDifficulty:
    id: str
    strategy: str = "greedy"  # random | greedy
    think_ms: int = 500

    @classmethod
    def from_raw(cls, raw: Any) -> "GomokuDifficulty":
        if not isinstance(raw, dict) or "id" not in raw:
            raise TypeError("Gomoku difficulty must be a mapping with an 'id' key")
        strategy = raw.get("strategy", "greedy")
        if strategy not in GOMOKU_STRATEGIES:
            raise ValueError(f"Unknown gomoku strategy '{strategy}'")
        return cls(id=raw["id"], strategy=strategy, think_ms=int(raw.get("think_ms", 500)))


@dataclass(slots=True)
class Match3Config:
    size: int
    palette: List[str]

    @classmethod
    def from_raw(cls, raw: Any) -> "Match3Config":
        if not isinstance(raw, dict):
            raise TypeError("Match-3 config must be a mapping")
        palette = list(raw.get("palette", []))
        if len(palette) < 3:
            raise ValueError("Match-3 palette needs at least 3 colors")
        return cls(size=int(raw.get("size", 7)), palette=palette)
