# arcade/domain/types.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict, Mapping, Optional, Tuple


class GameId(Enum):
    MINESWEEPER = "minesweeper"
    GOMOKU = "gomoku"
    G2048 = "2048"
    SNAKE = "snake"
    MATCH3 = "match3"
    PARKOUR = "parkour"

    @classmethod
    def parse(cls, raw: str) -> Optional["GameId"]:
        """Identifier from the host, or None when nothing matches."""
        for gid in cls:
            if gid.value == raw:
                return gid
        return None


class ActionType(Enum):
    NEW_GAME = auto()
    # minesweeper
    REVEAL = auto()
    TOGGLE_FLAG = auto()
    SET_MODE = auto()
    CLICK_CELL = auto()
    # gomoku
    PLACE = auto()
    # 2048
    MOVE = auto()
    # snake
    TURN = auto()
    # match-3
    SELECT = auto()
    SWAP = auto()
    # parkour
    START = auto()
    JUMP = auto()


class Direction(Enum):
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def vector(self) -> Tuple[int, int]:
        return self.value

    @classmethod
    def from_name(cls, raw: str) -> "Direction":
        try:
            return cls[raw.upper()]
        except (AttributeError, KeyError):
            raise ValueError(f"Unknown direction '{raw}'")


@dataclass(frozen=True)
class GameAction:
    type: ActionType
    payload: Optional[Dict[str, Any]] = None

    def fields(self) -> Mapping[str, Any]:
        """The payload as a mapping; anything else is a protocol error."""
        if self.payload is None:
            return {}
        if not isinstance(self.payload, Mapping):
            raise ValueError(f"Action {self.type.name} payload must be an object")
        return self.payload

    def get(self, key: str) -> Any:
        """Mandatory payload field; missing keys are a protocol error."""
        fields = self.fields()
        if key not in fields:
            raise ValueError(f"Action {self.type.name} requires '{key}'")
        return fields[key]

    def opt(self, key: str, default: Any = None) -> Any:
        return self.fields().get(key, default)

    def get_int(self, key: str) -> int:
        raw = self.get(key)
        try:
            return int(raw)
        except (TypeError, ValueError):
            raise ValueError(f"Action {self.type.name} needs an integer '{key}', got {raw!r}")
