# arcade/domain/games/gomoku.py
from __future__ import annotations
import logging
import random
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from arcade.domain.engine import MiniGameEngine
from arcade.domain.models.presets import GomokuDifficulty
from arcade.domain.types import ActionType, GameAction, GameId

logger = logging.getLogger(__name__)

SIZE = 12
WIN_LENGTH = 5
DEFAULT_DIFFICULTY = "normal"
AI_MOVE = "ai_move"

# horizontal, vertical, diagonal ↘, diagonal ↙
DIRECTIONS = ((0, 1), (1, 0), (1, 1), (1, -1))


class Stone(Enum):
    EMPTY = 0
    P1 = 1
    P2 = 2


class Phase(Enum):
    P1_TURN = "p1_turn"
    P2_TURN = "p2_turn"
    WON = "won"
    DRAW = "draw"


# ── board algorithms ──────────────────────────────────────────
def check_win(board: List[Stone], player: Stone, size: int = SIZE) -> bool:
    """True when ``player`` owns a run of WIN_LENGTH anywhere on the board."""
    for idx, stone in enumerate(board):
        if stone != player:
            continue
        r, c = divmod(idx, size)
        for dr, dc in DIRECTIONS:
            count = 0
            nr, nc = r, c
            while 0 <= nr < size and 0 <= nc < size and board[nr * size + nc] == player:
                count += 1
                if count >= WIN_LENGTH:
                    return True
                nr, nc = nr + dr, nc + dc
    return False


def empty_cells(board: List[Stone]) -> List[int]:
    return [i for i, s in enumerate(board) if s == Stone.EMPTY]


def would_win(board: List[Stone], idx: int, player: Stone, size: int = SIZE) -> bool:
    board[idx] = player
    try:
        return check_win(board, player, size)
    finally:
        board[idx] = Stone.EMPTY


def choose_ai_move(board: List[Stone], strategy: str, rng: random.Random, size: int = SIZE) -> Optional[int]:
    """One-ply greedy policy: block P1's winning cell, else take our own.

    Cells are tried in index order and the block test comes first for each
    cell. Falls back to a random empty cell, which is all ``random`` does.
    """
    empties = empty_cells(board)
    if not empties:
        return None
    if strategy == "greedy":
        for idx in empties:
            if would_win(board, idx, Stone.P1, size):
                return idx
            if would_win(board, idx, Stone.P2, size):
                return idx
    return rng.choice(empties)


# ── engine ────────────────────────────────────────────────────
class GomokuEngine(MiniGameEngine):
    game_id = GameId.GOMOKU

    def __init__(self, scheduler, event_bus, difficulties: Mapping[str, GomokuDifficulty], rng=None):
        super().__init__(scheduler, event_bus, rng)
        if not difficulties:
            raise ValueError("No gomoku difficulties configured")
        self._difficulties = dict(difficulties)
        self.difficulty = DEFAULT_DIFFICULTY if DEFAULT_DIFFICULTY in self._difficulties else next(iter(self._difficulties))
        self.new_game(self.difficulty)

    @property
    def preset(self) -> GomokuDifficulty:
        return self._difficulties[self.difficulty]

    def new_game(self, difficulty: Optional[str] = None) -> None:
        """Also serves as reset: valid in any phase, drops a pending AI move."""
        difficulty = difficulty or self.difficulty
        if not isinstance(difficulty, str) or difficulty not in self._difficulties:
            raise ValueError(f"Unknown difficulty '{difficulty}'")
        self._cancel(AI_MOVE)
        self.difficulty = difficulty
        self.board: List[Stone] = [Stone.EMPTY] * (SIZE * SIZE)
        self.phase = Phase.P1_TURN
        self.winner: Optional[Stone] = None
        self.last_move: Optional[int] = None

    def place_human(self, index: int) -> bool:
        if self.phase != Phase.P1_TURN:
            return False
        if not 0 <= index < len(self.board) or self.board[index] != Stone.EMPTY:
            return False

        self._place(index, Stone.P1)
        if self.phase == Phase.WON:
            self._record_play()
        elif self.phase == Phase.P2_TURN:
            self._schedule(AI_MOVE, self.ai_move, self.preset.think_ms)
        return True

    def ai_move(self) -> bool:
        if self.phase != Phase.P2_TURN:
            return False
        idx = choose_ai_move(self.board, self.preset.strategy, self._rng)
        if idx is None:
            return False
        self._place(idx, Stone.P2)
        return True

    def _place(self, index: int, player: Stone) -> None:
        self.board[index] = player
        self.last_move = index
        if check_win(self.board, player):
            self.phase = Phase.WON
            self.winner = player
            logger.info("gomoku won by %s", player.name)
        elif not empty_cells(self.board):
            self.phase = Phase.DRAW
        else:
            self.phase = Phase.P2_TURN if player == Stone.P1 else Phase.P1_TURN

    # dispatch ------------------------------------------------
    def _handlers(self):
        return {
            ActionType.NEW_GAME: self._on_new_game,
            ActionType.PLACE: self._on_place,
        }

    def _on_new_game(self, action: GameAction) -> bool:
        self.new_game(action.opt("difficulty"))
        return True

    def _on_place(self, action: GameAction) -> bool:
        if action.opt("index") is not None:
            return self.place_human(action.get_int("index"))
        row, col = action.get_int("row"), action.get_int("col")
        if not (0 <= row < SIZE and 0 <= col < SIZE):
            return False
        return self.place_human(row * SIZE + col)

    def _snapshot(self) -> Dict[str, Any]:
        return {
            "difficulty": self.difficulty,
            "size": SIZE,
            "phase": self.phase.value,
            "winner": self.winner.name.lower() if self.winner else None,
            "last_move": self.last_move,
            "board": [s.value for s in self.board],
            "ai_thinking": self._is_scheduled(AI_MOVE),
        }
