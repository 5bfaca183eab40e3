# arcade/domain/games/snake.py
from __future__ import annotations
import logging
import random
from typing import Any, Dict, List, Optional, Tuple

from arcade.domain.engine import MiniGameEngine
from arcade.domain.types import ActionType, Direction, GameAction, GameId

logger = logging.getLogger(__name__)

Vec = Tuple[int, int]

GRID = 20
TICK_MS = 150
START: Vec = (10, 10)
SCORE_PER_FOOD = 10
ZERO: Vec = (0, 0)
TICK = "tick"


def is_reverse(a: Vec, b: Vec) -> bool:
    return a != ZERO and a[0] + b[0] == 0 and a[1] + b[1] == 0


def inside(c: Vec) -> bool:
    return 0 <= c[0] < GRID and 0 <= c[1] < GRID


def spawn_food(body: List[Vec], rng: random.Random) -> Optional[Vec]:
    occupied = set(body)
    free = [(x, y) for y in range(GRID) for x in range(GRID) if (x, y) not in occupied]
    if not free:
        return None
    return rng.choice(free)


class SnakeEngine(MiniGameEngine):
    """Grid snake driven by a fixed-period tick.

    The tick runs for the whole life of the engine; ``step`` is a no-op
    until the first direction arrives and after death.
    """

    game_id = GameId.SNAKE

    def __init__(self, scheduler, event_bus, rng=None):
        super().__init__(scheduler, event_bus, rng)
        self.reset()
        self._schedule(TICK, self.step, TICK_MS, repeat=True)

    def reset(self) -> None:
        self.body: List[Vec] = [START]
        self.direction: Vec = ZERO
        self.pending: Vec = ZERO
        self.score = 0
        self.dead = False
        self.food = spawn_food(self.body, self._rng)

    def turn(self, direction: Direction) -> bool:
        """Queue a direction for the next tick; a 180° reversal is refused."""
        if self.dead:
            return False
        vec = direction.vector
        if is_reverse(self.direction, vec):
            return False
        changed = vec != self.pending
        self.pending = vec
        return changed

    def step(self) -> bool:
        if self.dead:
            return False
        self.direction = self.pending
        if self.direction == ZERO:
            return False

        head = self.body[0]
        new_head = (head[0] + self.direction[0], head[1] + self.direction[1])
        if not inside(new_head) or new_head in self.body:
            self.dead = True
            logger.info("snake died at %s, score %s", new_head, self.score)
            self._record_play()
            return True

        self.body.insert(0, new_head)
        if new_head == self.food:
            self.score += SCORE_PER_FOOD
            self.food = spawn_food(self.body, self._rng)
        else:
            self.body.pop()
        return True

    def _handlers(self):
        return {
            ActionType.NEW_GAME: self._on_new_game,
            ActionType.TURN: lambda a: self.turn(Direction.from_name(a.get("direction"))),
        }

    def _on_new_game(self, action: GameAction) -> bool:
        self.reset()
        return True

    def _snapshot(self) -> Dict[str, Any]:
        return {
            "grid": GRID,
            "body": [list(seg) for seg in self.body],
            "food": list(self.food) if self.food else None,
            "direction": list(self.direction),
            "score": self.score,
            "dead": self.dead,
            "started": self.direction != ZERO,
        }
