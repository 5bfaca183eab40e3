# arcade/domain/games/parkour.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Dict, List

from arcade.domain.engine import MiniGameEngine
from arcade.domain.types import ActionType, GameId

logger = logging.getLogger(__name__)

FRAME_MS = 30
GRAVITY = 1.5
JUMP_IMPULSE = 18.0
GROUND_EPSILON = 1e-6

SCROLL_STEP = 8
SPAWN_X = 400
OBSTACLE_WIDTH = 25
MIN_SPAWN_GAP = 160
SPAWN_CHANCE = 0.03

# runner's horizontal band and the height needed to clear an obstacle
HIT_MIN_X = 20
HIT_MAX_X = 60
CLEAR_HEIGHT = 40

SCORE_PER_FRAME = 1
FRAME = "frame"


@dataclass(slots=True)
class Obstacle:
    x: float
    width: int = OBSTACLE_WIDTH

    def off_screen(self) -> bool:
        return self.x + self.width < 0


class ParkourEngine(MiniGameEngine):
    """Endless runner. ``start`` counts as a play, not dying."""

    game_id = GameId.PARKOUR

    def __init__(self, scheduler, event_bus, rng=None):
        super().__init__(scheduler, event_bus, rng)
        self._reset_state()
        self.is_playing = False

    def _reset_state(self) -> None:
        self.y = 0.0
        self.velocity = 0.0
        self.obstacles: List[Obstacle] = []
        self.score = 0

    @property
    def grounded(self) -> bool:
        return self.y <= GROUND_EPSILON

    def start(self) -> bool:
        self._reset_state()
        self.is_playing = True
        self._schedule(FRAME, self.frame, FRAME_MS, repeat=True)
        self._record_play()
        return True

    def jump(self) -> bool:
        if not self.is_playing:
            return self.start()
        if not self.grounded:
            return False
        self.velocity = JUMP_IMPULSE
        return True

    def frame(self) -> bool:
        if not self.is_playing:
            return False

        # physics
        self.velocity -= GRAVITY
        self.y += self.velocity
        if self.y <= 0:
            self.y = 0.0
            self.velocity = 0.0

        # obstacles
        for ob in self.obstacles:
            ob.x -= SCROLL_STEP
        self.obstacles = [ob for ob in self.obstacles if not ob.off_screen()]
        if self._should_spawn():
            self.obstacles.append(Obstacle(x=SPAWN_X))

        if self._collides():
            self.is_playing = False
            self._cancel(FRAME)
            logger.info("parkour run ended, score %s", self.score)
            return True

        self.score += SCORE_PER_FRAME
        return True

    def _should_spawn(self) -> bool:
        if not self.obstacles:
            return True
        newest = self.obstacles[-1]
        if SPAWN_X - newest.x < MIN_SPAWN_GAP:
            return False
        return self._rng.random() < SPAWN_CHANCE

    def _collides(self) -> bool:
        return self.y < CLEAR_HEIGHT and any(HIT_MIN_X < ob.x < HIT_MAX_X for ob in self.obstacles)

    def _handlers(self):
        return {
            ActionType.START: lambda a: self.start(),
            ActionType.NEW_GAME: lambda a: self.start(),
            ActionType.JUMP: lambda a: self.jump(),
        }

    def _snapshot(self) -> Dict[str, Any]:
        return {
            "playing": self.is_playing,
            "y": self.y,
            "velocity": self.velocity,
            "score": self.score,
            "obstacles": [{"x": ob.x, "width": ob.width, "height": CLEAR_HEIGHT} for ob in self.obstacles],
        }
