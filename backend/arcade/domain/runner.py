# arcade/domain/runner.py
from __future__ import annotations
import logging
import random
from typing import Any, Callable, Dict, Optional

from arcade.core.loader import GameData
from arcade.domain.engine import MiniGameEngine
from arcade.domain.events import EventBus, PlayCompletedRelay, StatsSink
from arcade.domain.games.g2048 import G2048Engine
from arcade.domain.games.gomoku import GomokuEngine
from arcade.domain.games.match3 import Match3Engine
from arcade.domain.games.minesweeper import MinesweeperEngine
from arcade.domain.games.parkour import ParkourEngine
from arcade.domain.games.snake import SnakeEngine
from arcade.domain.scheduler import Scheduler
from arcade.domain.types import ActionType, Direction, GameAction, GameId

logger = logging.getLogger(__name__)

EngineFactory = Callable[[Scheduler, EventBus, GameData, random.Random], MiniGameEngine]

FACTORIES: Dict[GameId, EngineFactory] = {
    GameId.MINESWEEPER: lambda s, bus, data, rng: MinesweeperEngine(s, bus, data.minesweeper_difficulties, rng),
    GameId.GOMOKU: lambda s, bus, data, rng: GomokuEngine(s, bus, data.gomoku_difficulties, rng),
    GameId.G2048: lambda s, bus, data, rng: G2048Engine(s, bus, rng),
    GameId.SNAKE: lambda s, bus, data, rng: SnakeEngine(s, bus, rng),
    GameId.MATCH3: lambda s, bus, data, rng: Match3Engine(s, bus, data.match3, rng),
    GameId.PARKOUR: lambda s, bus, data, rng: ParkourEngine(s, bus, rng),
}

# which action a decoded swipe becomes, per game
SWIPE_ACTIONS: Dict[GameId, ActionType] = {
    GameId.G2048: ActionType.MOVE,
    GameId.SNAKE: ActionType.TURN,
}

DIFFICULTY_GAMES = {GameId.MINESWEEPER, GameId.GOMOKU}


class GameRunner:
    """Hosts at most one engine at a time and relays its completed plays."""

    def __init__(
        self,
        scheduler: Scheduler,
        stats: StatsSink,
        game_data: GameData,
        rng: Optional[random.Random] = None,
    ):
        self._scheduler = scheduler
        self._stats = stats
        self._game_data = game_data
        self._rng = rng or random.Random()
        self._bus: Optional[EventBus] = None
        self.engine: Optional[MiniGameEngine] = None
        self.requested: Optional[str] = None

    def select(self, raw_id: str, difficulty: Optional[str] = None) -> Optional[MiniGameEngine]:
        """Tear down the current game and mount ``raw_id``; None if unknown."""
        self.teardown()

        game_id = GameId.parse(raw_id)
        if game_id is None:
            logger.info("no game called %r", raw_id)
            self.requested = raw_id
            return None

        # a fresh bus per engine, so a stale engine can never reach the sink
        bus = EventBus()
        bus.register_handler(PlayCompletedRelay(self._stats))
        engine = FACTORIES[game_id](self._scheduler, bus, self._game_data, self._rng)
        if difficulty is not None and game_id in DIFFICULTY_GAMES:
            try:
                engine.execute(GameAction(ActionType.NEW_GAME, {"difficulty": difficulty}))
            except ValueError:
                engine.teardown()
                bus.clear()
                raise
        self._bus = bus
        self.engine = engine
        self.requested = raw_id
        logger.info("mounted %s", game_id.value)
        return engine

    def execute(self, action: GameAction) -> bool:
        if self.engine is None:
            raise ValueError("No game selected")
        return self.engine.execute(action)

    def swipe(self, direction: Optional[Direction]) -> bool:
        """Forward a decoded swipe to games that take one; others ignore it."""
        if self.engine is None:
            raise ValueError("No game selected")
        action_type = SWIPE_ACTIONS.get(self.engine.game_id)
        if direction is None or action_type is None:
            return False
        return self.engine.execute(GameAction(action_type, {"direction": direction.name}))

    def teardown(self) -> None:
        if self.engine is not None:
            self.engine.teardown()
            logger.info("unmounted %s", self.engine.game_id.value)
        if self._bus is not None:
            self._bus.clear()
        self.engine = None
        self._bus = None
        self.requested = None

    def view(self) -> Dict[str, Any]:
        if self.engine is None:
            return {"game": None, "not_found": self.requested is not None, "requested": self.requested}
        return self.engine.view()
