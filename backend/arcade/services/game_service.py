from __future__ import annotations
import logging
import random
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Sequence

from .repo import InMemorySessionRepo
from arcade.core.loader import GameData
from arcade.domain.events import StatsSink
from arcade.domain.gesture import decode_swipe
from arcade.domain.runner import GameRunner
from arcade.domain.scheduler import Scheduler
from arcade.domain.types import ActionType, GameAction

logger = logging.getLogger(__name__)

Wrap = Callable[[Callable[[], None]], None]
SchedulerFactory = Callable[[Wrap], Scheduler]
TickListener = Callable[[str, Dict[str, Any]], None]


@dataclass
class Session:
    sid: str
    runner: GameRunner
    scheduler: Scheduler
    lock: threading.RLock = field(default_factory=threading.RLock)


class GameService:
    """Use-case layer: one runner per connected client, snapshots out."""

    def __init__(
        self,
        game_data: GameData,
        stats: StatsSink,
        scheduler_factory: SchedulerFactory,
        seed: Optional[int] = None,
        repo: Optional[InMemorySessionRepo] = None,
    ) -> None:
        self._game_data = game_data
        self._stats = stats
        self._scheduler_factory = scheduler_factory
        self._seed = seed
        self._repo = repo or InMemorySessionRepo()
        self.on_tick: Optional[TickListener] = None

    # ───────────────── Selection ────────────────────────────────────
    def select_game(self, sid: str, game: str, difficulty: Optional[str] = None) -> Dict[str, Any]:
        session = self._session(sid)
        with session.lock:
            session.runner.select(game, difficulty)
            return session.runner.view()

    def leave_game(self, sid: str) -> None:
        session = self._repo.get(sid)
        if session:
            with session.lock:
                session.runner.teardown()

    # ───────────────── Gameplay ─────────────────────────────────────
    def execute_game_action(
        self, sid: str, action: str, payload: Dict[str, Any] | None = None
    ) -> Dict[str, Any]:
        session = self._repo.get(sid) or self._not_selected()
        try:
            action_type = ActionType[action.upper()]
        except (AttributeError, KeyError):
            raise ValueError(f"Unknown action '{action}'")
        with session.lock:
            session.runner.execute(GameAction(type=action_type, payload=payload or {}))
            return session.runner.view()

    def swipe(self, sid: str, start: Sequence[float], end: Sequence[float]) -> Dict[str, Any]:
        session = self._repo.get(sid) or self._not_selected()
        try:
            if len(start) != 2 or len(end) != 2:
                raise ValueError
            direction = decode_swipe(start, end)
        except (TypeError, ValueError):
            raise ValueError("Swipe needs [x, y] start and end points")
        with session.lock:
            session.runner.swipe(direction)
            return session.runner.view()

    def get_game_snapshot(self, sid: str) -> Optional[Dict[str, Any]]:
        session = self._repo.get(sid)
        if not session:
            return None
        with session.lock:
            return session.runner.view()

    def plays(self) -> int:
        return getattr(self._stats, "plays", 0)

    # ───────────────── Re/connect ───────────────────────────────────
    def disconnect(self, sid: str) -> None:
        session = self._repo.remove(sid)
        if session:
            with session.lock:
                session.runner.teardown()
            logger.info("session %s closed", sid)

    # ───────────────── Internals ───────────────────────────────────
    def _session(self, sid: str) -> Session:
        session = self._repo.get(sid)
        if session:
            return session

        holder: Dict[str, Session] = {}

        def wrap(callback: Callable[[], None]) -> None:
            s = holder["session"]
            with s.lock:
                callback()
                snap = s.runner.view()
            if self.on_tick:
                self.on_tick(sid, snap)

        scheduler = self._scheduler_factory(wrap)
        rng = random.Random(self._seed) if self._seed is not None else random.Random()
        runner = GameRunner(scheduler, self._stats, self._game_data, rng)
        session = Session(sid=sid, runner=runner, scheduler=scheduler)
        holder["session"] = session
        self._repo.add(sid, session)
        logger.info("session %s opened", sid)
        return session

    def session(self, sid: str) -> Optional[Session]:
        return self._repo.get(sid)

    @staticmethod
    def _not_selected() -> None:
        raise ValueError("No game selected")
