# arcade/domain/engine.py
from __future__ import annotations
import logging
import random
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

from arcade.domain.events import PLAY_COMPLETED, BaseGameEvent, EventBus
from arcade.domain.scheduler import Scheduler
from arcade.domain.types import ActionType, GameAction, GameId

logger = logging.getLogger(__name__)

Handler = Callable[[GameAction], bool]


class MiniGameEngine(ABC):
    """Common shell for the six game engines.

    An engine owns its whole state. The host talks to it only through
    ``execute`` (input), the scheduler callbacks it registers itself (time),
    ``view`` (read-only snapshot) and ``teardown``.
    """

    game_id: GameId

    def __init__(
        self,
        scheduler: Scheduler,
        event_bus: EventBus,
        rng: Optional[random.Random] = None,
    ):
        self._scheduler = scheduler
        self._event_bus = event_bus
        self._rng = rng or random.Random()
        self._handles: Dict[str, int] = {}
        self._torn_down = False

    # ── host API ───────────────────────────────────────────────
    def execute(self, action: GameAction) -> bool:
        """Apply one input; False when it was ignored as an invalid move."""
        handler = self._handlers().get(action.type)
        if handler is None:
            raise ValueError(f"Cannot execute {action.type.name} in {self.game_id.value}")
        if self._torn_down:
            return False
        changed = handler(action)
        if not changed:
            logger.debug("%s ignored %s %s", self.game_id.value, action.type.name, action.payload)
        return changed

    def get_available_actions(self) -> List[str]:
        return [t.name.lower() for t in self._handlers()]

    def view(self) -> Dict[str, Any]:
        data = {"game": self.game_id.value}
        data.update(self._snapshot())
        data["available_actions"] = self.get_available_actions()
        return data

    def teardown(self) -> None:
        """Cancel every pending callback; the engine ignores everything after."""
        for name in list(self._handles):
            self._cancel(name)
        self._torn_down = True

    @property
    def torn_down(self) -> bool:
        return self._torn_down

    # ── for subclasses ─────────────────────────────────────────
    @abstractmethod
    def _handlers(self) -> Dict[ActionType, Handler]: ...

    @abstractmethod
    def _snapshot(self) -> Dict[str, Any]: ...

    def _record_play(self) -> None:
        if self._torn_down:
            return
        self._event_bus.emit(BaseGameEvent(PLAY_COMPLETED, {"game": self.game_id.value}))

    def _schedule(self, name: str, callback: Callable[[], None], delay_ms: int, repeat: bool = False) -> None:
        """Named callback slot; rescheduling a name replaces the old job."""
        self._cancel(name)
        if self._torn_down:
            return

        def fire() -> None:
            if not repeat:
                self._handles.pop(name, None)
            if not self._torn_down:
                callback()

        self._handles[name] = self._scheduler.schedule(fire, delay_ms, repeat)

    def _cancel(self, name: str) -> None:
        self._scheduler.cancel(self._handles.pop(name, None))

    def _is_scheduled(self, name: str) -> bool:
        return name in self._handles
