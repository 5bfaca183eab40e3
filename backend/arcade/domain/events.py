# arcade/domain/events.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Protocol

logger = logging.getLogger(__name__)

PLAY_COMPLETED = "play_completed"


class GameEvent(Protocol):
    def get_type(self) -> str: ...
    def get_data(self) -> Dict[str, Any]: ...


class EventHandler(Protocol):
    def can_handle(self, event: GameEvent) -> bool: ...
    def handle(self, event: GameEvent) -> None: ...


class StatsSink(Protocol):
    """External stats collaborator: one no-argument notification."""

    def record_play(self) -> None: ...


@dataclass
class BaseGameEvent:
    event_type: str
    data: Dict[str, Any]

    def get_type(self) -> str:
        return self.event_type

    def get_data(self) -> Dict[str, Any]:
        return self.data


class EventBus:
    """Event bus shared by one runner and the engine it hosts."""

    def __init__(self):
        self._handlers: List[EventHandler] = []

    def register_handler(self, handler: EventHandler) -> None:
        self._handlers.append(handler)

    def clear(self) -> None:
        self._handlers.clear()

    def emit(self, event: GameEvent) -> None:
        for handler in list(self._handlers):
            if handler.can_handle(event):
                handler.handle(event)


class PlayCompletedRelay:
    """Forwards play_completed events to the stats collaborator."""

    def __init__(self, sink: StatsSink):
        self._sink = sink

    def can_handle(self, event: GameEvent) -> bool:
        return event.get_type() == PLAY_COMPLETED

    def handle(self, event: GameEvent) -> None:
        logger.info("play completed: %s", event.get_data().get("game"))
        self._sink.record_play()
