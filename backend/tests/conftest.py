import random

import pytest

from arcade.core.loader import DEFAULT_DATA_DIR, GameData
from arcade.domain.events import EventBus, PlayCompletedRelay
from arcade.domain.scheduler import ManualScheduler


class CountingSink:
    """Stats collaborator that only counts notifications."""

    def __init__(self):
        self.plays = 0

    def record_play(self):
        self.plays += 1


@pytest.fixture
def game_data():
    return GameData(root=DEFAULT_DATA_DIR)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def sink():
    return CountingSink()


@pytest.fixture
def bus(sink):
    bus = EventBus()
    bus.register_handler(PlayCompletedRelay(sink))
    return bus


@pytest.fixture
def rng():
    return random.Random(1234)
