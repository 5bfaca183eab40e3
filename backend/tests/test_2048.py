import random

import pytest

from arcade.domain.games.g2048 import (
    G2048Engine,
    Phase,
    can_move,
    population,
    rotate,
    slide,
    slide_row_left,
)
from arcade.domain.types import ActionType, Direction, GameAction


class SpawnAt(random.Random):
    """Spawns the next tiles on scripted cells, always as a 2."""

    def __init__(self, cells=()):
        super().__init__(0)
        self.cells = list(cells)

    def choice(self, seq):
        if self.cells and self.cells[0] in seq:
            return self.cells.pop(0)
        return super().choice(seq)

    def random(self):
        return 0.5


@pytest.fixture
def engine(scheduler, bus):
    return G2048Engine(scheduler, bus, SpawnAt())


def test_new_game_spawns_two_tiles(engine):
    assert population(engine.grid) == 2
    assert engine.score == 0
    assert engine.phase == Phase.PLAYING


@pytest.mark.parametrize("seed", range(5))
def test_four_rotations_are_identity(seed):
    rng = random.Random(seed)
    grid = [[rng.choice([0, 2, 4, 8]) for _ in range(4)] for _ in range(4)]
    assert rotate(grid, 4) == grid
    assert rotate(rotate(grid), 3) == grid


@pytest.mark.parametrize(
    "row, expected, gained",
    [
        ([2, 2, 2, 0], [4, 2, 0, 0], 4),
        ([2, 2, 2, 2], [4, 4, 0, 0], 8),
        ([4, 0, 4, 8], [8, 8, 0, 0], 8),
        ([0, 0, 0, 2], [2, 0, 0, 0], 0),
        ([2, 4, 8, 16], [2, 4, 8, 16], 0),
    ],
)
def test_slide_row_left(row, expected, gained):
    assert slide_row_left(row) == (expected, gained)


def test_each_direction_moves_towards_its_edge():
    grid = [[0] * 4 for _ in range(4)]
    grid[1][2] = 2

    assert slide(grid, Direction.UP)[0][0][2] == 2
    assert slide(grid, Direction.DOWN)[0][3][2] == 2
    assert slide(grid, Direction.LEFT)[0][1][0] == 2
    assert slide(grid, Direction.RIGHT)[0][1][3] == 2


def test_move_without_effect_changes_nothing(engine):
    engine.grid = [[2, 4, 0, 0], [0] * 4, [0] * 4, [0] * 4]
    before = [row[:] for row in engine.grid]

    assert not engine.execute(GameAction(ActionType.MOVE, {"direction": "left"}))
    assert not engine.move(Direction.UP)
    assert engine.grid == before
    assert engine.score == 0


def test_left_merge_then_spawn_scenario(scheduler, bus):
    engine = G2048Engine(scheduler, bus, SpawnAt([(3, 3)]))
    engine.grid = [[2, 2, 0, 0], [0] * 4, [0] * 4, [0] * 4]
    compacted, _ = slide(engine.grid, Direction.LEFT)

    engine.execute(GameAction(ActionType.MOVE, {"direction": "LEFT"}))

    assert engine.grid[0] == [4, 0, 0, 0]
    assert engine.score == 4
    assert engine.grid[3][3] == 2
    assert population(engine.grid) == population(compacted) + 1


def test_board_with_no_moves_ends_the_game(engine, sink):
    engine.grid = [
        [0, 2, 4, 8],
        [16, 32, 64, 128],
        [4, 8, 16, 32],
        [64, 128, 256, 512],
    ]

    assert engine.move(Direction.LEFT)
    assert engine.grid[0] == [2, 4, 8, 2]
    assert not can_move(engine.grid)
    assert engine.phase == Phase.OVER
    assert engine.view()["phase"] == "over"
    assert sink.plays == 0

    assert not engine.move(Direction.RIGHT)
    engine.execute(GameAction(ActionType.NEW_GAME))
    assert engine.phase == Phase.PLAYING


def test_unknown_direction_is_a_protocol_error(engine):
    with pytest.raises(ValueError):
        engine.execute(GameAction(ActionType.MOVE, {"direction": "sideways"}))
