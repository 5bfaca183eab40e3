import random

import pytest

from arcade.domain.games.minesweeper import (
    Mode,
    MinesweeperEngine,
    Phase,
    build_board,
    flood_reveal,
    neighbors8,
)
from arcade.domain.models.presets import MinesweeperDifficulty
from arcade.domain.types import ActionType, GameAction


class MinesAt(random.Random):
    """Places mines on the given flat indices instead of sampling."""

    def __init__(self, indices):
        super().__init__(0)
        self.indices = list(indices)

    def sample(self, population, k):
        assert k == len(self.indices)
        return list(self.indices)


TINY = {"tiny": MinesweeperDifficulty("tiny", rows=3, cols=3, mines=1)}


@pytest.fixture
def tiny(scheduler, bus):
    # single mine in the bottom-right corner
    return MinesweeperEngine(scheduler, bus, TINY, MinesAt([8]))


# ── board generation ──────────────────────────────────────────
@pytest.mark.parametrize("seed", range(20))
def test_generated_boards_have_exact_mines_and_counts(game_data, seed):
    preset = game_data.minesweeper_difficulties["hard"]
    board = build_board(preset, random.Random(seed))

    assert sum(c.is_mine for c in board.all_cells()) == preset.mines
    for cell in board.all_cells():
        expected = sum(
            board.cell(r, c).is_mine
            for r, c in neighbors8(cell.row, cell.col, board.rows, board.cols)
        )
        assert cell.neighbor_count == expected


def test_flood_reveals_zero_region_and_its_border_only():
    preset = MinesweeperDifficulty("strip", rows=1, cols=6, mines=1)
    board = build_board(preset, MinesAt([5]))  # . . . . 1 *

    opened = flood_reveal(board, 0, 0)

    assert opened == 5
    assert [c.is_revealed for c in board.cells[0]] == [True] * 5 + [False]
    assert board.cell(0, 4).neighbor_count == 1


def test_flood_stops_at_flagged_cells():
    preset = MinesweeperDifficulty("strip", rows=1, cols=6, mines=1)
    board = build_board(preset, MinesAt([5]))
    board.cell(0, 2).is_flagged = True

    assert flood_reveal(board, 0, 0) == 2
    assert not board.cell(0, 3).is_revealed


# ── engine ────────────────────────────────────────────────────
def test_win_notifies_exactly_once(tiny, sink):
    assert tiny.reveal(0, 0)

    assert tiny.phase == Phase.WON
    assert tiny.board.revealed_count() == 8
    assert sink.plays == 1

    # terminal phase ignores everything
    assert not tiny.reveal(2, 2)
    assert not tiny.toggle_flag(2, 2)
    assert sink.plays == 1


def test_revealing_a_mine_loses_and_shows_all_mines(tiny, sink):
    assert tiny.reveal(2, 2)

    assert tiny.phase == Phase.LOST
    assert sink.plays == 0
    snap = tiny.view()
    assert snap["phase"] == "lost"
    assert snap["cells"][2][2]["mine"] is True
    assert snap["cells"][0][0]["mine"] is False


def test_hidden_cells_do_not_leak_mines_while_playing(tiny):
    snap = tiny.view()
    assert snap["cells"][2][2] == {"revealed": False, "flagged": False, "mine": None, "count": None}


def test_flags_track_mines_left_and_block_digging(tiny):
    assert tiny.toggle_flag(2, 2)
    assert tiny.mines_left == 0

    assert not tiny.reveal(2, 2)
    assert tiny.phase == Phase.PLAYING

    assert tiny.toggle_flag(2, 2)
    assert tiny.mines_left == 1


def test_revealed_cell_cannot_be_flagged(tiny):
    tiny.reveal(1, 1)
    assert not tiny.toggle_flag(1, 1)
    assert tiny.mines_left == 1


def test_click_follows_mode(tiny):
    tiny.execute(GameAction(ActionType.SET_MODE, {"mode": "flag"}))
    assert tiny.mode == Mode.FLAG

    tiny.execute(GameAction(ActionType.CLICK_CELL, {"row": 2, "col": 2}))
    assert tiny.board.cell(2, 2).is_flagged
    assert tiny.phase == Phase.PLAYING

    tiny.execute(GameAction(ActionType.SET_MODE, {"mode": "dig"}))
    tiny.execute(GameAction(ActionType.CLICK_CELL, {"row": 2, "col": 2}))
    assert tiny.phase == Phase.PLAYING


def test_out_of_range_input_is_ignored(tiny):
    assert not tiny.reveal(3, 0)
    assert not tiny.toggle_flag(-1, 0)


def test_protocol_errors_raise(tiny):
    with pytest.raises(ValueError):
        tiny.execute(GameAction(ActionType.JUMP))
    with pytest.raises(ValueError):
        tiny.execute(GameAction(ActionType.REVEAL, {"row": 0}))
    with pytest.raises(ValueError):
        tiny.execute(GameAction(ActionType.SET_MODE, {"mode": "dance"}))
    with pytest.raises(ValueError):
        tiny.execute(GameAction(ActionType.NEW_GAME, {"difficulty": "nightmare"}))
    with pytest.raises(ValueError):
        tiny.execute(GameAction(ActionType.REVEAL, {"row": None, "col": 0}))
    with pytest.raises(ValueError):
        tiny.execute(GameAction(ActionType.TOGGLE_FLAG, 5))
    with pytest.raises(ValueError):
        tiny.execute(GameAction(ActionType.NEW_GAME, {"difficulty": ["tiny"]}))


def test_new_game_resets_from_terminal_phase(tiny):
    tiny.reveal(2, 2)
    tiny.execute(GameAction(ActionType.NEW_GAME, {}))

    assert tiny.phase == Phase.PLAYING
    assert tiny.board.revealed_count() == 0
    assert tiny.mines_left == 1


def test_easy_game_played_to_the_end(scheduler, bus, sink, game_data):
    engine = MinesweeperEngine(scheduler, bus, game_data.minesweeper_difficulties, random.Random(99))
    engine.new_game("easy")
    board = engine.board
    assert (board.rows, board.cols, board.mines) == (8, 8, 8)

    if not board.cell(0, 0).is_mine:
        engine.reveal(0, 0)
        assert board.revealed_count() >= 1

    for cell in list(board.all_cells()):
        if not cell.is_mine:
            engine.reveal(cell.row, cell.col)

    assert board.revealed_count() == 56
    assert engine.phase == Phase.WON
    assert sink.plays == 1
