import random

import pytest

from arcade.domain.games.match3 import (
    CASCADE_DELAY_MS,
    EMPTY,
    MAX_CASCADE_DEPTH,
    Match3Engine,
    Phase,
    apply_gravity,
    fill_without_runs,
    find_matches,
    has_possible_moves,
)
from arcade.domain.models.presets import Match3Config
from arcade.domain.types import ActionType, GameAction

SMALL = Match3Config(size=4, palette=list("abcd"))

# colors repeat along anti-diagonals, so no single swap lines up three
LATIN = list("abcd" "bcda" "cdab" "dabc")

# swapping indices 2 and 3 lines up a-a-a on the top row
ONE_MOVE = list("aaba" "cdcd" "dcdc" "cdcd")


class FirstChoice(random.Random):
    def choice(self, seq):
        return seq[0]


@pytest.fixture
def engine(scheduler, bus, sink):
    engine = Match3Engine(scheduler, bus, SMALL, random.Random(3))
    scheduler.run_until_idle()
    sink.plays = 0
    return engine


def load(engine, board):
    engine.board = list(board)
    engine.score = 0
    engine.selected = None
    engine.phase = Phase.IDLE


# ── board algorithms ──────────────────────────────────────────
def test_find_matches_marks_rows_and_columns():
    board = list("aaab" "cbdb" "cdab" "dcab")
    assert find_matches(board, 4) == {0, 1, 2, 3, 7, 11, 15}


def test_find_matches_ignores_empty_cells():
    board = [EMPTY, EMPTY, EMPTY, "a"] + list("bcdb" "cdab" "dabc")
    assert find_matches(board, 4) == set()


def test_gravity_keeps_column_order_and_refills_top():
    board = ["x", "p", "q", EMPTY, "r", "s", "y", EMPTY, "t"]

    out = apply_gravity(board, 3, ["z"], random.Random(0))

    assert [out[r * 3] for r in range(3)] == ["z", "x", "y"]
    assert [out[r * 3 + 1] for r in range(3)] == ["z", "p", "r"]
    assert [out[r * 3 + 2] for r in range(3)] == ["q", "s", "t"]


@pytest.mark.parametrize("seed", range(10))
def test_fill_without_runs_has_no_matches(seed):
    board = fill_without_runs(7, list("abc"), random.Random(seed))
    assert find_matches(board, 7) == set()


def test_latin_board_has_no_moves():
    assert not has_possible_moves(LATIN, 4)
    assert has_possible_moves(ONE_MOVE, 4)


# ── engine ────────────────────────────────────────────────────
@pytest.mark.parametrize("seed", range(10))
def test_settled_boards_hold_no_runs(scheduler, bus, game_data, seed):
    engine = Match3Engine(scheduler, bus, game_data.match3, random.Random(seed))
    scheduler.run_until_idle()

    assert engine.phase in (Phase.IDLE, Phase.OVER)
    assert find_matches(engine.board, engine.size) == set()
    assert EMPTY not in engine.board


def test_non_adjacent_swap_is_rejected(engine):
    load(engine, ONE_MOVE)
    assert not engine.swap(0, 5)
    assert not engine.swap(3, 4)  # end of one row, start of the next
    assert engine.board == ONE_MOVE


def test_swap_without_match_is_rolled_back(engine, sink):
    load(engine, ONE_MOVE)
    assert not engine.swap(4, 5)
    assert engine.board == ONE_MOVE
    assert engine.phase == Phase.IDLE
    assert sink.plays == 0


def test_matching_swap_scores_and_cascades(engine, scheduler, sink):
    load(engine, ONE_MOVE)

    assert engine.execute(GameAction(ActionType.SWAP, {"i": 2, "j": 3}))
    assert engine.board[:3] == [EMPTY] * 3
    assert engine.score == 30
    assert engine.phase == Phase.RESOLVING
    assert sink.plays == 1

    # clicks wait for the board to settle
    assert not engine.select(8)

    scheduler.advance(CASCADE_DELAY_MS)
    assert EMPTY not in engine.board or engine.phase == Phase.RESOLVING
    scheduler.run_until_idle()
    assert engine.phase in (Phase.IDLE, Phase.OVER)
    assert find_matches(engine.board, 4) == set()


def test_selection_flow(engine):
    load(engine, ONE_MOVE)

    engine.select(0)
    assert engine.selected == 0
    engine.select(0)
    assert engine.selected is None

    engine.select(0)
    engine.select(5)
    assert engine.selected == 5

    engine.select(2)
    engine.select(3)
    assert engine.selected is None
    assert engine.phase == Phase.RESOLVING


def test_direct_swap_drops_pending_selection(engine):
    load(engine, ONE_MOVE)
    engine.select(8)

    assert engine.execute(GameAction(ActionType.SWAP, {"i": 2, "j": 3}))
    assert engine.selected is None
    assert engine.view()["selected"] is None


def test_dead_board_ends_the_game(engine, scheduler):
    load(engine, LATIN)
    engine.resolve_matches()

    assert engine.phase == Phase.OVER
    assert not engine.swap(0, 1)

    engine.execute(GameAction(ActionType.NEW_GAME))
    scheduler.run_until_idle()
    assert find_matches(engine.board, 4) == set()


def test_endless_cascade_is_capped(scheduler, bus, sink):
    # refills always come back as the same color
    engine = Match3Engine(scheduler, bus, SMALL, FirstChoice())
    assert engine.phase == Phase.RESOLVING

    scheduler.run_until_idle()

    assert sink.plays == MAX_CASCADE_DEPTH
    assert engine.phase in (Phase.IDLE, Phase.OVER)
    assert find_matches(engine.board, 4) == set()


def test_teardown_stops_pending_cascade(engine, scheduler):
    load(engine, ONE_MOVE)
    engine.swap(2, 3)
    engine.teardown()

    scheduler.advance(CASCADE_DELAY_MS * 5)
    assert engine.board[:3] == [EMPTY] * 3
    assert scheduler.pending() == 0
