import random

import pytest

from proggen.library import Library, RewardTracker
from proggen.pits import (
    Map,
    PitsWorld,
    State,
    add_pitsworld,
    distance_reward,
    new_map,
    observe,
    start,
)


@pytest.fixture
def world():
    return PitsWorld(RewardTracker())


def test_map_reads_minus_one_outside():
    grid = Map(3, 2)
    assert grid[-1, 0] == -1
    assert grid[3, 0] == -1
    assert grid[0, 2] == -1
    assert grid[2, 1] == 0


def test_map_set_get_round_trip():
    grid = Map(4, 5)
    grid[3, 4] = 7
    assert grid[3, 4] == 7
    assert grid.cells.count(7) == 1


def test_map_set_outside_raises():
    grid = Map(2, 2)
    with pytest.raises(IndexError):
        grid[2, 0] = 1
    assert list(grid.cells) == [0, 0, 0, 0]
    assert grid[1, 0] == 0


def test_new_map_wall_column_and_opening():
    grid = new_map(random.Random(0))
    assert (grid.nx, grid.ny) == (10, 10)
    for y in range(10):
        expected = 0 if y == 8 else 1
        assert grid[4, y] == expected
    assert all(grid[x, 8] == 0 for x in range(10))


def test_new_map_is_deterministic_with_seed():
    first = new_map(random.Random(5))
    second = new_map(random.Random(5))
    assert len(first.cells) == 100
    assert set(first.cells) <= {0, 1}
    assert list(first.cells) == list(second.cells)


def test_start_position():
    assert start(Map()) == State(2, 2)


def test_observe_open_interior_is_zero():
    assert observe(Map(), State(5, 5)) == 0


def test_observe_reflects_walls():
    grid = Map()
    grid[5, 6] = 1
    open_grid = Map()
    assert observe(grid, State(5, 5)) > observe(open_grid, State(5, 5))


def test_distance_reward():
    assert distance_reward(State(3, 4)) == 7.0


def test_move_up_into_open_space(world):
    assert world.move(State(2, 2), Map(), 0) == State(2, 1)


def test_move_all_directions(world):
    grid = Map()
    assert world.move(State(2, 2), grid, 1) == State(3, 2)
    assert world.move(State(2, 2), grid, 2) == State(2, 3)
    assert world.move(State(2, 2), grid, 3) == State(1, 2)
    assert world.move(State(2, 2), grid, 4) == State(2, 1)


def test_move_off_edge_stays(world):
    grid = Map()
    assert world.move(State(9, 5), grid, 1) == State(9, 5)
    assert world.move(State(0, 5), grid, 3) == State(0, 5)
    assert world.move(State(5, 0), grid, 0) == State(5, 0)


def test_move_into_wall_goes_to_origin(world):
    grid = Map()
    grid[3, 2] = 1
    assert world.move(State(2, 2), grid, 1) == State(0, 0)


def test_move_negative_direction(world):
    grid = Map()
    assert world.move(State(2, 2), grid, -1) == State(0, 0)
    assert world.move(State(2, 2), grid, -4) == State(2, 1)


def test_visit_rewards_decay(world):
    grid = Map()
    world.move(State(2, 2), grid, 0)
    world.move(State(2, 2), grid, 0)
    rewards = [r.reward for r in world.tracker.rewards]
    assert rewards == [1.0, 0.5]
    assert world.visits[2, 2] == 2
    assert all(r.source == "move" for r in world.tracker.rewards)


def test_add_pitsworld(world):
    library = add_pitsworld(Library(), world, random.Random(1))
    assert set(library) == {"start", "move", "newMap", "observe"}
    assert library["move"].ptypes == ("State", "Map", "int")
    grid = library["newMap"]()
    state = library["start"](grid)
    assert state == State(2, 2)
    assert library["observe"](grid, state) == observe(grid, state)