"""A small grid world with walls, used as a rewarding program target."""

from __future__ import annotations

import random
from typing import NamedTuple

from proggen.library import Library, RewardTracker

_WALL_PROBABILITY = 0.05
_WALL_COLUMN = 4
_OPENING_ROW = 8
_SIZE = 10


class State(NamedTuple):
    """A position on the map."""

    x: int
    y: int


class Map:
    """A grid of integer cells; reading outside the grid yields -1."""

    def __init__(self, nx: int = _SIZE, ny: int = _SIZE) -> None:
        self.nx = nx
        self.ny = ny
        self.cells = [0] * (nx * ny)

    def _inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.nx and 0 <= y < self.ny

    def __getitem__(self, pos: tuple[int, int]) -> int:
        x, y = pos
        if not self._inside(x, y):
            return -1
        return self.cells[x + self.nx * y]

    def __setitem__(self, pos: tuple[int, int], value: int) -> None:
        x, y = pos
        if not self._inside(x, y):
            raise IndexError(f"position {(x, y)} is outside the {self.nx}x{self.ny} map")
        self.cells[x + self.nx * y] = value

    def __repr__(self) -> str:
        return f"Map(nx={self.nx}, ny={self.ny})"


def _truncated_mod(value: int, modulus: int) -> int:
    """Remainder whose sign follows the dividend."""
    remainder = abs(value) % modulus
    return remainder if value >= 0 else -remainder


class PitsWorld:
    """Tracks how often each cell is visited and rewards novel visits."""

    def __init__(
        self, tracker: RewardTracker, nx: int = _SIZE, ny: int = _SIZE
    ) -> None:
        self.tracker = tracker
        self.visits = Map(nx, ny)

    def visit_reward(self, state: State) -> float:
        """Count a visit to ``state``; the reward is 1 / (visits so far)."""
        count = self.visits[state]
        self.visits[state] = count + 1
        return 1.0 / (count + 1)

    def move(self, state: State, grid: Map, direction: int) -> State:
        """Step up, right, down or left (direction mod 4) into empty space.

        Stepping off the edge leaves the state unchanged; stepping into a
        wall, or a negative direction that is not a multiple of 4, yields
        the origin.
        """
        self.tracker.found_reward(self.visit_reward(state), "move")
        x, y = state
        d = _truncated_mod(direction, 4)
        if d == 0:
            if y == 0:
                return state
            if grid[x, y - 1] == 0:
                return State(x, y - 1)
        elif d == 1:
            if x == grid.nx - 1:
                return state
            if grid[x + 1, y] == 0:
                return State(x + 1, y)
        elif d == 2:
            if y == grid.ny - 1:
                return state
            if grid[x, y + 1] == 0:
                return State(x, y + 1)
        elif d == 3:
            if x == 0:
                return state
            if grid[x - 1, y] == 0:
                return State(x - 1, y)
        return State(0, 0)


def new_map(rng: random.Random | None = None) -> Map:
    """A 10x10 map with random walls, a wall column and one opening row."""
    rng = rng if rng is not None else random.Random()
    grid = Map(_SIZE, _SIZE)
    for x in range(grid.nx):
        for y in range(grid.ny):
            grid[x, y] = 0
            if rng.random() < _WALL_PROBABILITY:
                grid[x, y] = 1
            if x == _WALL_COLUMN:
                grid[x, y] = 1
            if y == _OPENING_ROW:
                grid[x, y] = 0
    return grid


def start(grid: Map) -> State:
    """The starting position on any map."""
    return State(2, 2)


def observe(grid: Map, state: State) -> int:
    """Encode the four neighbouring cells as one integer."""
    x, y = state
    return (
        1 * grid[x, y + 1]
        + 2 * grid[x + 1, y]
        + 4 * grid[x, y - 1]
        + 8 * grid[x - 1, y]
    )


def distance_reward(state: State) -> float:
    """Manhattan distance of ``state`` from the origin."""
    return float(state.x) + float(state.y)


def add_pitsworld(
    library: Library, world: PitsWorld, rng: random.Random | None = None
) -> Library:
    """Add ``start``, ``move``, ``newMap`` and ``observe`` to ``library``."""
    library.add(start, "start", ["Map"], "State")
    library.add(world.move, "move", ["State", "Map", "int"], "State")
    library.add(lambda: new_map(rng), "newMap", [], "Map")
    library.add(observe, "observe", ["Map", "State"], "int")
    return library