from __future__ import annotations

from typing import Iterable, List, Sequence

from match3.events.bus import EventBus
from match3.systems.board import BoardSystem
from match3.world import create_world


class ScriptedSpawner:
    """Hands out a fixed sequence of values; running dry is a test bug."""

    def __init__(self, values: Iterable[int], tile_type_count: int = 6):
        self._values = list(values)
        self._count = tile_type_count
        self.drawn = 0

    def tile_type_count(self) -> int:
        return self._count

    def next_tile_value(self) -> int:
        if self.drawn >= len(self._values):
            raise RuntimeError(f"ScriptedSpawner exhausted after {self.drawn} values")
        value = self._values[self.drawn]
        self.drawn += 1
        return value


class ConstantSpawner:
    def __init__(self, value: int = 0, tile_type_count: int = 6):
        self.value = value
        self._count = tile_type_count

    def tile_type_count(self) -> int:
        return self._count

    def next_tile_value(self) -> int:
        return self.value


def pattern_rows(width: int = 8, height: int = 8, types: int = 6) -> List[List[int]]:
    """Run-free layout (rows top first): value(x, y) = (x + 2y) % types."""
    return [[(x + 2 * y) % types for x in range(width)] for y in reversed(range(height))]


def build_board(
    rows: Sequence[Sequence[int]] | None = None,
    *,
    width: int = 8,
    height: int = 8,
    types: int = 6,
    seed: int = 7,
    refill: Iterable[int] | None = None,
):
    """World + bus + BoardSystem with an optional fixed layout and scripted refills."""
    bus = EventBus()
    world = create_world(seed=seed)
    board_system = BoardSystem(world, bus, width, height, tile_type_count=types)
    if rows is not None:
        board_system.board.load_rows(rows)
    if refill is not None:
        setattr(world, "spawner", ScriptedSpawner(refill, types))
    return world, bus, board_system


def record(bus: EventBus, *names: str) -> List[tuple]:
    """Subscribe to names and collect (name, payload) tuples in emission order."""
    received: List[tuple] = []
    for name in names:
        bus.subscribe(name, lambda sender, _name=name, **payload: received.append((_name, payload)))
    return received


def set_cells(board, cells) -> None:
    """Overwrite tile values from a {(x, y): value} mapping."""
    for (x, y), value in cells.items():
        board.set_tile(x, y, value)


# On the pattern layout, swapping (2, 0) with (2, 1) lines up exactly one run
# of three 2s along the bottom row.
SINGLE_RUN_CELLS = {(0, 0): 2, (1, 0): 2, (2, 0): 5, (2, 1): 2}
# Same swap, but the bottom row becomes a run of four ending at (3, 0).
FOUR_RUN_CELLS = {(0, 0): 2, (1, 0): 2, (2, 0): 5, (3, 0): 2, (2, 1): 2}
SWAP = ((2, 0), (2, 1))


def expected_after_bottom_clear(columns, xs, refill):
    """Columns after clearing y = 0 in columns xs and refilling their tops in order."""
    expected = [list(column) for column in columns]
    for x, value in zip(xs, refill):
        expected[x] = expected[x][1:] + [value]
    return expected
