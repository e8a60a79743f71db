from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from match3.components.special_tile import NO_SPECIAL, SpecialTile
from match3.constants import EMPTY

Position = Tuple[int, int]


class BoardInvariantError(AssertionError):
    """Raised when the board reaches a state correct code can never produce."""


@dataclass(slots=True)
class Board:
    """Tile grid plus special-tile overlay for one match-3 session.

    Both arrays are column-major (``tiles[x][y]``) with ``y = 0`` the bottom row,
    so gravity compacts each inner list toward index 0. The last_* lists describe
    the most recent swap/power-up and are reset when the next one starts.
    """

    width: int
    height: int
    tile_type_count: int
    tiles: List[List[int]] = field(default_factory=list)
    specials: List[List[SpecialTile]] = field(default_factory=list)
    last_cleared: List[Position] = field(default_factory=list)
    last_spawned: List[Position] = field(default_factory=list)
    specials_created: List[Position] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError(f"Board dimensions must be positive, got {self.width}x{self.height}")
        if self.tile_type_count < 1:
            raise ValueError(f"tile_type_count must be at least 1, got {self.tile_type_count}")
        if not self.tiles:
            self.tiles = [[EMPTY] * self.height for _ in range(self.width)]
        if not self.specials:
            self.specials = [[NO_SPECIAL] * self.height for _ in range(self.width)]
        self.check_dimensions()

    def check_dimensions(self) -> None:
        for name, grid in (("tiles", self.tiles), ("specials", self.specials)):
            if len(grid) != self.width or any(len(column) != self.height for column in grid):
                raise BoardInvariantError(f"{name} grid does not match board size {self.width}x{self.height}")

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_tile(self, x: int, y: int) -> int:
        if not self.in_bounds(x, y):
            return EMPTY
        return self.tiles[x][y]

    def set_tile(self, x: int, y: int, value: int) -> None:
        if not self.in_bounds(x, y):
            return
        self.tiles[x][y] = value

    def get_special_tile(self, x: int, y: int) -> SpecialTile:
        if not self.in_bounds(x, y):
            return NO_SPECIAL
        return self.specials[x][y]

    def set_special_tile(self, x: int, y: int, special: SpecialTile) -> None:
        if not self.in_bounds(x, y):
            return
        self.specials[x][y] = special

    def clear_cell(self, x: int, y: int) -> None:
        if not self.in_bounds(x, y):
            return
        self.tiles[x][y] = EMPTY
        self.specials[x][y] = NO_SPECIAL

    def swap(self, a: Position, b: Position) -> None:
        """Exchange tile and overlay between two in-bounds cells."""
        (ax, ay), (bx, by) = a, b
        self.tiles[ax][ay], self.tiles[bx][by] = self.tiles[bx][by], self.tiles[ax][ay]
        self.specials[ax][ay], self.specials[bx][by] = self.specials[bx][by], self.specials[ax][ay]

    @staticmethod
    def are_adjacent(a: Position, b: Position) -> bool:
        ax, ay = a
        bx, by = b
        return abs(ax - bx) + abs(ay - by) == 1

    def positions(self) -> List[Position]:
        return [(x, y) for y in range(self.height) for x in range(self.width)]

    def empty_positions(self) -> List[Position]:
        return [(x, y) for x, y in self.positions() if self.tiles[x][y] == EMPTY]

    def reset_last_operation(self) -> None:
        self.last_cleared.clear()
        self.last_spawned.clear()
        self.specials_created.clear()

    def load_rows(self, rows: Sequence[Sequence[int]]) -> None:
        """Overwrite tile values from rows listed top row first; overlay is cleared."""
        if len(rows) != self.height or any(len(row) != self.width for row in rows):
            raise ValueError(f"Layout must be {self.height} rows of {self.width} values")
        for index, row in enumerate(rows):
            y = self.height - 1 - index
            for x, value in enumerate(row):
                self.tiles[x][y] = value
                self.specials[x][y] = NO_SPECIAL

    def rows(self) -> List[List[int]]:
        """Tile values as rows, top row first (the inverse of load_rows)."""
        return [[self.tiles[x][y] for x in range(self.width)] for y in reversed(range(self.height))]

    def snapshot(self) -> Tuple[Tuple[Tuple[int, ...], ...], Tuple[Tuple[SpecialTile, ...], ...]]:
        return (
            tuple(tuple(column) for column in self.tiles),
            tuple(tuple(column) for column in self.specials),
        )

    def view(self) -> "BoardView":
        return BoardView(self)


class BoardView:
    """Read-only window onto a Board; shares its storage instead of copying it."""

    __slots__ = ("_board",)

    def __init__(self, board: Board):
        self._board = board

    @property
    def width(self) -> int:
        return self._board.width

    @property
    def height(self) -> int:
        return self._board.height

    @property
    def tile_type_count(self) -> int:
        return self._board.tile_type_count

    def get_tile(self, x: int, y: int) -> int:
        return self._board.get_tile(x, y)

    def get_special_tile(self, x: int, y: int) -> SpecialTile:
        return self._board.get_special_tile(x, y)

    def are_adjacent(self, a: Position, b: Position) -> bool:
        return Board.are_adjacent(a, b)

    @property
    def last_cleared(self) -> Tuple[Position, ...]:
        return tuple(self._board.last_cleared)

    @property
    def last_spawned(self) -> Tuple[Position, ...]:
        return tuple(self._board.last_spawned)

    @property
    def specials_created(self) -> Tuple[Position, ...]:
        return tuple(self._board.specials_created)
